"""
Tests for the one-shot command line interface.
"""

import json

from typer.testing import CliRunner

from doerfy import __version__
from doerfy.cli.main import app
from doerfy.core import service

runner = CliRunner()


def test_add_and_show():
    result = runner.invoke(app, ["add", "Write report", "--list", "work", "--priority", "high"])
    assert result.exit_code == 0
    assert "Created task" in result.output

    result = runner.invoke(app, ["show", "1", "--json"])
    data = json.loads(result.stdout)
    assert data["title"] == "Write report"
    assert data["list"] == "work"
    assert data["priority"] == "high"


def test_add_with_invalid_stage_fails():
    result = runner.invoke(app, ["add", "Bad", "--stage", "later"])
    assert result.exit_code == 1
    assert "Invalid stage" in result.output


def test_ls_hides_done_unless_asked():
    service.create_task("Open")
    service.create_task("Closed", time_stage="done")

    result = runner.invoke(app, ["ls", "--raw"])
    assert result.exit_code == 0
    assert "Open" in result.stdout
    assert "Closed" not in result.stdout

    result = runner.invoke(app, ["ls", "--all", "--json"])
    assert {t["title"] for t in json.loads(result.stdout)} == {"Open", "Closed"}


def test_ls_filters():
    service.create_task("Work", list_name="work", labels=["finance"])
    service.create_task("Home", list_name="home")

    result = runner.invoke(app, ["ls", "--list", "work", "--json"])
    assert [t["title"] for t in json.loads(result.stdout)] == ["Work"]

    result = runner.invoke(app, ["ls", "--label", "finance", "--raw"])
    assert result.stdout.strip().endswith("Work")


def test_show_missing_task():
    result = runner.invoke(app, ["show", "42"])
    assert result.exit_code == 1
    assert "Task 42 not found" in result.output


def test_edit_desc_and_set():
    task = service.create_task("Old")

    assert runner.invoke(app, ["edit", str(task.id), "New"]).exit_code == 0
    assert runner.invoke(app, ["desc", str(task.id), "Details"]).exit_code == 0
    result = runner.invoke(app, ["set", str(task.id), "--energy", "low", "--highlight", "--json"])

    data = json.loads(result.stdout)
    assert data["title"] == "New"
    assert data["description"] == "Details"
    assert data["energy"] == "low"
    assert data["highlighted"] is True


def test_set_without_changes_fails():
    task = service.create_task("Nothing")
    result = runner.invoke(app, ["set", str(task.id)])
    assert result.exit_code == 1
    assert "Nothing to change" in result.output


def test_label_and_check():
    task = service.create_task("Trip")

    runner.invoke(app, ["label", str(task.id), "travel", "urgent"])
    runner.invoke(app, ["label", str(task.id), "--", "-urgent"])
    assert service.get_task_or_raise(task.id).labels == ["travel"]

    runner.invoke(app, ["check", str(task.id), "Book flights"])
    result = runner.invoke(app, ["check", str(task.id), "1", "--json"])
    items = json.loads(result.stdout)
    assert items[0]["text"] == "Book flights"
    assert items[0]["completed"] is True


def test_done_reports_bad_ids_but_completes_the_rest():
    task = service.create_task("Finish")
    result = runner.invoke(app, ["done", f"{task.id},abc"])

    assert result.exit_code == 0
    assert "Completed: Finish" in result.output
    assert "Invalid task ID: abc" in result.output
    assert service.get_task_or_raise(task.id).time_stage == "done"


def test_rm_multiple_asks_for_confirmation():
    a = service.create_task("A")
    b = service.create_task("B")

    result = runner.invoke(app, ["rm", f"{a.id},{b.id}"], input="n\n")
    assert "Cancelled" in result.output
    assert len(service.list_tasks()) == 2

    result = runner.invoke(app, ["rm", f"{a.id},{b.id}", "--yes"])
    assert result.exit_code == 0
    assert service.list_tasks() == []


def test_mv_and_board_json():
    task = service.create_task("Mover")
    result = runner.invoke(app, ["mv", str(task.id), "today"])
    assert result.exit_code == 0

    result = runner.invoke(app, ["board", "--json"])
    columns = json.loads(result.stdout)
    assert list(columns) == ["queue", "do", "doing", "today", "done"]
    assert [t["title"] for t in columns["today"]] == ["Mover"]


def test_mv_to_same_stage_fails():
    task = service.create_task("Stuck", time_stage="do")
    result = runner.invoke(app, ["mv", str(task.id), "do"])
    assert result.exit_code == 1
    assert "Cannot move" in result.output


def test_reorder():
    a = service.create_task("A", time_stage="do")
    b = service.create_task("B", time_stage="do")
    result = runner.invoke(app, ["reorder", str(b.id), str(a.id)])
    assert result.exit_code == 0
    assert [t.title for t in service.board()["do"]] == ["B", "A"]


def test_schedule_and_unschedule():
    task = service.create_task("Dentist")
    result = runner.invoke(
        app, ["schedule", str(task.id), "+3", "--time", "14:00", "--repeat", "weekly", "--json"]
    )
    data = json.loads(result.stdout)
    assert data["time_stage"] == "doing"
    assert data["schedule"]["time"] == "14:00"
    assert data["schedule"]["recurring"]["type"] == "weekly"

    result = runner.invoke(app, ["unschedule", str(task.id), "--json"])
    assert json.loads(result.stdout)["schedule"] is None


def test_schedule_bad_date_fails():
    task = service.create_task("Dentist")
    result = runner.invoke(app, ["schedule", str(task.id), "someday"])
    assert result.exit_code == 1
    assert "Invalid date" in result.output


def test_schedule_out_of_range_date_fails():
    task = service.create_task("Far future")
    result = runner.invoke(app, ["schedule", str(task.id), "+99999999"])
    assert result.exit_code == 1
    assert "too far in the future" in result.output
    assert service.get_task_or_raise(task.id).schedule is None


def test_reschedule_today():
    task = service.create_task("Call")
    result = runner.invoke(app, ["reschedule", str(task.id), "today", "--json"])
    data = json.loads(result.stdout)
    assert data["schedule"]["time"] == "09:00"
    assert data["time_stage"] in ("today", "doing")


def test_lists_and_calendar_json():
    service.create_task("Work", list_name="work")
    result = runner.invoke(app, ["lists", "--json"])
    assert list(json.loads(result.stdout)) == ["work"]

    result = runner.invoke(app, ["calendar", "2025-03", "--json"])
    assert result.exit_code == 0

    result = runner.invoke(app, ["calendar", "2025-13"])
    assert result.exit_code == 1


def test_home_json():
    service.create_task("Now", time_stage="today")
    result = runner.invoke(app, ["home", "--json"])
    data = json.loads(result.stdout)
    assert data["user"] == "tester"
    assert [t["title"] for t in data["today"]] == ["Now"]


def test_timebox_commands():
    result = runner.invoke(app, ["timebox", "set", "doing", "--warn", "3", "--expire", "5", "--json"])
    data = json.loads(result.stdout)
    assert (data["warn_threshold"], data["expire_threshold"]) == (3, 5)

    result = runner.invoke(app, ["timebox", "set", "doing", "--warn", "5"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["timebox", "reset", "--yes"])
    assert result.exit_code == 0
    assert service.get_time_box_or_raise("doing").warn_threshold == 6

    result = runner.invoke(app, ["timebox", "ls", "--raw"])
    assert "Do Today" in result.stdout


def test_banner_commands():
    assert runner.invoke(app, ["banner", "image", "https://example.com/a.jpg"]).exit_code == 0
    assert runner.invoke(app, ["banner", "quote", "Keep going", "--author", "Me"]).exit_code == 0
    assert runner.invoke(app, ["banner", "set", "--volume", "30", "--autoplay"]).exit_code == 0

    result = runner.invoke(app, ["banner", "show", "--json"])
    data = json.loads(result.stdout)
    assert data["volume"] == 30
    assert data["autoplay"] is True
    assert data["quotes"][0]["author"] == "Me"

    assert runner.invoke(app, ["banner", "set", "--volume", "300"]).exit_code == 1
    assert runner.invoke(app, ["banner", "rm", "image", "1"]).exit_code == 0
    assert service.get_banner_config().images == []


def test_seed_and_refresh():
    result = runner.invoke(app, ["seed", "--yes"])
    assert result.exit_code == 0
    assert len(service.list_tasks()) == 11

    result = runner.invoke(app, ["refresh", "--json"])
    assert result.exit_code == 0
    assert isinstance(json.loads(result.stdout), list)


def test_version():
    result = runner.invoke(app, ["version"])
    assert __version__ in result.output

"""
Tests for the REPL: command dispatch, views, filters and the task
handlers.
"""

import pytest

from doerfy.core import service
from doerfy.core.constants import VIEW_TIMEBOX
from doerfy.core.filters import FilterStore

from doerfy.repl.commands.filters import parse_filter_value, resolve_filter_key
from doerfy.repl.commands.tasks import flag_bool, split_values
from doerfy.repl.main import HANDLERS, REPLContext, execute_command, repl_context, run_repl
from doerfy.repl.parser import parse_command
from doerfy.core.exceptions import InvalidInputError


@pytest.fixture(autouse=True)
def fresh_context():
    """Every test starts on the timebox view with no filters."""
    repl_context.view = VIEW_TIMEBOX
    repl_context.filters = FilterStore()
    yield repl_context


def run(line):
    return execute_command(parse_command(line))


# --- Context and dispatch ---


def test_prompt_shows_view_and_filter_count():
    context = REPLContext()
    assert context.get_prompt() == "doerfy:[timebox]> "

    context.filters.set_filter("timebox", priority=["high"])
    assert context.get_prompt() == "doerfy:[timebox|1 filter]> "

    context.filters.set_filter("timebox", list_name="work")
    assert context.get_prompt() == "doerfy:[timebox|2 filters]> "

    context.view = "lists"
    assert context.get_prompt() == "doerfy:[lists]> "


def test_exit_and_empty_input(capsys):
    assert run("") is True
    assert run("quit") is False
    assert "Goodbye!" in capsys.readouterr().out


def test_unknown_command(capsys):
    assert run("frobnicate") is True
    assert "Unknown command: frobnicate" in capsys.readouterr().out


def test_run_repl_reads_until_exit(monkeypatch, capsys):
    lines = iter(["add Piped task", "exit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

    run_repl()

    out = capsys.readouterr().out
    assert "Doerfy REPL" in out
    assert "Created task #1" in out
    assert "Goodbye!" in out


def test_run_repl_stops_on_eof(monkeypatch, capsys):
    def eof(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    run_repl()
    assert "Goodbye!" in capsys.readouterr().out


def test_run_repl_survives_unexpected_errors(monkeypatch, capsys):
    lines = iter(["boom", "exit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

    def explode(result):
        raise RuntimeError("kaput")

    monkeypatch.setitem(HANDLERS, "boom", explode)
    run_repl()

    out = capsys.readouterr().out
    assert "Unexpected error: kaput" in out
    assert "Goodbye!" in out


# --- Task handlers ---


def test_add_with_flags(capsys):
    run('add "Plan trip" --list travel --stage do --priority high --label summer,family')

    task = service.get_task_or_raise(1)
    assert task.title == "Plan trip"
    assert task.list_name == "travel"
    assert task.time_stage == "do"
    assert task.priority == "high"
    assert task.labels == ["summer", "family"]
    assert "Created task #1" in capsys.readouterr().out


def test_add_uses_list_filter_of_active_view():
    run("filter list errands")
    run("add Buy stamps")
    assert service.get_task_or_raise(1).list_name == "errands"


def test_add_without_title(capsys):
    run("add")
    assert "Task title required" in capsys.readouterr().out
    assert service.list_tasks() == []


def test_add_invalid_stage(capsys):
    run("add Thing --stage later")
    assert "Invalid stage" in capsys.readouterr().out


def test_ls_applies_view_filters(capsys):
    service.create_task("Work thing", list_name="work")
    service.create_task("Home thing", list_name="home")
    capsys.readouterr()

    run("filter list home")
    run("ls")
    out = capsys.readouterr().out
    assert "Home thing" in out
    assert "Work thing" not in out


def test_ls_hides_done_unless_all(capsys):
    service.create_task("Closed", time_stage="done")
    run("ls")
    assert "No tasks found" in capsys.readouterr().out

    run("ls --all")
    assert "Closed" in capsys.readouterr().out


def test_edit_desc_and_set():
    task = service.create_task("Old")
    run(f"edit {task.id} Brand new title")
    run(f"desc {task.id} Some details")
    run(f"set {task.id} --priority low --highlight --in-list no")

    task = service.get_task_or_raise(task.id)
    assert task.title == "Brand new title"
    assert task.description == "Some details"
    assert task.priority == "low"
    assert task.highlighted is True
    assert task.show_in_list is False


def test_set_rejects_unknown_option(capsys):
    task = service.create_task("Props")
    run(f"set {task.id} --colour red")
    assert "Unknown option --colour" in capsys.readouterr().out


def test_set_bare_value_flag_clears():
    task = service.create_task("Props")
    service.update_task_properties(task.id, location="garage")
    run(f"set {task.id} --location")
    assert service.get_task_or_raise(task.id).location is None


def test_label_add_and_remove():
    task = service.create_task("Labels")
    run(f"label {task.id} urgent home")
    run(f"label {task.id} -urgent")
    assert service.get_task_or_raise(task.id).labels == ["home"]


def test_checklist_flow(capsys):
    task = service.create_task("Trip")
    run(f'check {task.id} "Book flights"')
    run(f"check {task.id} 1")
    capsys.readouterr()

    run(f"check {task.id}")
    assert "1. Book flights" in capsys.readouterr().out

    run(f"check {task.id} 1 --rm")
    assert service.get_task_or_raise(task.id).checklist_items == []


def test_done_multiple(capsys):
    a = service.create_task("A")
    b = service.create_task("B")
    run(f"done {a.id},{b.id},99")

    out = capsys.readouterr().out
    assert out.count("Completed:") == 2
    assert "Task 99 not found" in out


def test_done_invalid_ids(capsys):
    run("done abc")
    assert "Invalid task ID(s): abc" in capsys.readouterr().out


def test_rm_confirms(monkeypatch):
    task = service.create_task("Keep me")
    monkeypatch.setattr("builtins.input", lambda prompt="": "n")
    run(f"rm {task.id}")
    assert service.get_task_or_raise(task.id)

    run(f"rm {task.id} --yes")
    assert service.list_tasks() == []


# --- Board and scheduling handlers ---


def test_mv_and_reorder():
    a = service.create_task("A", time_stage="do")
    b = service.create_task("B", time_stage="do")

    run(f"mv {a.id} today")
    assert service.get_task_or_raise(a.id).time_stage == "today"

    run(f"reorder {b.id} {a.id}")
    assert service.get_task_or_raise(b.id).time_stage == "today"


def test_mv_needs_stage(capsys):
    task = service.create_task("A")
    run(f"mv {task.id}")
    assert "Target stage required" in capsys.readouterr().out


def test_schedule_with_repeat():
    task = service.create_task("Gym")
    run(f"schedule {task.id} +1 --time 07:00 --repeat weekly --on mon,thu --times 10")

    schedule = service.get_task_or_raise(task.id).schedule
    assert schedule.time == "07:00"
    assert schedule.recurring.week_days == ["mon", "thu"]
    assert schedule.recurring.occurrences == 10


def test_schedule_bad_number(capsys):
    task = service.create_task("Gym")
    run(f"schedule {task.id} today --lead-days soon")
    assert "--lead-days needs a whole number" in capsys.readouterr().out
    assert service.get_task_or_raise(task.id).schedule is None


def test_unschedule_and_reschedule():
    task = service.create_task("Call")
    run(f"reschedule {task.id} tomorrow")
    assert service.get_task_or_raise(task.id).schedule.time == "09:00"

    run(f"unschedule {task.id}")
    assert service.get_task_or_raise(task.id).schedule is None


def test_views_render(capsys):
    service.create_task("Visible", list_name="work")
    for line in ("board", "lists", "calendar", "calendar 2025-03", "home", "refresh"):
        assert run(line) is True
    out = capsys.readouterr().out
    assert "Visible" in out
    assert "Error" not in out


def test_calendar_bad_month(capsys):
    run("calendar march")
    assert "Invalid month 'march'" in capsys.readouterr().out


# --- Views and filters ---


def test_view_switch(capsys):
    run("view lists")
    assert repl_context.view == "lists"

    run("view kanban")
    assert repl_context.view == "lists"
    assert "Invalid view 'kanban'" in capsys.readouterr().out


def test_filters_are_per_view(capsys):
    run("filter priority high medium")
    assert repl_context.active_filters() == {"priority": ["high", "medium"]}

    run("view lists")
    assert repl_context.active_filters() == {}

    run("view timebox")
    run("filter")
    out = capsys.readouterr().out
    assert "priority = high, medium" in out


def test_filter_rejects_bad_values(capsys):
    run("filter priority urgent")
    run("filter colour red")
    out = capsys.readouterr().out
    assert "Invalid priority 'urgent'" in out
    assert "Unknown filter 'colour'" in out
    assert repl_context.active_filters() == {}


def test_unfilter_one_or_all():
    run("filter priority high")
    run("filter stage doing,today")
    run("unfilter priority")
    assert repl_context.active_filters() == {"time_stage": ["doing", "today"]}

    run("unfilter")
    assert repl_context.active_filters() == {}


def test_resolve_filter_key_and_values():
    assert resolve_filter_key("stage") == "time_stage"
    assert resolve_filter_key("LABEL") == "labels"
    assert resolve_filter_key("assignee") == "assignee"
    with pytest.raises(InvalidInputError):
        resolve_filter_key("colour")

    assert parse_filter_value("labels", ["a,b", "c"]) == ["a", "b", "c"]
    assert parse_filter_value("location", ["home", "office"]) == "home office"
    with pytest.raises(InvalidInputError):
        parse_filter_value("priority", [])


# --- Time boxes, banner, system ---


def test_timebox_set_and_reset(monkeypatch, capsys):
    run("timebox set doing --warn 2 --expire 4")
    assert service.get_time_box_or_raise("doing").warn_threshold == 2

    run("timebox set doing --warn many")
    assert "--warn needs a whole number" in capsys.readouterr().out

    run("timebox set doing --warn 5")
    assert "Warning threshold must be less than expiry threshold" in capsys.readouterr().out

    monkeypatch.setattr("builtins.input", lambda prompt="": "y")
    run("timebox reset")
    assert service.get_time_box_or_raise("doing").warn_threshold == 6


def test_banner_commands():
    run("banner image https://example.com/a.jpg")
    run('banner quote "Onwards" --author Me')
    run("banner audio https://example.com/rain.mp3 --name Rain")
    run("banner set --volume 20 --rotate yes")

    config = service.get_banner_config()
    assert len(config.images) == 1
    assert config.quotes[0]["author"] == "Me"
    assert config.audio[0]["name"] == "Rain"
    assert config.volume == 20
    assert config.quote_rotation is True

    run("banner rm image 1")
    assert service.get_banner_config().images == []


def test_seed_help_version(capsys):
    run("seed --yes")
    assert len(service.list_tasks()) == 11

    run("help")
    run("version")
    out = capsys.readouterr().out
    assert "Doerfy REPL Help" in out
    assert "Doerfy v" in out


def test_flag_helpers():
    assert flag_bool(None) is None
    assert flag_bool(True) is True
    assert flag_bool("Off") is False
    with pytest.raises(ValueError):
        flag_bool("maybe")

    assert split_values("a, b,,c") == ["a", "b", "c"]
    assert split_values(True) == []

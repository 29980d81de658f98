"""
Tests for the service layer: task editing, board moves, scheduling,
refresh and the list/calendar/home views.
"""

from datetime import date, timedelta

import pytest

from conftest import NOW
from doerfy.core import service
from doerfy.core.exceptions import (
    ChecklistItemNotFoundError,
    InvalidDropTargetError,
    InvalidInputError,
    InvalidStageError,
    TaskNotFoundError,
)
from doerfy.core.filters import FilterStore
from doerfy.core.history import current_history_stage


# --- Tasks ---


def test_create_task_defaults():
    task = service.create_task("Write report", now=NOW)

    assert task.id == 1
    assert task.time_stage == "queue"
    assert task.list_name == "personal"
    assert task.assignee == "tester"
    assert task.created_by == "tester"
    assert task.stage_entry_date == NOW.isoformat()
    assert [h.time_stage for h in task.history] == ["queue"]


def test_blank_title_becomes_new_task():
    assert service.create_task("   ").title == "New Task"


def test_create_task_validates_choices():
    with pytest.raises(InvalidStageError):
        service.create_task("Bad", time_stage="later")
    with pytest.raises(InvalidInputError):
        service.create_task("Bad", priority="urgent")
    with pytest.raises(InvalidInputError):
        service.create_task("Bad", energy="none")


def test_create_task_appends_to_bottom_of_stage():
    first = service.create_task("One", time_stage="do")
    second = service.create_task("Two", time_stage="do")
    assert second.position == first.position + 1


def test_create_task_deduplicates_labels():
    task = service.create_task("Labels", labels=["a", " b", "a", ""])
    assert task.labels == ["a", "b"]


def test_get_task_or_raise():
    with pytest.raises(TaskNotFoundError):
        service.get_task_or_raise(7)


def test_list_tasks_can_hide_done():
    service.create_task("Open")
    service.create_task("Closed", time_stage="done")

    assert len(service.list_tasks()) == 2
    assert [t.title for t in service.list_tasks(include_done=False)] == ["Open"]
    assert [t.title for t in service.list_tasks(time_stage="done", include_done=False)] == ["Closed"]


def test_list_names():
    service.create_task("A", list_name="work")
    service.create_task("B")
    assert service.list_names() == ["personal", "work"]


def test_update_title_and_description():
    task = service.create_task("Old")
    assert service.update_task_title(task.id, "  New  ").title == "New"
    assert service.update_task_title(task.id, "").title == "New Task"
    assert service.update_task_description(task.id, " Notes ").description == "Notes"
    assert service.update_task_description(task.id, "   ").description == ""


def test_update_task_properties():
    task = service.create_task("Props")
    updated = service.update_task_properties(
        task.id, priority="HIGH", location="office", highlighted=True, show_in_list=False
    )

    assert updated.priority == "high"
    assert updated.location == "office"
    assert updated.highlighted is True
    assert updated.show_in_list is False

    cleared = service.update_task_properties(task.id, location="", priority=None)
    assert cleared.location is None
    assert cleared.priority == "high", "None values are skipped"


def test_update_task_properties_rejects_bad_input():
    task = service.create_task("Props")
    with pytest.raises(InvalidInputError):
        service.update_task_properties(task.id, colour="red")
    with pytest.raises(InvalidInputError):
        service.update_task_properties(task.id, list_name="  ")
    with pytest.raises(InvalidInputError):
        service.update_task_properties(task.id, energy="max")


def test_labels():
    task = service.create_task("Labels")
    service.add_label(task.id, "finance")
    again = service.add_label(task.id, "finance")
    assert again.labels == ["finance"]

    assert service.remove_label(task.id, "finance").labels == []
    with pytest.raises(InvalidInputError):
        service.remove_label(task.id, "finance")
    with pytest.raises(InvalidInputError):
        service.add_label(task.id, " ")


def test_checklist_items_by_id_or_number():
    task = service.create_task("Checklist")
    service.add_checklist_item(task.id, "First")
    task = service.add_checklist_item(task.id, "Second")
    first_id = task.checklist_items[0].id

    toggled = service.toggle_checklist_item(task.id, first_id)
    assert toggled.checklist_items[0].completed is True
    toggled = service.toggle_checklist_item(task.id, "2")
    assert toggled.checklist_items[1].completed is True

    remaining = service.remove_checklist_item(task.id, "1")
    assert [c.text for c in remaining.checklist_items] == ["Second"]

    with pytest.raises(ChecklistItemNotFoundError):
        service.toggle_checklist_item(task.id, "9")
    with pytest.raises(InvalidInputError):
        service.add_checklist_item(task.id, "")


def test_complete_task_moves_to_done():
    task = service.create_task("Finish", time_stage="doing", now=NOW - timedelta(days=2))
    done = service.complete_task(task.id, NOW)

    assert done.time_stage == "done"
    assert done.status == "0"
    assert current_history_stage(done) == "done"
    assert done.history[-2].days_in_stage == 2


def test_complete_done_task_is_a_no_op():
    task = service.create_task("Finished", time_stage="done")
    again = service.complete_task(task.id, NOW)
    assert len(again.history) == 1


def test_complete_recurring_task_rolls_forward():
    task = service.create_task("Standup")
    service.schedule_task(task.id, date(2025, 3, 12), time="09:00", repeat="daily", now=NOW)

    rolled = service.complete_task(task.id, NOW)

    assert rolled.time_stage == "doing"
    assert rolled.schedule.date == "2025-03-13"
    assert rolled.schedule.recurring.completed_occurrences == 1


def test_complete_long_overdue_recurring_task_keeps_repeating():
    task = service.create_task("Water plants")
    service.schedule_task(task.id, date(2000, 1, 1), repeat="daily", now=NOW)

    rolled = service.complete_task(task.id, NOW)

    assert rolled.time_stage != "done"
    assert rolled.schedule.date == "2025-03-13"


def test_recurring_task_completes_once_rule_ends():
    task = service.create_task("Course")
    service.schedule_task(task.id, date(2025, 3, 12), repeat="daily", occurrences=1, now=NOW)

    done = service.complete_task(task.id, NOW)
    assert done.time_stage == "done"


def test_complete_tasks_and_delete():
    a = service.create_task("A")
    b = service.create_task("B")
    assert [t.time_stage for t in service.complete_tasks([a.id, b.id], NOW)] == ["done", "done"]

    service.delete_task(a.id)
    with pytest.raises(TaskNotFoundError):
        service.delete_task(a.id)


# --- Board ---


def test_move_task_resets_aging_and_goes_to_bottom():
    service.create_task("Already there", time_stage="today")
    task = service.create_task("Mover", time_stage="doing")

    moved = service.move_task(task.id, "Today", NOW)

    assert moved.time_stage == "today"
    assert moved.position == 1
    assert moved.aging_status == "normal"
    assert len(moved.history) == 3


def test_move_task_errors():
    task = service.create_task("Mover", time_stage="doing")
    with pytest.raises(InvalidDropTargetError):
        service.move_task(task.id, "doing")
    with pytest.raises(InvalidStageError):
        service.move_task(task.id, "backlog")
    with pytest.raises(TaskNotFoundError):
        service.move_task(999, "done")


def test_reorder_within_and_across_stages():
    a = service.create_task("A", time_stage="do")
    b = service.create_task("B", time_stage="do")
    c = service.create_task("C", time_stage="doing")

    service.reorder_task(b.id, a.id, NOW)
    assert [t.title for t in service.board()["do"]] == ["B", "A"]

    moved = service.reorder_task(a.id, c.id, NOW)
    assert moved.time_stage == "doing"
    assert [t.title for t in service.board()["doing"]] == ["A", "C"]


def test_board_respects_visibility_and_filters():
    service.create_task("Work", list_name="work")
    service.create_task("Home", list_name="home")
    hidden = service.create_task("Hidden", list_name="work")
    service.update_task_properties(hidden.id, show_in_time_box=False)

    assert [t.title for t in service.board()["queue"]] == ["Work", "Home"]

    filters = FilterStore()
    filters.set_filter("timebox", list_name="home")
    assert [t.title for t in service.board(filters)["queue"]] == ["Home"]


# --- Scheduling ---


def test_schedule_task_stages_and_shows_on_calendar():
    task = service.create_task("Dentist")
    scheduled = service.schedule_task(task.id, date(2025, 3, 15), time="14:30", now=NOW)

    assert scheduled.time_stage == "doing"
    assert scheduled.show_in_calendar is True
    assert scheduled.schedule.time == "14:30"
    assert scheduled.schedule.recurring is None


def test_schedule_task_rejects_bad_input():
    task = service.create_task("Bad")
    with pytest.raises(InvalidInputError):
        service.schedule_task(task.id, date(2025, 3, 15), lead_days=-1)
    with pytest.raises(InvalidInputError):
        service.schedule_task(task.id, date(2025, 3, 15), time="25:99")
    with pytest.raises(InvalidInputError):
        service.schedule_task(task.id, date(2025, 3, 15), repeat="hourly")


def test_schedule_with_repeat_rule():
    task = service.create_task("Gym")
    scheduled = service.schedule_task(
        task.id,
        date(2025, 3, 17),
        repeat="weekly",
        week_days=["Monday", "thu"],
        end_date=date(2025, 6, 1),
        now=NOW,
    )
    rule = scheduled.schedule.recurring
    assert rule.week_days == ["mon", "thu"]
    assert rule.ends == "date"
    assert rule.end_date == "2025-06-01"


def test_clear_and_reschedule():
    task = service.create_task("Call")
    cleared = service.clear_schedule(task.id)
    assert cleared.schedule is None
    assert cleared.show_in_calendar is False

    moved = service.reschedule_task(task.id, date(2025, 3, 12), NOW)
    assert moved.schedule.time == "09:00"
    assert moved.schedule.date == "2025-03-12"
    assert moved.time_stage == "today"


def test_refresh_updates_stage_and_aging():
    stale = service.create_task("Stale", time_stage="doing", now=NOW - timedelta(days=9))
    fresh = service.create_task("Fresh", time_stage="doing", now=NOW)
    due = service.create_task("Due", now=NOW)
    service.schedule_task(due.id, date(2025, 3, 30), now=NOW)

    changed = service.refresh_tasks(NOW + timedelta(days=10))
    by_id = {t.id: t for t in service.list_tasks()}

    assert stale.id in {t.id for t in changed}
    assert by_id[stale.id].aging_status == "overdue"
    assert by_id[stale.id].status == "-12"
    assert by_id[fresh.id].aging_status == "overdue"
    assert by_id[due.id].time_stage == "do"

    assert service.refresh_tasks(NOW + timedelta(days=10)) == [], "second refresh changes nothing"


# --- Views ---


def test_list_view_groups_by_list():
    service.create_task("A", list_name="work")
    service.create_task("B", list_name="home")

    filters = FilterStore()
    filters.set_filter("lists", list_name="work")
    assert list(service.list_view()) == ["work", "home"]
    assert list(service.list_view(filters)) == ["work"]


def test_calendar_view():
    task = service.create_task("Dentist")
    service.schedule_task(task.id, date(2025, 3, 15), now=NOW)

    weeks = service.calendar_view(2025, 3)
    cells = {day: events for week in weeks for day, events in week if day}
    assert [e.title for e in cells[date(2025, 3, 15)]] == ["Dentist"]

    with pytest.raises(InvalidInputError):
        service.calendar_view(2025, 13)


def test_home_view():
    service.create_task("Today", time_stage="today")
    home = service.home_view(NOW)

    assert home["user"] == "tester"
    assert home["date"] == "2025-03-12"
    assert home["quote"]["text"]
    assert [t.title for t in home["today"]] == ["Today"]
    assert set(home) == {"user", "date", "quote", "today", "aging", "upcoming"}


def test_create_sample_tasks():
    created = service.create_sample_tasks(NOW)
    assert len(created) == 11
    assert all(t.created_by == "tester" for t in created)
    assert any(t.schedule for t in created)

"""
Tests for stage history: every move leaves an exit and an entry record.
"""

from datetime import timedelta

from conftest import NOW, make_task
from doerfy.core.history import change_stage, current_history_stage, initial_history


def test_initial_history_has_one_entry():
    history = initial_history("queue", NOW.isoformat(), "tester")
    assert len(history) == 1
    assert history[0].time_stage == "queue"
    assert history[0].days_in_stage is None


def test_change_stage_appends_two_entries():
    task = make_task(stage="do", entered=NOW - timedelta(days=3))
    task.history = initial_history("do", task.stage_entry_date, "tester")

    moved = change_stage(task, "doing", NOW, "alex")

    assert [h.time_stage for h in moved.history] == ["do", "do", "doing"]
    exit_entry = moved.history[1]
    assert exit_entry.entry_date == task.stage_entry_date
    assert exit_entry.days_in_stage == 3
    assert exit_entry.user_id == "alex"
    assert moved.history[2].entry_date == NOW.isoformat()


def test_history_always_ends_in_the_current_stage():
    task = make_task(stage="queue", entered=NOW - timedelta(days=10))
    task.history = initial_history("queue", task.stage_entry_date, "tester")

    for days_later, stage in ((1, "do"), (2, "doing"), (3, "today"), (4, "done")):
        task = change_stage(task, stage, NOW + timedelta(days=days_later))
        assert current_history_stage(task) == task.time_stage

    assert len(task.history) == 9


def test_days_in_stage_uses_calendar_days_and_is_not_negative():
    future = make_task(stage="do", entered=NOW + timedelta(days=2))
    moved = change_stage(future, "doing", NOW)
    assert moved.history[-2].days_in_stage == 0

    missing = make_task(stage="do", entered=None)
    assert change_stage(missing, "doing", NOW).history[-2].days_in_stage == 0


def test_user_defaults_to_assignee():
    task = make_task(stage="do", assignee="sam")
    moved = change_stage(task, "today", NOW)
    assert moved.history[-1].user_id == "sam"


def test_current_history_stage_empty():
    assert current_history_stage(make_task()) is None

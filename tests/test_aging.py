"""
Tests for task aging: age in stage against the stage's thresholds.
"""

from datetime import timedelta

from conftest import NOW, make_task
from doerfy.core.aging import calculate_task_age, get_aging_status, update_task_aging


def test_age_counts_whole_days_rounded_up():
    task = make_task(stage="doing", entered=NOW - timedelta(days=2, hours=1))
    assert calculate_task_age(task, NOW) == 3


def test_age_without_entry_date_is_zero():
    task = make_task(stage="doing", entered=None)
    assert calculate_task_age(task, NOW) == 0


def test_age_is_never_negative():
    task = make_task(stage="doing", entered=NOW + timedelta(days=2))
    assert calculate_task_age(task, NOW) == 2


def test_doing_task_past_expiry_is_overdue(time_boxes):
    task = make_task(stage="doing", entered=NOW - timedelta(days=9))
    status, days = get_aging_status(task, time_boxes, NOW)
    assert status == "overdue"
    assert days == -2


def test_doing_task_at_warning_threshold_warns(time_boxes):
    task = make_task(stage="doing", entered=NOW - timedelta(days=6))
    status, days = get_aging_status(task, time_boxes, NOW)
    assert status == "warning"
    assert days == 1, "days left until expiry"


def test_doing_task_at_expiry_is_still_warning(time_boxes):
    task = make_task(stage="doing", entered=NOW - timedelta(days=7))
    status, days = get_aging_status(task, time_boxes, NOW)
    assert status == "warning"
    assert days == 0


def test_young_task_is_normal(time_boxes):
    task = make_task(stage="do", entered=NOW - timedelta(days=3))
    assert get_aging_status(task, time_boxes, NOW) == ("normal", None)


def test_stage_without_thresholds_never_ages(time_boxes):
    task = make_task(stage="queue", entered=NOW - timedelta(days=400))
    assert get_aging_status(task, time_boxes, NOW) == ("normal", None)

    done = make_task(stage="done", entered=NOW - timedelta(days=400))
    assert get_aging_status(done, time_boxes, NOW) == ("normal", None)


def test_today_stage_goes_overdue_after_one_day(time_boxes):
    yesterday = make_task(stage="today", entered=NOW - timedelta(days=1))
    assert get_aging_status(yesterday, time_boxes, NOW)[0] == "warning"

    older = make_task(stage="today", entered=NOW - timedelta(days=2))
    assert get_aging_status(older, time_boxes, NOW) == ("overdue", -1)


def test_update_task_aging_sets_status_counter(time_boxes):
    tasks = [
        make_task(1, stage="doing", entered=NOW - timedelta(days=10)),
        make_task(2, stage="doing", entered=NOW - timedelta(days=6)),
        make_task(3, stage="doing", entered=NOW),
    ]
    aged = update_task_aging(tasks, time_boxes, NOW)

    assert [t.aging_status for t in aged] == ["overdue", "warning", "normal"]
    assert [t.status for t in aged] == ["-3", "1", None]


def test_update_task_aging_does_not_mutate_input(time_boxes):
    task = make_task(stage="doing", entered=NOW - timedelta(days=10))
    aged = update_task_aging([task], time_boxes, NOW)

    assert aged[0] is not task
    assert task.aging_status is None


def test_update_task_aging_rejects_non_lists(time_boxes):
    assert update_task_aging(None, time_boxes, NOW) == []
    assert update_task_aging("tasks", time_boxes, NOW) == []

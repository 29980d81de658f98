"""
Tests for board logic: columns, drop targets, stage moves and reordering.
"""

from datetime import timedelta

import pytest

from conftest import NOW, make_task
from doerfy.core.board import (
    array_move,
    drop_task,
    is_valid_drop_target,
    move_to_stage,
    tasks_by_stage,
)
from doerfy.core.exceptions import InvalidDropTargetError, InvalidStageError, TaskNotFoundError
from doerfy.core.history import current_history_stage, initial_history


def test_every_other_stage_is_a_valid_drop_target():
    assert is_valid_drop_target("queue", "done")
    assert is_valid_drop_target("done", "today")
    assert not is_valid_drop_target("doing", "doing")
    assert not is_valid_drop_target("doing", "later")


def test_tasks_by_stage_has_all_columns_in_position_order():
    tasks = [
        make_task(1, "doing", position=1),
        make_task(2, "doing", position=0),
        make_task(3, "today"),
    ]
    columns = tasks_by_stage(tasks)

    assert list(columns) == ["queue", "do", "doing", "today", "done"]
    assert [t.id for t in columns["doing"]] == [2, 1]
    assert columns["queue"] == []


def test_array_move():
    assert array_move(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]
    assert array_move(["a", "b", "c"], 2, 0) == ["c", "a", "b"]


def test_move_to_stage_resets_aging_and_records_history():
    task = make_task(stage="doing", entered=NOW - timedelta(days=9), status="-2", aging_status="overdue")
    task.history = initial_history("doing", task.stage_entry_date, "tester")

    moved = move_to_stage(task, "today", NOW, "tester")

    assert moved.time_stage == "today"
    assert moved.status == "0"
    assert moved.aging_status == "normal"
    assert moved.stage_entry_date == NOW.isoformat()
    assert len(moved.history) == 3
    assert moved.history[-2].days_in_stage == 9
    assert current_history_stage(moved) == "today"
    assert task.time_stage == "doing", "original task is not modified"


def test_move_to_same_stage_is_rejected():
    with pytest.raises(InvalidDropTargetError):
        move_to_stage(make_task(stage="do"), "do", NOW)


def test_move_to_unknown_stage_is_rejected():
    with pytest.raises(InvalidStageError):
        move_to_stage(make_task(stage="do"), "someday", NOW)


def test_drop_within_stage_takes_the_other_place():
    tasks = [make_task(i, "do", position=i) for i in range(1, 5)]
    result = drop_task(tasks, 1, 3, NOW)

    do_ids = [t.id for t in result if t.time_stage == "do"]
    assert do_ids == [2, 3, 1, 4]
    assert [t.position for t in result if t.time_stage == "do"] == [0, 1, 2, 3]


def test_drop_across_stages_moves_just_above_target():
    tasks = [
        make_task(1, "queue", position=0),
        make_task(2, "doing", position=0),
        make_task(3, "doing", position=1),
    ]
    result = drop_task(tasks, 1, 3, NOW)
    by_id = {t.id: t for t in result}

    assert by_id[1].time_stage == "doing"
    assert by_id[1].status == "0"
    assert [t.id for t in sorted(result, key=lambda t: t.position) if t.time_stage == "doing"] == [2, 1, 3]
    assert tasks[0].time_stage == "queue", "input list is copied"


def test_drop_onto_itself_changes_nothing():
    tasks = [make_task(1, "do", position=0), make_task(2, "do", position=1)]
    result = drop_task(tasks, 2, 2, NOW)
    assert [(t.id, t.position) for t in result] == [(1, 0), (2, 1)]


def test_drop_with_unknown_id_raises():
    tasks = [make_task(1, "do")]
    with pytest.raises(TaskNotFoundError):
        drop_task(tasks, 1, 99, NOW)
    with pytest.raises(TaskNotFoundError):
        drop_task(tasks, 99, 1, NOW)

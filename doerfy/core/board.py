"""
FILE: doerfy/core/board.py
PURPOSE: Time box board logic - stage columns, drops between them, reordering
EXPORTS:
  - VALID_DROP_TARGETS: stage -> stages a task may be dropped into
  - is_valid_drop_target(source, target) -> bool
  - tasks_by_stage(tasks) -> Dict[str, List[Task]]
  - array_move(items, old_index, new_index) -> list
  - move_to_stage(task, target_stage, now, user_id) -> Task
  - drop_task(tasks, active_id, over_id, now) -> List[Task]
DEPENDENCIES:
  - doerfy.core.models (Task)
  - doerfy.core.history (change_stage)
NOTES:
  - Pure functions over in-memory lists; the service layer persists
  - A move across stages resets the aging counter to "0"
  - A drop within the same stage only reorders
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from .constants import AGING_NORMAL, STATUS_RESET, TIME_STAGES
from .exceptions import InvalidDropTargetError, InvalidStageError, TaskNotFoundError
from .history import change_stage
from .models import Task

VALID_DROP_TARGETS: Dict[str, tuple] = {
    stage: tuple(s for s in TIME_STAGES if s != stage) for stage in TIME_STAGES
}


def is_valid_drop_target(source: str, target: str) -> bool:
    return target in VALID_DROP_TARGETS.get(source, ())


def tasks_by_stage(tasks: Sequence[Task]) -> Dict[str, List[Task]]:
    """Group tasks into board columns, each ordered by position."""
    columns: Dict[str, List[Task]] = {stage: [] for stage in TIME_STAGES}
    for task in tasks:
        columns.setdefault(task.time_stage, []).append(task)
    for stage_tasks in columns.values():
        stage_tasks.sort(key=lambda t: t.position)
    return columns


def array_move(items: Sequence, old_index: int, new_index: int) -> list:
    """Return a new list with the item at ``old_index`` moved to ``new_index``."""
    result = list(items)
    item = result.pop(old_index)
    result.insert(new_index, item)
    return result


def move_to_stage(
    task: Task,
    target_stage: str,
    now: Optional[datetime] = None,
    user_id: Optional[str] = None,
) -> Task:
    """
    Drop a task into another stage.

    Returns a copy with two new history entries (exit and enter), a fresh
    stage entry date and its aging counter reset.

    Raises:
        InvalidStageError: If target_stage is not a known stage
        InvalidDropTargetError: If the drop is not allowed (e.g. same stage)
    """
    if target_stage not in TIME_STAGES:
        raise InvalidStageError(target_stage, TIME_STAGES)
    if not is_valid_drop_target(task.time_stage, target_stage):
        raise InvalidDropTargetError(task.time_stage, target_stage)

    moved = change_stage(task, target_stage, now, user_id)
    moved.status = STATUS_RESET
    moved.aging_status = AGING_NORMAL
    return moved


def _board_order(task: Task):
    stage_index = (
        TIME_STAGES.index(task.time_stage)
        if task.time_stage in TIME_STAGES
        else len(TIME_STAGES)
    )
    return stage_index, task.position


def _renumber(tasks: List[Task]) -> List[Task]:
    """Positions follow list order inside each stage."""
    counters: Dict[str, int] = {}
    for task in tasks:
        index = counters.get(task.time_stage, 0)
        task.position = index
        counters[task.time_stage] = index + 1
    return tasks


def drop_task(
    tasks: Sequence[Task],
    active_id: int,
    over_id: int,
    now: Optional[datetime] = None,
) -> List[Task]:
    """
    Apply drag-over semantics for dragging ``active_id`` onto ``over_id``.

    - Different stages: the dragged task joins the other task's stage
      (placed just before it)
    - Same stage: the dragged task takes the other task's place

    Returns a new list; tasks other than the dragged one are copied
    unchanged except for their positions.

    Raises:
        TaskNotFoundError: If either id is not in ``tasks``
    """
    ordered = [t.copy() for t in sorted(tasks, key=_board_order)]
    ids = [t.id for t in ordered]
    if active_id not in ids:
        raise TaskNotFoundError(active_id)
    if over_id not in ids:
        raise TaskNotFoundError(over_id)
    if active_id == over_id:
        return _renumber(ordered)

    old_index = ids.index(active_id)
    active = ordered[old_index]
    over = ordered[ids.index(over_id)]

    if active.time_stage != over.time_stage:
        moved = move_to_stage(active, over.time_stage, now)
        ordered.pop(old_index)
        ordered.insert([t.id for t in ordered].index(over_id), moved)
        return _renumber(ordered)

    return _renumber(array_move(ordered, old_index, ids.index(over_id)))

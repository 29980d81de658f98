"""
FILE: doerfy/core/aging.py
PURPOSE: Derive a task's aging status from time spent in its current stage
EXPORTS:
  - calculate_task_age(task, now) -> int
  - get_aging_status(task, time_boxes, now) -> (status, days_count)
  - update_task_aging(tasks, time_boxes, now) -> List[Task]
DEPENDENCIES:
  - math, datetime (stdlib)
  - doerfy.core.models (Task, TimeBox)
  - doerfy.core.dates (parse_iso)
NOTES:
  - Pure functions; callers persist the result
  - Stages without an expiry threshold never age
  - days_count is negative once overdue, days left while warning
"""

import math
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from .constants import AGING_NORMAL, AGING_OVERDUE, AGING_WARNING
from .dates import parse_iso
from .models import Task, TimeBox

SECONDS_PER_DAY = 60 * 60 * 24


def calculate_task_age(task: Task, now: Optional[datetime] = None) -> int:
    """
    Whole days the task has spent in its current stage, rounded up.

    A task with no (or an unparseable) stage entry date has age 0.
    """
    entry = parse_iso(task.stage_entry_date)
    if entry is None:
        return 0

    now = now or datetime.now()
    elapsed = abs((now - entry).total_seconds())
    return math.ceil(elapsed / SECONDS_PER_DAY)


def _find_time_box(stage: str, time_boxes: Iterable[TimeBox]) -> Optional[TimeBox]:
    return next((tb for tb in time_boxes if tb.id == stage), None)


def get_aging_status(
    task: Task,
    time_boxes: Iterable[TimeBox],
    now: Optional[datetime] = None,
) -> Tuple[str, Optional[int]]:
    """
    Compare a task's age against its stage thresholds.

    Returns:
        (status, days_count) where status is normal/warning/overdue.
        days_count is None for normal, days until expiry for warning and
        the negated number of days past expiry for overdue.
    """
    time_box = _find_time_box(task.time_stage, time_boxes)

    if not time_box or not time_box.expire_threshold:
        return AGING_NORMAL, None

    age = calculate_task_age(task, now)

    if age > time_box.expire_threshold:
        overdue_days = age - time_box.expire_threshold
        return AGING_OVERDUE, -overdue_days

    if time_box.warn_threshold and age >= time_box.warn_threshold:
        return AGING_WARNING, time_box.expire_threshold - age

    return AGING_NORMAL, None


def update_task_aging(
    tasks: List[Task],
    time_boxes: Iterable[TimeBox],
    now: Optional[datetime] = None,
) -> List[Task]:
    """
    Return copies of ``tasks`` with aging_status and status recalculated.

    Anything that is not a list yields an empty list.
    """
    if not isinstance(tasks, list):
        return []

    time_boxes = list(time_boxes)
    now = now or datetime.now()

    updated = []
    for task in tasks:
        status, days_count = get_aging_status(task, time_boxes, now)
        aged = task.copy()
        aged.aging_status = status
        aged.status = str(days_count) if days_count is not None else None
        updated.append(aged)
    return updated

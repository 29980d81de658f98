"""
FILE: doerfy/core/scheduling.py
PURPOSE: Place scheduled tasks in the right stage based on their due date
EXPORTS:
  - calculate_effective_due_date(task) -> datetime | None
  - calculate_days_remaining(date, now) -> int | None
  - determine_time_stage(days_remaining) -> str
  - update_task_scheduling(task, now) -> Task
DEPENDENCIES:
  - datetime (stdlib)
  - doerfy.core.models (Task)
  - doerfy.core.history (change_stage)
NOTES:
  - Effective due date = due date (+ time of day) minus lead days and hours
  - Days remaining counts calendar days, so anything due today is 0
  - Unscheduled and finished tasks are never moved
"""

from datetime import datetime, timedelta
from typing import Optional

from .constants import (
    SCHEDULING_THRESHOLDS,
    STAGE_DO,
    STAGE_DOING,
    STAGE_DONE,
    STAGE_QUEUE,
    STAGE_TODAY,
)
from .dates import days_between, parse_iso, parse_time_of_day
from .history import change_stage
from .models import Task


def calculate_effective_due_date(task: Task) -> Optional[datetime]:
    """
    Due date adjusted by the schedule's lead time.

    Returns:
        None if the task has no enabled schedule with a date
    """
    schedule = task.schedule
    if not schedule or not schedule.enabled or not schedule.date:
        return None

    due = parse_iso(schedule.date)
    if due is None:
        return None

    time_of_day = parse_time_of_day(schedule.time)
    if time_of_day is not None:
        due = due.replace(hour=time_of_day.hour, minute=time_of_day.minute)

    lead = timedelta(days=schedule.lead_days or 0, hours=schedule.lead_hours or 0)
    return due - lead


def calculate_days_remaining(
    date: Optional[datetime], now: Optional[datetime] = None
) -> Optional[int]:
    """Calendar days from today until ``date`` (negative when past)."""
    if date is None:
        return None
    return days_between(now or datetime.now(), date)


def determine_time_stage(days_remaining: Optional[int]) -> str:
    if days_remaining is None:
        return STAGE_QUEUE

    if days_remaining <= SCHEDULING_THRESHOLDS[STAGE_TODAY]["max"]:
        return STAGE_TODAY
    if days_remaining <= SCHEDULING_THRESHOLDS[STAGE_DOING]["max"]:
        return STAGE_DOING
    if days_remaining <= SCHEDULING_THRESHOLDS[STAGE_DO]["max"]:
        return STAGE_DO
    return STAGE_QUEUE


def update_task_scheduling(task: Task, now: Optional[datetime] = None) -> Task:
    """
    Move a scheduled task into the stage its due date calls for.

    Returns the same task object when nothing changes, otherwise a copy
    with the new stage and two extra history entries.
    """
    if not task.is_scheduled or task.time_stage == STAGE_DONE:
        return task

    now = now or datetime.now()
    effective_due_date = calculate_effective_due_date(task)
    days_remaining = calculate_days_remaining(effective_due_date, now)
    target_stage = determine_time_stage(days_remaining)

    if target_stage == task.time_stage:
        return task

    return change_stage(task, target_stage, now)

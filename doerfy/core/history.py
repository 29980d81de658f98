"""
FILE: doerfy/core/history.py
PURPOSE: Stage transitions that keep a task's audit trail consistent
EXPORTS:
  - initial_history(stage, entry_date, user_id) -> List[HistoryEntry]
  - change_stage(task, target_stage, now, user_id) -> Task
  - current_history_stage(task) -> str | None
DEPENDENCIES:
  - doerfy.core.models (Task, HistoryEntry)
  - doerfy.core.dates (parse_iso, days_between)
NOTES:
  - Every stage change appends an exit entry for the old stage and an
    entry for the new one, so the newest entry always names the stage
    the task is in
"""

from datetime import datetime
from typing import List, Optional

from .dates import days_between, parse_iso
from .models import HistoryEntry, Task


def initial_history(stage: str, entry_date: str, user_id: Optional[str]) -> List[HistoryEntry]:
    return [HistoryEntry(time_stage=stage, entry_date=entry_date, user_id=user_id)]


def current_history_stage(task: Task) -> Optional[str]:
    """Stage named by the most recent history entry, if any."""
    return task.history[-1].time_stage if task.history else None


def change_stage(
    task: Task,
    target_stage: str,
    now: Optional[datetime] = None,
    user_id: Optional[str] = None,
) -> Task:
    """
    Return a copy of ``task`` moved into ``target_stage``.

    Appends exactly two history entries: the exit from the current stage
    (with the number of days spent there) and the entry into the new one.
    The stage entry date is reset to ``now``.
    """
    now = now or datetime.now()
    now_iso = now.isoformat()
    user_id = user_id or task.assignee

    entered = parse_iso(task.stage_entry_date)
    days_in_stage = max(days_between(entered, now), 0) if entered else 0

    moved = task.copy()
    moved.history.append(
        HistoryEntry(
            time_stage=task.time_stage,
            entry_date=task.stage_entry_date,
            user_id=user_id,
            days_in_stage=days_in_stage,
        )
    )
    moved.history.append(
        HistoryEntry(time_stage=target_stage, entry_date=now_iso, user_id=user_id)
    )
    moved.time_stage = target_stage
    moved.stage_entry_date = now_iso
    moved.updated_at = now_iso
    return moved

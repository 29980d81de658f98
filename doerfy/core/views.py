"""
FILE: doerfy/core/views.py
PURPOSE: Shape task lists for the lists, calendar and home views
EXPORTS:
  - CalendarEvent (dataclass)
  - group_by_list(tasks) -> Dict[str, List[Task]]
  - calendar_events(tasks) -> List[CalendarEvent]
  - month_grid(year, month, tasks) -> List[List[Tuple[date|None, List[CalendarEvent]]]]
  - dashboard(tasks, now) -> Dict[str, List[Task]]
DEPENDENCIES:
  - calendar, datetime (stdlib)
  - doerfy.core.models (Task)
NOTES:
  - Pure functions; callers apply filters first
  - Weeks in the month grid start on Sunday, days outside the month are None
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from .constants import AGING_OVERDUE, AGING_WARNING, STAGE_DONE, STAGE_TODAY
from .dates import parse_iso, parse_time_of_day
from .models import Task


@dataclass
class CalendarEvent:
    """A scheduled task placed on the calendar."""

    task_id: int
    title: str
    start: datetime
    end: datetime
    task: Task

    def to_dict(self):
        return {
            "task_id": self.task_id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }


def group_by_list(tasks: List[Task]) -> Dict[str, List[Task]]:
    """Tasks shown in the lists view, keyed by list name in first-seen order."""
    grouped: Dict[str, List[Task]] = {}
    for task in tasks:
        if not task.show_in_list:
            continue
        grouped.setdefault(task.list_name, []).append(task)
    return grouped


def _event_start(task: Task) -> Optional[datetime]:
    start = parse_iso(task.schedule.date)
    if start is None:
        return None
    time_of_day = parse_time_of_day(task.schedule.time)
    if time_of_day is not None:
        start = start.replace(hour=time_of_day.hour, minute=time_of_day.minute)
    return start


def calendar_events(tasks: List[Task]) -> List[CalendarEvent]:
    """One event per task with an enabled schedule, ordered by start."""
    events = []
    for task in tasks:
        if not task.is_scheduled:
            continue
        start = _event_start(task)
        if start is None:
            continue
        events.append(
            CalendarEvent(task_id=task.id, title=task.title, start=start, end=start, task=task)
        )
    events.sort(key=lambda e: (e.start, e.task_id))
    return events


def month_grid(
    year: int, month: int, tasks: List[Task]
) -> List[List[Tuple[Optional[date], List[CalendarEvent]]]]:
    """
    Calendar month as weeks of (day, events) cells.

    Cells before the first and after the last day of the month hold None
    and no events.
    """
    by_day: Dict[date, List[CalendarEvent]] = {}
    for event in calendar_events(tasks):
        by_day.setdefault(event.start.date(), []).append(event)

    weeks = []
    for week in calendar.Calendar(firstweekday=6).monthdatescalendar(year, month):
        row = []
        for day in week:
            if day.month != month:
                row.append((None, []))
            else:
                row.append((day, by_day.get(day, [])))
        weeks.append(row)
    return weeks


def dashboard(
    tasks: List[Task], now: Optional[datetime] = None, upcoming_days: int = 30
) -> Dict[str, List[Task]]:
    """
    Home screen sections.

    - today: tasks in the today stage
    - aging: active tasks in warning or overdue
    - upcoming: not-done scheduled tasks due from today on, soonest first
    """
    now = now or datetime.now()
    today = now.date()
    horizon = today + timedelta(days=upcoming_days)

    upcoming = []
    for task in tasks:
        if not task.is_scheduled or task.time_stage == STAGE_DONE:
            continue
        due = parse_iso(task.schedule.date)
        if due is not None and today <= due.date() <= horizon:
            upcoming.append((due, task))
    upcoming.sort(key=lambda pair: (pair[0], pair[1].id))

    return {
        "today": [t for t in tasks if t.time_stage == STAGE_TODAY],
        "aging": [
            t
            for t in tasks
            if t.time_stage != STAGE_DONE
            and t.aging_status in (AGING_WARNING, AGING_OVERDUE)
        ],
        "upcoming": [task for _, task in upcoming],
    }

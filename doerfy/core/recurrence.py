"""
FILE: doerfy/core/recurrence.py
PURPOSE: Compute the next due date of a repeating schedule
EXPORTS:
  - validate_rule(rule) -> None
  - next_occurrence(schedule, after) -> date | None
  - describe_rule(rule) -> str
DEPENDENCIES:
  - calendar, datetime (stdlib)
  - doerfy.core.models (TaskSchedule, RecurrenceRule)
NOTES:
  - Occurrences are walked forward from the schedule's own date, so the
    pattern stays anchored to it
  - workdays_only pushes weekend hits to the following Monday
  - An occurrence-limited rule ends once completed_occurrences reaches
    the limit
"""

import calendar
from datetime import date, timedelta
from typing import Optional

from .constants import RECURRENCE_ENDS, RECURRENCE_TYPES, WEEKDAYS
from .dates import parse_day
from .exceptions import InvalidInputError
from .models import RecurrenceRule, TaskSchedule

# Upper bound on steps taken after fast-forwarding towards ``after``
MAX_STEPS = 5000


def validate_rule(rule: RecurrenceRule) -> None:
    """
    Check a recurrence rule for consistency.

    Raises:
        InvalidInputError: On unknown type, bad interval, weekday or end
    """
    if rule.type not in RECURRENCE_TYPES:
        raise InvalidInputError(
            f"Invalid repeat '{rule.type}'. Must be one of: {', '.join(RECURRENCE_TYPES)}"
        )
    if rule.interval < 1:
        raise InvalidInputError("Repeat interval must be at least 1")

    bad_days = [d for d in rule.week_days if d not in WEEKDAYS]
    if bad_days:
        raise InvalidInputError(
            f"Invalid weekday(s): {', '.join(bad_days)}. Use: {', '.join(WEEKDAYS)}"
        )
    if rule.month_day is not None and not 1 <= rule.month_day <= 31:
        raise InvalidInputError("Month day must be between 1 and 31")

    if rule.ends not in RECURRENCE_ENDS:
        raise InvalidInputError(
            f"Invalid end '{rule.ends}'. Must be one of: {', '.join(RECURRENCE_ENDS)}"
        )
    if rule.ends == "date" and parse_day(rule.end_date) is None:
        raise InvalidInputError("Repeat end date is required when ending on a date")
    if rule.ends == "occurrences" and (not rule.occurrences or rule.occurrences < 1):
        raise InvalidInputError("Occurrence count must be at least 1")


def _add_months(day: date, months: int, month_day: Optional[int] = None) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(month_day or day.day, last_day))


def _to_workday(day: date) -> date:
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def _step(rule: RecurrenceRule, current: date, anchor: date) -> date:
    """Occurrence immediately following ``current``."""
    if rule.type == "daily":
        return current + timedelta(days=rule.interval)

    if rule.type == "weekly":
        if not rule.week_days:
            return current + timedelta(weeks=rule.interval)
        wanted = {WEEKDAYS.index(d) for d in rule.week_days}
        anchor_week = anchor - timedelta(days=anchor.weekday())
        candidate = current + timedelta(days=1)
        while True:
            week_offset = (candidate - anchor_week).days // 7
            if week_offset % rule.interval == 0 and candidate.weekday() in wanted:
                return candidate
            candidate += timedelta(days=1)

    if rule.type == "monthly":
        return _add_months(current, rule.interval, rule.month_day or anchor.day)

    # yearly
    return _add_months(current, 12 * rule.interval, anchor.day)


def _fast_forward(rule: RecurrenceRule, anchor: date, target: date) -> date:
    """
    A starting point at or before ``target`` that stays on the anchor's
    pattern, so catching up on an old schedule takes a handful of steps.
    """
    if target <= anchor:
        return anchor

    if rule.type == "weekly" and rule.week_days:
        return target

    if rule.type in ("daily", "weekly"):
        period = rule.interval * (7 if rule.type == "weekly" else 1)
        periods = (target - anchor).days // period
        return anchor + timedelta(days=periods * period)

    step = rule.interval * (12 if rule.type == "yearly" else 1)
    day = rule.month_day if rule.type == "monthly" and rule.month_day else anchor.day
    months = (target.year - anchor.year) * 12 + target.month - anchor.month
    count = months // step
    while count > 0:
        current = _add_months(anchor, count * step, day)
        if current <= target:
            return current
        count -= 1
    return anchor


def next_occurrence(schedule: TaskSchedule, after: Optional[date] = None) -> Optional[date]:
    """
    Next due date strictly after ``after`` (default: the current due date).

    Returns:
        None when the schedule does not repeat, has no date, or has ended
    """
    rule = schedule.recurring
    anchor = parse_day(schedule.date)
    if rule is None or anchor is None:
        return None

    if rule.ends == "occurrences" and rule.occurrences:
        if rule.completed_occurrences >= rule.occurrences:
            return None

    after = after or anchor
    # A week of slack so weekend hits pushed past ``after`` are not skipped
    current = _fast_forward(rule, anchor, after - timedelta(days=7))
    for _ in range(MAX_STEPS):
        current = _step(rule, current, anchor)
        candidate = _to_workday(current) if rule.workdays_only else current
        if candidate > after:
            break
    else:
        raise InvalidInputError(
            f"Could not find the next occurrence after {after.isoformat()}"
        )

    if rule.ends == "date":
        end = parse_day(rule.end_date)
        if end is not None and candidate > end:
            return None
    return candidate


def describe_rule(rule: Optional[RecurrenceRule]) -> str:
    """Short human readable summary, e.g. "every 2 weeks on mon, thu"."""
    if rule is None:
        return "-"

    units = {"daily": "day", "weekly": "week", "monthly": "month", "yearly": "year"}
    unit = units.get(rule.type, rule.type)
    text = f"every {unit}" if rule.interval == 1 else f"every {rule.interval} {unit}s"

    if rule.type == "weekly" and rule.week_days:
        text += " on " + ", ".join(rule.week_days)
    if rule.type == "monthly" and rule.month_day:
        text += f" on day {rule.month_day}"
    if rule.workdays_only:
        text += " (workdays)"
    if rule.ends == "date" and rule.end_date:
        text += f" until {rule.end_date}"
    elif rule.ends == "occurrences" and rule.occurrences:
        text += f", {rule.completed_occurrences}/{rule.occurrences} done"
    return text

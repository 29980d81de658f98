"""
FILE: doerfy/core/dates.py
PURPOSE: Timestamp parsing and day arithmetic shared by the derivation modules
EXPORTS:
  - now() -> datetime
  - now_iso() -> str
  - parse_iso(value) -> datetime | None
  - parse_day(value) -> date | None
  - parse_date_input(text, today) -> date
  - start_of_day(dt) -> datetime
  - days_between(start, end) -> int
DEPENDENCIES:
  - datetime (stdlib)
NOTES:
  - Timestamps are stored as ISO-8601 strings
  - Everything is compared as naive local time; aware values are converted
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from .exceptions import InvalidInputError


def now() -> datetime:
    """Current local time (naive)."""
    return datetime.now()


def now_iso() -> str:
    return datetime.now().isoformat()


def _to_local_naive(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def parse_iso(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into a naive local datetime.

    Accepts the trailing "Z" form written by hosted stores, plain dates and
    datetime/date objects. Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)

    try:
        dt = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return _to_local_naive(dt)


def parse_day(value: Union[str, datetime, date, None]) -> Optional[date]:
    """Calendar day of a timestamp or date string."""
    dt = parse_iso(value)
    return dt.date() if dt else None


def parse_time_of_day(value: Optional[str]) -> Optional[time]:
    """Parse "HH:MM" into a time; empty means no time."""
    if not value:
        return None
    try:
        hours, minutes = value.strip().split(":", 1)
        return time(int(hours), int(minutes))
    except ValueError:
        raise InvalidInputError(f"Invalid time '{value}'. Use HH:MM")


def parse_date_input(text: str, today: Optional[date] = None) -> date:
    """
    Parse a user supplied day.

    Supports "today", "tomorrow", "+N" (N days from today) and YYYY-MM-DD.

    Raises:
        InvalidInputError: If the text is not a recognised date
    """
    today = today or date.today()
    value = (text or "").strip().lower()

    if value == "today":
        return today
    if value == "tomorrow":
        return today + timedelta(days=1)
    if value.startswith("+") and value[1:].isdigit():
        try:
            return today + timedelta(days=int(value[1:]))
        except OverflowError:
            raise InvalidInputError(f"Date '{text}' is too far in the future")

    day = parse_day(value)
    if day is None:
        raise InvalidInputError(
            f"Invalid date '{text}'. Use YYYY-MM-DD, today, tomorrow or +N"
        )
    return day


def start_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time.min)


def days_between(start: datetime, end: datetime) -> int:
    """Whole calendar days from the start of ``start`` to the start of ``end``."""
    return (start_of_day(end) - start_of_day(start)).days

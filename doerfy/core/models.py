"""
FILE: doerfy/core/models.py
PURPOSE: Domain models for tasks, schedules, time boxes and banner config
EXPORTS:
  - Task (dataclass)
  - TaskSchedule (dataclass)
  - RecurrenceRule (dataclass)
  - HistoryEntry (dataclass)
  - ChecklistItem (dataclass)
  - TimeBox (dataclass)
  - BannerConfig (dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - json (stdlib)
  - typing (stdlib)
NOTES:
  - All top-level models have from_row() for SQLite row conversion
  - All models have to_json() for serialization
  - Nested values (schedule, history, checklist, labels) live in JSON columns
  - Optional fields use None as default
  - Timestamps stored as ISO-8601 strings
"""

import copy
import json
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from .constants import (
    DEFAULT_ENERGY,
    DEFAULT_ICON,
    DEFAULT_LIST,
    DEFAULT_PRIORITY,
    DEFAULT_QUOTE_DURATION,
    DEFAULT_STAGE,
    DEFAULT_TEXT_STYLE,
    DEFAULT_TRANSITION_TIME,
    DEFAULT_VOLUME,
)


def _load_json(value, default):
    """Decode a JSON column, tolerating NULL and already-decoded values."""
    if value is None or value == "":
        return default
    if isinstance(value, (list, dict)):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return default


def _row_get(row, key, default=None):
    """Read a column that may be missing from older databases."""
    try:
        return row[key]
    except (KeyError, IndexError):
        return default


@dataclass
class ChecklistItem:
    """A single checkbox line on a task."""

    id: str
    text: str
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChecklistItem":
        return cls(
            id=str(data["id"]),
            text=data.get("text", ""),
            completed=bool(data.get("completed", False)),
        )


@dataclass
class HistoryEntry:
    """One stage entry in a task's audit trail."""

    time_stage: str
    entry_date: Optional[str]
    user_id: Optional[str] = None
    days_in_stage: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            time_stage=data.get("time_stage") or data.get("timeStage"),
            entry_date=data.get("entry_date") or data.get("entryDate"),
            user_id=data.get("user_id") or data.get("userId"),
            days_in_stage=data.get("days_in_stage", data.get("daysInStage")),
        )


@dataclass
class RecurrenceRule:
    """Repeat pattern for a scheduled task."""

    type: str
    interval: int = 1
    week_days: List[str] = field(default_factory=list)
    month_day: Optional[int] = None
    workdays_only: bool = False
    ends: str = "endless"
    end_date: Optional[str] = None
    occurrences: Optional[int] = None
    completed_occurrences: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecurrenceRule":
        return cls(
            type=data["type"],
            interval=int(data.get("interval") or 1),
            week_days=list(data.get("week_days") or []),
            month_day=data.get("month_day"),
            workdays_only=bool(data.get("workdays_only", False)),
            ends=data.get("ends") or "endless",
            end_date=data.get("end_date"),
            occurrences=data.get("occurrences"),
            completed_occurrences=int(data.get("completed_occurrences") or 0),
        )


@dataclass
class TaskSchedule:
    """Due date, lead time and optional recurrence attached to a task."""

    enabled: bool = True
    date: Optional[str] = None
    time: str = ""
    lead_days: int = 0
    lead_hours: int = 0
    recurring: Optional[RecurrenceRule] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["recurring"] = self.recurring.to_dict() if self.recurring else None
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["TaskSchedule"]:
        if not data:
            return None
        recurring = data.get("recurring")
        return cls(
            enabled=bool(data.get("enabled", True)),
            date=data.get("date"),
            time=data.get("time") or "",
            lead_days=int(data.get("lead_days") or 0),
            lead_hours=int(data.get("lead_hours") or 0),
            recurring=RecurrenceRule.from_dict(recurring) if recurring else None,
        )


@dataclass
class Task:
    """A task living in one time stage, with schedule and audit history."""

    id: int
    title: str
    time_stage: str = DEFAULT_STAGE
    stage_entry_date: Optional[str] = None
    description: str = ""
    assignee: Optional[str] = None
    list_name: str = DEFAULT_LIST
    priority: str = DEFAULT_PRIORITY
    energy: str = DEFAULT_ENERGY
    location: Optional[str] = None
    story: Optional[str] = None
    labels: List[str] = field(default_factory=list)
    icon: str = DEFAULT_ICON
    highlighted: bool = False
    show_in_time_box: bool = True
    show_in_list: bool = True
    show_in_calendar: bool = False
    status: Optional[str] = None
    aging_status: Optional[str] = None
    schedule: Optional[TaskSchedule] = None
    history: List[HistoryEntry] = field(default_factory=list)
    checklist_items: List[ChecklistItem] = field(default_factory=list)
    position: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    created_by: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Task":
        """Convert SQLite row to Task object."""
        return cls(
            id=row["id"],
            title=row["title"],
            description=row["description"] or "",
            time_stage=row["time_stage"],
            stage_entry_date=row["stage_entry_date"],
            assignee=row["assignee"],
            list_name=row["list"] or DEFAULT_LIST,
            priority=row["priority"],
            energy=row["energy"],
            location=row["location"],
            story=row["story"],
            labels=_load_json(row["labels"], []),
            icon=row["icon"] or DEFAULT_ICON,
            highlighted=bool(row["highlighted"]),
            show_in_time_box=bool(_row_get(row, "show_in_time_box", 1)),
            show_in_list=bool(_row_get(row, "show_in_list", 1)),
            show_in_calendar=bool(_row_get(row, "show_in_calendar", 0)),
            status=row["status"],
            aging_status=row["aging_status"],
            schedule=TaskSchedule.from_dict(_load_json(row["schedule"], None)),
            history=[
                HistoryEntry.from_dict(h) for h in _load_json(row["history"], [])
            ],
            checklist_items=[
                ChecklistItem.from_dict(c)
                for c in _load_json(_row_get(row, "checklist_items"), [])
            ],
            position=_row_get(row, "position", 0) or 0,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            created_by=row["created_by"],
        )

    def copy(self) -> "Task":
        """Deep copy, so derivations never mutate their input."""
        return copy.deepcopy(self)

    @property
    def is_scheduled(self) -> bool:
        return bool(self.schedule and self.schedule.enabled and self.schedule.date)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["list"] = data.pop("list_name")
        data["schedule"] = self.schedule.to_dict() if self.schedule else None
        return data

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class TimeBox:
    """A stage column with optional aging thresholds (in days)."""

    id: str
    name: str
    description: str = ""
    warn_threshold: Optional[int] = None
    expire_threshold: Optional[int] = None
    order: int = 0

    @classmethod
    def from_row(cls, row) -> "TimeBox":
        """Convert SQLite row to TimeBox object."""
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            warn_threshold=row["warn_threshold"],
            expire_threshold=row["expire_threshold"],
            order=row["sort_order"],
        )

    def to_json(self) -> str:
        """Serialize time box to JSON string."""
        return json.dumps(asdict(self), indent=2)


@dataclass
class BannerConfig:
    """Home banner media: rotating images, quotes and background audio."""

    images: List[Dict[str, Any]] = field(default_factory=list)
    transition_time: int = DEFAULT_TRANSITION_TIME
    audio: List[Dict[str, Any]] = field(default_factory=list)
    autoplay: bool = False
    volume: int = DEFAULT_VOLUME
    quotes: List[Dict[str, Any]] = field(default_factory=list)
    quote_rotation: bool = False
    quote_duration: int = DEFAULT_QUOTE_DURATION
    text_style: Dict[str, Any] = field(
        default_factory=lambda: dict(DEFAULT_TEXT_STYLE)
    )

    @classmethod
    def from_row(cls, row) -> "BannerConfig":
        """Convert SQLite row to BannerConfig, filling unset values with defaults."""
        return cls(
            images=_load_json(row["images"], []),
            transition_time=row["transition_time"] or DEFAULT_TRANSITION_TIME,
            audio=_load_json(row["audio"], []),
            autoplay=bool(row["autoplay"]),
            volume=DEFAULT_VOLUME if row["volume"] is None else row["volume"],
            quotes=_load_json(row["quotes"], []),
            quote_rotation=bool(row["quote_rotation"]),
            quote_duration=row["quote_duration"] or DEFAULT_QUOTE_DURATION,
            text_style=_load_json(row["text_style"], dict(DEFAULT_TEXT_STYLE)),
        )

    def to_json(self) -> str:
        """Serialize banner config to JSON string."""
        return json.dumps(asdict(self), indent=2)

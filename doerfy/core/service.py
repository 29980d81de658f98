"""
FILE: doerfy/core/service.py
PURPOSE: Business logic layer for tasks, board, schedules, time boxes and banner
EXPORTS:
  - create_task(title, ...) -> Task
  - get_task_or_raise(task_id) -> Task
  - list_tasks(assignee, time_stage, include_done) -> List[Task]
  - list_names() -> List[str]
  - update_task_title(task_id, new_title) -> Task
  - update_task_description(task_id, new_description) -> Task
  - update_task_properties(task_id, **changes) -> Task
  - add_label / remove_label(task_id, label) -> Task
  - add_checklist_item(task_id, text) -> Task
  - toggle_checklist_item / remove_checklist_item(task_id, item_id) -> Task
  - complete_task(task_id) -> Task
  - complete_tasks(task_ids) -> List[Task]
  - delete_task(task_id) -> None
  - move_task(task_id, stage) -> Task
  - reorder_task(task_id, over_task_id) -> Task
  - board(filters) -> Dict[str, List[Task]]
  - schedule_task(task_id, date, ...) -> Task
  - clear_schedule(task_id) -> Task
  - reschedule_task(task_id, date) -> Task
  - refresh_tasks(now) -> List[Task]
  - list_time_boxes() / update_time_box(...) / reset_time_boxes()
  - get_banner_config() / save_banner_config(config) / update_banner_settings(...)
  - add_banner_image / add_banner_quote / add_banner_audio / remove_banner_item
  - list_view / calendar_view / home_view
  - create_sample_tasks(now) -> List[Task]
DEPENDENCIES:
  - doerfy.core.repository (all persistence)
  - doerfy.core.aging, scheduling, recurrence, board, filters, views (pure logic)
  - doerfy.config (current user, default list)
NOTES:
  - All functions validate input and raise DoerfyError subclasses
  - No direct database access (use repository layer)
  - Every stage change goes through history.change_stage, so the last
    history entry always names the current stage
  - Time-dependent operations accept ``now`` for deterministic tests
"""

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse

from . import repository
from .aging import update_task_aging
from .board import drop_task, move_to_stage, tasks_by_stage
from .constants import (
    DEFAULT_ENERGY,
    DEFAULT_PRIORITY,
    DEFAULT_QUOTE,
    DEFAULT_STAGE,
    DEFAULT_TITLE,
    ENERGIES,
    PRIORITIES,
    STAGE_DONE,
    TIME_STAGES,
    VIEW_CALENDAR,
    VIEW_LISTS,
    VIEW_TIMEBOX,
)
from .dates import parse_day, parse_time_of_day
from .exceptions import (
    ChecklistItemNotFoundError,
    InvalidInputError,
    InvalidStageError,
    TaskNotFoundError,
    TimeBoxNotFoundError,
)
from .filters import FilterStore
from .history import initial_history
from .models import BannerConfig, ChecklistItem, RecurrenceRule, Task, TaskSchedule, TimeBox
from .recurrence import next_occurrence, validate_rule
from .samples import SAMPLE_TASKS
from .scheduling import update_task_scheduling
from .views import dashboard, group_by_list, month_grid
from ..config import get_settings

logger = logging.getLogger(__name__)

# Time used when a task is dropped on a calendar day without a schedule
DEFAULT_EVENT_TIME = "09:00"

_PROPERTY_FIELDS = (
    "priority",
    "energy",
    "list_name",
    "location",
    "story",
    "icon",
    "highlighted",
    "assignee",
    "show_in_time_box",
    "show_in_list",
    "show_in_calendar",
)


def current_user() -> str:
    return get_settings().user


def _validate_stage(stage: str) -> str:
    stage = (stage or "").strip().lower()
    if stage not in TIME_STAGES:
        raise InvalidStageError(stage, TIME_STAGES)
    return stage


def _validate_choice(name: str, value: str, choices: Iterable[str]) -> str:
    value = (value or "").strip().lower()
    if value not in choices:
        raise InvalidInputError(
            f"Invalid {name} '{value}'. Must be one of: {', '.join(choices)}"
        )
    return value


def _save(task: Task, now: Optional[datetime] = None) -> Task:
    task.updated_at = (now or datetime.now()).isoformat()
    return repository.update_task(task)


# --- Tasks ---


def create_task(
    title: str,
    list_name: Optional[str] = None,
    time_stage: str = DEFAULT_STAGE,
    description: str = "",
    priority: str = DEFAULT_PRIORITY,
    energy: str = DEFAULT_ENERGY,
    labels: Optional[List[str]] = None,
    assignee: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Task:
    """
    Create a new task with validation.

    Args:
        title: Task title; blank becomes "New Task"
        list_name: Named list (defaults to DOERFY_DEFAULT_LIST / "personal")
        time_stage: Starting stage (default queue)
        description: Optional description
        priority / energy: high, medium or low
        labels: Optional labels (duplicates dropped, order kept)
        assignee: Owner (defaults to the current user)

    Returns:
        Newly created Task object, placed at the bottom of its stage

    Raises:
        InvalidStageError: If time_stage is unknown
        InvalidInputError: If priority or energy is invalid
    """
    now = now or datetime.now()
    now_iso = now.isoformat()
    user = current_user()
    stage = _validate_stage(time_stage)

    task = Task(
        id=0,
        title=(title or "").strip() or DEFAULT_TITLE,
        description=(description or "").strip(),
        time_stage=stage,
        stage_entry_date=now_iso,
        assignee=assignee or user,
        list_name=(list_name or "").strip() or get_settings().default_list,
        priority=_validate_choice("priority", priority, PRIORITIES),
        energy=_validate_choice("energy", energy, ENERGIES),
        labels=_unique_labels(labels or []),
        history=initial_history(stage, now_iso, assignee or user),
        position=repository.next_position(stage),
        created_at=now_iso,
        updated_at=now_iso,
        created_by=user,
    )

    created = repository.create_task(task)
    logger.info("Created task %s in %s: %s", created.id, stage, created.title)
    return created


def get_task_or_raise(task_id: int) -> Task:
    """
    Raises:
        TaskNotFoundError: If task_id doesn't exist
    """
    task = repository.get_task(task_id)
    if not task:
        raise TaskNotFoundError(task_id)
    return task


def list_tasks(
    assignee: Optional[str] = None,
    time_stage: Optional[str] = None,
    include_done: bool = True,
) -> List[Task]:
    """
    List tasks, optionally for one assignee or stage.

    Done tasks are left out when include_done is False (ignored when a
    stage is given).
    """
    if time_stage is not None:
        time_stage = _validate_stage(time_stage)

    tasks = repository.list_tasks(assignee=assignee, time_stage=time_stage)
    if not include_done and time_stage is None:
        tasks = [t for t in tasks if t.time_stage != STAGE_DONE]
    return tasks


def list_names() -> List[str]:
    """Names of the lists that currently hold tasks."""
    return repository.list_names()


def update_task_title(task_id: int, new_title: str) -> Task:
    """Rename a task. Blank titles become "New Task"."""
    task = get_task_or_raise(task_id)
    task.title = (new_title or "").strip() or DEFAULT_TITLE
    return _save(task)


def update_task_description(task_id: int, new_description: str) -> Task:
    """Set the description; empty or whitespace clears it."""
    task = get_task_or_raise(task_id)
    task.description = (new_description or "").strip()
    return _save(task)


def update_task_properties(task_id: int, **changes) -> Task:
    """
    Update property sheet fields of a task.

    Accepted keys: priority, energy, list_name, location, story, icon,
    highlighted, assignee, show_in_time_box, show_in_list, show_in_calendar.
    None values are skipped; empty strings clear location and story.

    Raises:
        TaskNotFoundError: If task_id doesn't exist
        InvalidInputError: For unknown keys or invalid values
    """
    unknown = [key for key in changes if key not in _PROPERTY_FIELDS]
    if unknown:
        raise InvalidInputError(
            f"Unknown property '{unknown[0]}'. Use one of: {', '.join(_PROPERTY_FIELDS)}"
        )

    task = get_task_or_raise(task_id)
    for key, value in changes.items():
        if value is None:
            continue
        if key == "priority":
            value = _validate_choice("priority", value, PRIORITIES)
        elif key == "energy":
            value = _validate_choice("energy", value, ENERGIES)
        elif key in ("list_name", "icon", "assignee"):
            value = str(value).strip()
            if not value:
                raise InvalidInputError(f"{key.replace('_name', '')} cannot be empty")
        elif key in ("location", "story"):
            value = str(value).strip() or None
        else:
            value = bool(value)
        setattr(task, key, value)

    updated = _save(task)
    logger.info("Updated task %s: %s", task_id, ", ".join(sorted(changes)))
    return updated


def _unique_labels(labels: Iterable[str]) -> List[str]:
    result: List[str] = []
    for label in labels:
        label = label.strip()
        if label and label not in result:
            result.append(label)
    return result


def add_label(task_id: int, label: str) -> Task:
    label = (label or "").strip()
    if not label:
        raise InvalidInputError("Label cannot be empty")

    task = get_task_or_raise(task_id)
    if label in task.labels:
        return task
    task.labels = _unique_labels(task.labels + [label])
    return _save(task)


def remove_label(task_id: int, label: str) -> Task:
    task = get_task_or_raise(task_id)
    if label not in task.labels:
        raise InvalidInputError(f"Task {task_id} has no label '{label}'")
    task.labels = [lb for lb in task.labels if lb != label]
    return _save(task)


def add_checklist_item(task_id: int, text: str) -> Task:
    text = (text or "").strip()
    if not text:
        raise InvalidInputError("Checklist item text cannot be empty")

    task = get_task_or_raise(task_id)
    task.checklist_items.append(ChecklistItem(id=uuid.uuid4().hex[:8], text=text))
    return _save(task)


def _find_checklist_item(task: Task, item_id: str) -> ChecklistItem:
    for item in task.checklist_items:
        if item.id == item_id:
            return item
    # Also accept the 1-based number shown in listings
    if item_id.isdigit() and 1 <= int(item_id) <= len(task.checklist_items):
        return task.checklist_items[int(item_id) - 1]
    raise ChecklistItemNotFoundError(task.id, item_id)


def toggle_checklist_item(task_id: int, item_id: str) -> Task:
    """Flip an item's completed flag. item_id may be the id or 1-based number."""
    task = get_task_or_raise(task_id)
    item = _find_checklist_item(task, str(item_id))
    item.completed = not item.completed
    return _save(task)


def remove_checklist_item(task_id: int, item_id: str) -> Task:
    task = get_task_or_raise(task_id)
    item = _find_checklist_item(task, str(item_id))
    task.checklist_items = [c for c in task.checklist_items if c.id != item.id]
    return _save(task)


def complete_task(task_id: int, now: Optional[datetime] = None) -> Task:
    """
    Finish a task.

    A plain task moves to done. A recurring scheduled task instead rolls
    its schedule to the next occurrence and is re-staged for that date;
    once its rule has ended it moves to done like any other task.
    Completing a task that is already done is a no-op.

    Raises:
        TaskNotFoundError: If task_id doesn't exist
    """
    now = now or datetime.now()
    task = get_task_or_raise(task_id)
    if task.time_stage == STAGE_DONE:
        return task

    schedule = task.schedule
    if task.is_scheduled and schedule.recurring:
        rule = schedule.recurring
        rule.completed_occurrences += 1
        due = parse_day(schedule.date) or now.date()
        upcoming = next_occurrence(schedule, after=max(due, now.date()))
        if upcoming is not None:
            schedule.date = upcoming.isoformat()
            rolled = update_task_scheduling(task, now)
            logger.info("Task %s repeats on %s", task_id, schedule.date)
            return _save(rolled, now)

    done = move_to_stage(task, STAGE_DONE, now, current_user())
    logger.info("Completed task %s", task_id)
    return _save(done, now)


def complete_tasks(task_ids: List[int], now: Optional[datetime] = None) -> List[Task]:
    """Complete several tasks; stops at the first unknown id."""
    return [complete_task(task_id, now) for task_id in task_ids]


def delete_task(task_id: int) -> None:
    """
    Raises:
        TaskNotFoundError: If task_id doesn't exist
    """
    repository.delete_task(task_id)
    logger.info("Deleted task %s", task_id)


# --- Board ---


def move_task(task_id: int, stage: str, now: Optional[datetime] = None) -> Task:
    """
    Drop a task into another stage.

    Appends the exit/enter history pair, resets the aging counter to "0"
    and puts the task at the bottom of the target stage.

    Raises:
        TaskNotFoundError: If task_id doesn't exist
        InvalidStageError: If stage is unknown
        InvalidDropTargetError: If the task is already in that stage
    """
    stage = _validate_stage(stage)
    task = get_task_or_raise(task_id)

    moved = move_to_stage(task, stage, now, current_user())
    moved.position = repository.next_position(stage)
    logger.info("Moved task %s from %s to %s", task_id, task.time_stage, stage)
    return _save(moved, now)


def reorder_task(task_id: int, over_task_id: int, now: Optional[datetime] = None) -> Task:
    """
    Drag ``task_id`` onto ``over_task_id``.

    Within one stage the task takes the other's place; across stages it
    joins the other task's stage just above it.
    """
    tasks = repository.list_tasks()
    before = {t.id: (t.time_stage, t.position) for t in tasks}

    result = drop_task(tasks, task_id, over_task_id, now)
    changed = [t for t in result if before.get(t.id) != (t.time_stage, t.position)]
    repository.update_tasks(changed)

    logger.info("Dropped task %s onto task %s", task_id, over_task_id)
    return get_task_or_raise(task_id)


def _visible(tasks: List[Task], view: str, filters: Optional[FilterStore]) -> List[Task]:
    return filters.filter_tasks(tasks, view) if filters else tasks


def board(filters: Optional[FilterStore] = None) -> Dict[str, List[Task]]:
    """Time box board columns (stage -> tasks), only show_in_time_box tasks."""
    tasks = [t for t in repository.list_tasks() if t.show_in_time_box]
    return tasks_by_stage(_visible(tasks, VIEW_TIMEBOX, filters))


# --- Scheduling ---


def _build_rule(
    repeat: Optional[str],
    interval: int,
    week_days: Optional[List[str]],
    month_day: Optional[int],
    workdays_only: bool,
    end_date: Optional[str],
    occurrences: Optional[int],
) -> Optional[RecurrenceRule]:
    if not repeat or repeat == "none":
        return None

    ends = "endless"
    if end_date:
        ends = "date"
    elif occurrences:
        ends = "occurrences"

    rule = RecurrenceRule(
        type=repeat.strip().lower(),
        interval=interval,
        week_days=[d.strip().lower()[:3] for d in (week_days or []) if d.strip()],
        month_day=month_day,
        workdays_only=workdays_only,
        ends=ends,
        end_date=end_date,
        occurrences=occurrences,
    )
    validate_rule(rule)
    return rule


def schedule_task(
    task_id: int,
    due: date,
    time: str = "",
    lead_days: int = 0,
    lead_hours: int = 0,
    repeat: Optional[str] = None,
    interval: int = 1,
    week_days: Optional[List[str]] = None,
    month_day: Optional[int] = None,
    workdays_only: bool = False,
    end_date: Optional[date] = None,
    occurrences: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Task:
    """
    Attach a due date (and optional repeat rule) to a task.

    The task shows on the calendar and is immediately re-staged for its
    due date.

    Raises:
        InvalidInputError: Bad time, negative lead time or bad repeat rule
    """
    if lead_days < 0 or lead_hours < 0:
        raise InvalidInputError("Lead time cannot be negative")
    time = (time or "").strip()
    parse_time_of_day(time)

    rule = _build_rule(
        repeat,
        interval,
        week_days,
        month_day,
        workdays_only,
        end_date.isoformat() if end_date else None,
        occurrences,
    )

    task = get_task_or_raise(task_id)
    task.schedule = TaskSchedule(
        enabled=True,
        date=due.isoformat(),
        time=time,
        lead_days=lead_days,
        lead_hours=lead_hours,
        recurring=rule,
    )
    task.show_in_calendar = True

    staged = update_task_scheduling(task, now)
    logger.info("Scheduled task %s for %s", task_id, due.isoformat())
    return _save(staged, now)


def clear_schedule(task_id: int) -> Task:
    """Remove the schedule; the task stays in its current stage."""
    task = get_task_or_raise(task_id)
    task.schedule = None
    task.show_in_calendar = False
    return _save(task)


def reschedule_task(task_id: int, due: date, now: Optional[datetime] = None) -> Task:
    """
    Move a task to another calendar day, keeping time, lead time and repeat.

    An unscheduled task gets a fresh schedule at 09:00.
    """
    task = get_task_or_raise(task_id)
    if task.schedule is None:
        task.schedule = TaskSchedule(enabled=True, time=DEFAULT_EVENT_TIME)
    task.schedule.enabled = True
    task.schedule.date = due.isoformat()
    task.show_in_calendar = True

    staged = update_task_scheduling(task, now)
    logger.info("Rescheduled task %s to %s", task_id, due.isoformat())
    return _save(staged, now)


def refresh_tasks(now: Optional[datetime] = None) -> List[Task]:
    """
    Recalculate stages of scheduled tasks, then aging of every task.

    Only tasks that actually changed are written back.

    Returns:
        The tasks that changed
    """
    now = now or datetime.now()
    tasks = repository.list_tasks()
    time_boxes = repository.list_time_boxes()

    scheduled = [update_task_scheduling(task, now) for task in tasks]
    aged = update_task_aging(scheduled, time_boxes, now)

    original = {t.id: t.to_dict() for t in tasks}
    changed = [t for t in aged if t.to_dict() != original[t.id]]
    repository.update_tasks(changed)

    if changed:
        logger.info("Refreshed %d of %d task(s)", len(changed), len(tasks))
    return changed


# --- Time boxes ---


def list_time_boxes() -> List[TimeBox]:
    return repository.list_time_boxes()


def get_time_box_or_raise(time_box_id: str) -> TimeBox:
    time_box = repository.get_time_box((time_box_id or "").strip().lower())
    if not time_box:
        raise TimeBoxNotFoundError(time_box_id)
    return time_box


def validate_thresholds(warn: Optional[int], expire: Optional[int]) -> None:
    """
    Raises:
        InvalidInputError: warn without expire, warn not below expire, or
            a negative value
    """
    if (warn is not None and warn < 0) or (expire is not None and expire < 0):
        raise InvalidInputError("Thresholds cannot be negative")
    if warn is not None and expire is None:
        raise InvalidInputError("A warning threshold needs an expiry threshold")
    if warn is not None and warn >= expire:
        raise InvalidInputError("Warning threshold must be less than expiry threshold")


def update_time_box(
    time_box_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    warn_threshold: Optional[int] = None,
    expire_threshold: Optional[int] = None,
    clear_thresholds: bool = False,
) -> TimeBox:
    """
    Rename a time box or change its aging thresholds (days).

    Thresholds not given keep their stored value; clear_thresholds removes
    both before applying any new ones.

    Raises:
        TimeBoxNotFoundError: If time_box_id doesn't exist
        InvalidInputError: For an empty name or invalid thresholds
    """
    time_box = get_time_box_or_raise(time_box_id)

    if name is not None:
        name = name.strip()
        if not name:
            raise InvalidInputError("Time box name cannot be empty")
        time_box.name = name
    if description is not None:
        time_box.description = description.strip()

    if clear_thresholds:
        time_box.warn_threshold = None
        time_box.expire_threshold = None
    if warn_threshold is not None or expire_threshold is not None:
        if warn_threshold is not None:
            time_box.warn_threshold = warn_threshold
        if expire_threshold is not None:
            time_box.expire_threshold = expire_threshold
        validate_thresholds(time_box.warn_threshold, time_box.expire_threshold)

    updated = repository.update_time_box(time_box)
    logger.info(
        "Updated time box %s (warn=%s, expire=%s)",
        updated.id,
        updated.warn_threshold,
        updated.expire_threshold,
    )
    return updated


def reset_time_boxes() -> List[TimeBox]:
    logger.info("Reset time boxes to defaults")
    return repository.reset_time_boxes()


# --- Banner ---


def get_banner_config() -> BannerConfig:
    """Current user's banner config; defaults when none was saved."""
    return repository.get_banner_config(current_user()) or BannerConfig()


def save_banner_config(config: BannerConfig) -> BannerConfig:
    if not 0 <= config.volume <= 100:
        raise InvalidInputError("Volume must be between 0 and 100")
    if config.transition_time < 1:
        raise InvalidInputError("Transition time must be at least 1 second")
    if config.quote_duration < 1:
        raise InvalidInputError("Quote duration must be at least 1 second")
    return repository.save_banner_config(current_user(), config)


def update_banner_settings(
    transition_time: Optional[int] = None,
    autoplay: Optional[bool] = None,
    volume: Optional[int] = None,
    quote_rotation: Optional[bool] = None,
    quote_duration: Optional[int] = None,
) -> BannerConfig:
    config = get_banner_config()
    if transition_time is not None:
        config.transition_time = transition_time
    if autoplay is not None:
        config.autoplay = autoplay
    if volume is not None:
        config.volume = volume
    if quote_rotation is not None:
        config.quote_rotation = quote_rotation
    if quote_duration is not None:
        config.quote_duration = quote_duration
    return save_banner_config(config)


def _validate_url(url: str) -> str:
    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidInputError(f"Invalid URL '{url}'. Use an http(s) address")
    return url


def add_banner_image(url: str) -> BannerConfig:
    config = get_banner_config()
    config.images.append({"url": _validate_url(url), "order": len(config.images)})
    return save_banner_config(config)


def add_banner_quote(text: str, author: Optional[str] = None) -> BannerConfig:
    text = (text or "").strip()
    if not text:
        raise InvalidInputError("Quote text cannot be empty")
    config = get_banner_config()
    config.quotes.append(
        {"text": text, "author": (author or "").strip() or None, "order": len(config.quotes)}
    )
    return save_banner_config(config)


def add_banner_audio(url: str, name: Optional[str] = None) -> BannerConfig:
    url = _validate_url(url)
    config = get_banner_config()
    track_name = (name or "").strip() or url.rstrip("/").rsplit("/", 1)[-1]
    config.audio.append({"url": url, "name": track_name, "order": len(config.audio)})
    return save_banner_config(config)


def remove_banner_item(kind: str, index: int) -> BannerConfig:
    """Remove image/quote/audio number ``index`` (1-based) and renumber the rest."""
    attr = {"image": "images", "quote": "quotes", "audio": "audio"}.get(kind)
    if attr is None:
        raise InvalidInputError(f"Unknown banner item '{kind}'. Use image, quote or audio")

    config = get_banner_config()
    items = getattr(config, attr)
    if not 1 <= index <= len(items):
        raise InvalidInputError(f"No {kind} #{index}")
    del items[index - 1]
    for order, item in enumerate(items):
        item["order"] = order
    return save_banner_config(config)


# --- Views ---


def list_view(filters: Optional[FilterStore] = None) -> Dict[str, List[Task]]:
    """Tasks grouped by list name."""
    return group_by_list(_visible(repository.list_tasks(), VIEW_LISTS, filters))


def calendar_view(year: int, month: int, filters: Optional[FilterStore] = None):
    """Month grid of scheduled tasks."""
    if not 1 <= month <= 12:
        raise InvalidInputError("Month must be between 1 and 12")
    return month_grid(year, month, _visible(repository.list_tasks(), VIEW_CALENDAR, filters))


def home_view(now: Optional[datetime] = None) -> Dict[str, object]:
    """
    Home screen: greeting data, banner quote and the today/aging/upcoming
    task sections.
    """
    now = now or datetime.now()
    config = get_banner_config()
    quote = config.quotes[0] if config.quotes else {"text": DEFAULT_QUOTE, "author": None}

    sections = dashboard(repository.list_tasks(), now)
    return {
        "user": current_user(),
        "date": now.date().isoformat(),
        "quote": quote,
        **sections,
    }


# --- Sample data ---


def create_sample_tasks(now: Optional[datetime] = None) -> List[Task]:
    """
    Seed a demo board (aging work, today's meetings, upcoming schedules).

    Tasks are created in their stated stage and entry date; call
    refresh_tasks() afterwards to derive aging and scheduled stages.
    """
    now = now or datetime.now()
    user = current_user()
    created = []

    for template in SAMPLE_TASKS:
        entered = (now - timedelta(days=template["entered"])).isoformat()
        stage = template["time_stage"]

        schedule = None
        if template.get("due") is not None:
            recurring = template.get("recurring")
            schedule = TaskSchedule(
                enabled=True,
                date=(now.date() + timedelta(days=template["due"])).isoformat(),
                time=template.get("time", ""),
                lead_days=template.get("lead_days", 0),
                lead_hours=template.get("lead_hours", 0),
                recurring=RecurrenceRule.from_dict(recurring) if recurring else None,
            )

        task = Task(
            id=0,
            title=template["title"],
            description=template.get("description", ""),
            time_stage=stage,
            stage_entry_date=entered,
            assignee=user,
            list_name=template["list"],
            priority=template.get("priority", DEFAULT_PRIORITY),
            energy=template.get("energy", DEFAULT_ENERGY),
            location=template.get("location"),
            labels=list(template.get("labels", [])),
            icon=template.get("icon", "blue"),
            show_in_calendar=template.get("show_in_calendar", False),
            schedule=schedule,
            history=initial_history(stage, entered, user),
            position=repository.next_position(stage),
            created_at=entered,
            updated_at=now.isoformat(),
            created_by=user,
        )
        created.append(repository.create_task(task))

    logger.info("Created %d sample task(s)", len(created))
    return created

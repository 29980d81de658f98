"""
FILE: doerfy/core/repository.py
PURPOSE: Database operations and SQLite connection management
EXPORTS:
  - get_connection() -> Connection
  - init_database(conn) -> None
  - create_task(task) -> Task
  - get_task(task_id) -> Task | None
  - list_tasks(assignee, time_stage) -> List[Task]
  - update_task(task) -> Task
  - update_tasks(tasks) -> None
  - delete_task(task_id) -> None
  - next_position(time_stage) -> int
  - list_names() -> List[str]
  - list_time_boxes() -> List[TimeBox]
  - get_time_box(time_box_id) -> TimeBox | None
  - update_time_box(time_box) -> TimeBox
  - reset_time_boxes() -> List[TimeBox]
  - get_banner_config(user_id) -> BannerConfig | None
  - save_banner_config(user_id, config) -> BannerConfig
DEPENDENCIES:
  - sqlite3 (stdlib)
  - pathlib (stdlib)
  - doerfy.config (database location)
  - doerfy.core.models (Task, TimeBox, BannerConfig)
NOTES:
  - Database stored at ~/.doerfy/doerfy.db unless DOERFY_HOME / DOERFY_DB say otherwise
  - Auto-creates directory, schema and stock time boxes on first run
  - Returns domain objects (Task, etc.), never raw dicts
  - SQLite errors are logged and re-raised; the service layer decides what
    the user sees
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

from ..config import get_settings
from .constants import DEFAULT_TIME_BOXES, TIME_STAGES
from .exceptions import TaskNotFoundError, TimeBoxNotFoundError
from .models import BannerConfig, Task, TimeBox

logger = logging.getLogger(__name__)

# Database file location (tests monkeypatch these)
DB_DIR = get_settings().data_dir
DB_PATH = get_settings().db_path

# Schema file location (relative to this file)
SCHEMA_PATH = Path(__file__).parent.parent / "db" / "schema.sql"

# Columns added after the first release; (name, declaration)
_TASK_COLUMN_MIGRATIONS = (
    ("show_in_time_box", "INTEGER NOT NULL DEFAULT 1"),
    ("show_in_list", "INTEGER NOT NULL DEFAULT 1"),
    ("show_in_calendar", "INTEGER NOT NULL DEFAULT 0"),
    ("checklist_items", "TEXT DEFAULT '[]'"),
    ("position", "INTEGER NOT NULL DEFAULT 0"),
)


def get_connection() -> sqlite3.Connection:
    """
    Get SQLite connection to the Doerfy database.

    Creates the data directory if it doesn't exist.
    Enables row_factory for dict-like row access.
    Initializes database schema on first connection.
    """
    DB_DIR.mkdir(parents=True, exist_ok=True)
    Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    init_database(conn)

    return conn


def init_database(conn: sqlite3.Connection) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times: the schema uses CREATE ... IF NOT EXISTS,
    older task tables get their missing columns added, and the stock time
    boxes are only inserted into an empty table.
    """
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='time_boxes'"
    )
    if cursor.fetchone() is None:
        with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
            conn.executescript(f.read())
        logger.debug("Created schema in %s", DB_PATH)

    existing = {row[1] for row in conn.execute("PRAGMA table_info(tasks)").fetchall()}
    for name, declaration in _TASK_COLUMN_MIGRATIONS:
        if name not in existing:
            logger.info("Adding column tasks.%s", name)
            conn.execute(f"ALTER TABLE tasks ADD COLUMN {name} {declaration}")

    count = conn.execute("SELECT COUNT(*) FROM time_boxes").fetchone()[0]
    if count == 0:
        _insert_default_time_boxes(conn)

    conn.commit()


def _insert_default_time_boxes(conn: sqlite3.Connection) -> None:
    now = datetime.now().isoformat()
    conn.executemany(
        """
        INSERT INTO time_boxes (id, name, description, warn_threshold, expire_threshold, sort_order, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                tb["id"],
                tb["name"],
                tb["description"],
                tb["warn_threshold"],
                tb["expire_threshold"],
                tb["order"],
                now,
            )
            for tb in DEFAULT_TIME_BOXES
        ],
    )


@contextmanager
def _session() -> Iterator[sqlite3.Connection]:
    """Connection that commits on success, rolls back and logs on failure."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.error("Database error: %s", e)
        raise
    finally:
        conn.close()


# --- Task Operations ---


def _task_values(task: Task) -> tuple:
    return (
        task.title,
        task.description,
        task.time_stage,
        task.stage_entry_date,
        task.assignee,
        task.list_name,
        task.priority,
        task.energy,
        task.location,
        task.story,
        json.dumps(task.labels),
        task.icon,
        int(task.highlighted),
        int(task.show_in_time_box),
        int(task.show_in_list),
        int(task.show_in_calendar),
        task.status,
        task.aging_status,
        json.dumps(task.schedule.to_dict()) if task.schedule else None,
        json.dumps([h.to_dict() for h in task.history]),
        json.dumps([c.to_dict() for c in task.checklist_items]),
        task.position,
    )


_TASK_COLUMNS = (
    "title, description, time_stage, stage_entry_date, assignee, list, "
    "priority, energy, location, story, labels, icon, highlighted, "
    "show_in_time_box, show_in_list, show_in_calendar, status, aging_status, "
    "schedule, history, checklist_items, position"
)


def create_task(task: Task) -> Task:
    """
    Insert a new task.

    Args:
        task: Task built by the service layer; its id is ignored

    Returns:
        The stored Task, with its new id

    Note:
        Sets created_at and updated_at automatically when missing.
    """
    now = datetime.now().isoformat()
    created_at = task.created_at or now

    with _session() as conn:
        cursor = conn.execute(
            f"""
            INSERT INTO tasks ({_TASK_COLUMNS}, created_at, updated_at, created_by)
            VALUES ({", ".join("?" * 22)}, ?, ?, ?)
            """,
            _task_values(task) + (created_at, task.updated_at or created_at, task.created_by),
        )
        task_id = cursor.lastrowid

    created = get_task(task_id)
    if not created:
        raise TaskNotFoundError(task_id)
    return created


def get_task(task_id: int) -> Optional[Task]:
    """
    Fetch single task by ID.

    Returns:
        Task object if found, None otherwise
    """
    with _session() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()

    return Task.from_row(row) if row else None


def list_tasks(
    assignee: Optional[str] = None, time_stage: Optional[str] = None
) -> List[Task]:
    """
    List tasks, optionally narrowed to one assignee and/or stage.

    Returns:
        Tasks ordered by position, then creation order
    """
    query = "SELECT * FROM tasks"
    clauses = []
    params: list = []
    if assignee is not None:
        clauses.append("assignee = ?")
        params.append(assignee)
    if time_stage is not None:
        clauses.append("time_stage = ?")
        params.append(time_stage)
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    query += " ORDER BY position, id"

    with _session() as conn:
        rows = conn.execute(query, params).fetchall()

    return [Task.from_row(row) for row in rows]


def _update(conn: sqlite3.Connection, task: Task, now: str) -> int:
    assignments = ", ".join(f"{column.strip()} = ?" for column in _TASK_COLUMNS.split(","))
    cursor = conn.execute(
        f"UPDATE tasks SET {assignments}, updated_at = ? WHERE id = ?",
        _task_values(task) + (task.updated_at or now, task.id),
    )
    return cursor.rowcount


def update_task(task: Task) -> Task:
    """
    Write every field of ``task`` back to its row.

    Raises:
        TaskNotFoundError: If the task doesn't exist
    """
    now = datetime.now().isoformat()
    with _session() as conn:
        if _update(conn, task, now) == 0:
            raise TaskNotFoundError(task.id)

    updated = get_task(task.id)
    if not updated:
        raise TaskNotFoundError(task.id)
    return updated


def update_tasks(tasks: List[Task]) -> None:
    """Write several tasks in one transaction (refresh, reorder)."""
    if not tasks:
        return
    now = datetime.now().isoformat()
    with _session() as conn:
        for task in tasks:
            if _update(conn, task, now) == 0:
                raise TaskNotFoundError(task.id)


def delete_task(task_id: int) -> None:
    """
    Delete task by ID.

    Raises:
        TaskNotFoundError: If task doesn't exist
    """
    with _session() as conn:
        cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        if cursor.rowcount == 0:
            raise TaskNotFoundError(task_id)


def next_position(time_stage: str) -> int:
    """Position just below the last task of a stage."""
    with _session() as conn:
        row = conn.execute(
            "SELECT MAX(position) FROM tasks WHERE time_stage = ?", (time_stage,)
        ).fetchone()
    return 0 if row[0] is None else row[0] + 1


def list_names() -> List[str]:
    """Distinct list names in use, alphabetically."""
    with _session() as conn:
        rows = conn.execute("SELECT DISTINCT list FROM tasks ORDER BY list").fetchall()
    return [row[0] for row in rows]


# --- Time Box Operations ---


def list_time_boxes() -> List[TimeBox]:
    """All time boxes in board order."""
    with _session() as conn:
        rows = conn.execute("SELECT * FROM time_boxes ORDER BY sort_order").fetchall()
    return [TimeBox.from_row(row) for row in rows]


def get_time_box(time_box_id: str) -> Optional[TimeBox]:
    with _session() as conn:
        row = conn.execute(
            "SELECT * FROM time_boxes WHERE id = ?", (time_box_id,)
        ).fetchone()
    return TimeBox.from_row(row) if row else None


def update_time_box(time_box: TimeBox) -> TimeBox:
    """
    Save name, description and thresholds of a time box.

    Raises:
        TimeBoxNotFoundError: If no time box has this id
    """
    now = datetime.now().isoformat()
    with _session() as conn:
        cursor = conn.execute(
            """
            UPDATE time_boxes
            SET name = ?,
                description = ?,
                warn_threshold = ?,
                expire_threshold = ?,
                sort_order = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (
                time_box.name,
                time_box.description,
                time_box.warn_threshold,
                time_box.expire_threshold,
                time_box.order,
                now,
                time_box.id,
            ),
        )
        if cursor.rowcount == 0:
            raise TimeBoxNotFoundError(time_box.id)

    return get_time_box(time_box.id)


def reset_time_boxes() -> List[TimeBox]:
    """Replace every time box with the stock configuration."""
    with _session() as conn:
        conn.execute(
            f"DELETE FROM time_boxes WHERE id IN ({', '.join('?' * len(TIME_STAGES))})",
            TIME_STAGES,
        )
        _insert_default_time_boxes(conn)
    return list_time_boxes()


# --- Banner Operations ---


def get_banner_config(user_id: str) -> Optional[BannerConfig]:
    """Stored banner config for a user, None if never saved."""
    with _session() as conn:
        row = conn.execute(
            "SELECT * FROM banner_configs WHERE user_id = ?", (user_id,)
        ).fetchone()
    return BannerConfig.from_row(row) if row else None


def save_banner_config(user_id: str, config: BannerConfig) -> BannerConfig:
    """Insert or replace the user's banner config."""
    now = datetime.now().isoformat()
    with _session() as conn:
        conn.execute(
            """
            INSERT INTO banner_configs (
                user_id, images, transition_time, audio, autoplay, volume,
                quotes, quote_rotation, quote_duration, text_style, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                images = excluded.images,
                transition_time = excluded.transition_time,
                audio = excluded.audio,
                autoplay = excluded.autoplay,
                volume = excluded.volume,
                quotes = excluded.quotes,
                quote_rotation = excluded.quote_rotation,
                quote_duration = excluded.quote_duration,
                text_style = excluded.text_style,
                updated_at = excluded.updated_at
            """,
            (
                user_id,
                json.dumps(config.images),
                config.transition_time,
                json.dumps(config.audio),
                int(config.autoplay),
                config.volume,
                json.dumps(config.quotes),
                int(config.quote_rotation),
                config.quote_duration,
                json.dumps(config.text_style),
                now,
            ),
        )

    return get_banner_config(user_id)

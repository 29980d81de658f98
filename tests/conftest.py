"""Shared pytest configuration and fixtures for tests."""

import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path

# Settings are read on first import, so point them somewhere harmless first
os.environ["DOERFY_HOME"] = tempfile.mkdtemp(prefix="doerfy-tests-")
os.environ["DOERFY_USER"] = "tester"
os.environ.pop("DOERFY_DB", None)
os.environ.pop("DOERFY_DEFAULT_LIST", None)

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest  # noqa: E402

from doerfy.core import repository  # noqa: E402
from doerfy.core.models import Task, TaskSchedule, TimeBox  # noqa: E402

# Fixed "now" used by time-dependent tests (a Wednesday)
NOW = datetime(2025, 3, 12, 10, 0, 0)


@pytest.fixture(autouse=True)
def temp_db(monkeypatch, tmp_path):
    """Use temporary database for all tests."""
    db_path = tmp_path / "test_doerfy.db"
    monkeypatch.setattr(repository, "DB_PATH", db_path)
    monkeypatch.setattr(repository, "DB_DIR", tmp_path)
    yield db_path


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def time_boxes():
    """The stock time boxes as objects."""
    return [
        TimeBox(id="queue", name="Do Queue"),
        TimeBox(id="do", name="Do", warn_threshold=24, expire_threshold=30, order=1),
        TimeBox(id="doing", name="Doing", warn_threshold=6, expire_threshold=7, order=2),
        TimeBox(id="today", name="Do Today", warn_threshold=1, expire_threshold=1, order=3),
        TimeBox(id="done", name="Done", order=4),
    ]


def make_task(task_id=1, stage="queue", entered=NOW, **kwargs) -> Task:
    """In-memory task for pure-logic tests."""
    return Task(
        id=task_id,
        title=kwargs.pop("title", f"Task {task_id}"),
        time_stage=stage,
        stage_entry_date=entered.isoformat() if entered else None,
        assignee=kwargs.pop("assignee", "tester"),
        **kwargs,
    )


def scheduled(due: str, time: str = "", lead_days: int = 0, lead_hours: int = 0, recurring=None):
    return TaskSchedule(
        enabled=True,
        date=due,
        time=time,
        lead_days=lead_days,
        lead_hours=lead_hours,
        recurring=recurring,
    )

"""
Tests for per-view filters.
"""

from datetime import date

import pytest

from conftest import make_task, scheduled
from doerfy.core.exceptions import InvalidInputError
from doerfy.core.filters import FilterCriteria, FilterStore, build_filter_store, matches


@pytest.fixture
def tasks():
    return [
        make_task(1, "doing", list_name="work", priority="high", labels=["finance"]),
        make_task(2, "today", list_name="work", priority="low", energy="low"),
        make_task(3, "queue", list_name="home", priority="high", location="garage"),
        make_task(
            4, "do", list_name="home", priority="low", assignee="sam",
            schedule=scheduled("2025-03-14"),
        ),
    ]


def test_empty_criteria_match_everything(tasks):
    assert all(matches(t, FilterCriteria()) for t in tasks)
    assert FilterCriteria().active() == {}


def test_list_criteria_match_any_value(tasks):
    store = FilterStore()
    store.set_filter("timebox", priority=["high", "medium"])
    assert [t.id for t in store.filter_tasks(tasks, "timebox")] == [1, 3]


def test_criteria_combine(tasks):
    store = FilterStore()
    store.set_filter("timebox", priority="high", list_name="home")
    assert [t.id for t in store.filter_tasks(tasks, "timebox")] == [3]


def test_single_string_is_wrapped_for_list_keys():
    store = FilterStore()
    criteria = store.set_filter("lists", time_stage="doing")
    assert criteria.time_stage == ["doing"]


def test_labels_location_and_assignee(tasks):
    store = FilterStore()
    store.set_filter("timebox", labels=["finance", "travel"])
    assert [t.id for t in store.filter_tasks(tasks, "timebox")] == [1]

    store.clear_all_filters("timebox")
    store.set_filter("timebox", location="garage")
    assert [t.id for t in store.filter_tasks(tasks, "timebox")] == [3]

    store.clear_all_filters("timebox")
    store.set_filter("timebox", assignee="sam")
    assert [t.id for t in store.filter_tasks(tasks, "timebox")] == [4]


def test_due_date_filter_skips_unscheduled_tasks(tasks):
    store = FilterStore()
    store.set_filter("calendar", due_date=date(2025, 3, 14))
    assert [t.id for t in store.filter_tasks(tasks, "calendar")] == [1, 2, 3, 4]

    store.set_filter("calendar", due_date=date(2025, 3, 15))
    assert [t.id for t in store.filter_tasks(tasks, "calendar")] == [1, 2, 3]


def test_views_keep_separate_filters(tasks):
    store = FilterStore()
    store.set_filter("timebox", list_name="work")
    store.set_filter("lists", list_name="home")

    assert [t.id for t in store.filter_tasks(tasks, "timebox")] == [1, 2]
    assert [t.id for t in store.filter_tasks(tasks, "lists")] == [3, 4]
    assert store.active_filters("calendar") == {}

    store.clear_all_filters("timebox")
    assert store.active_filters("timebox") == {}
    assert store.active_filters("lists") == {"list_name": "home"}


def test_clear_single_filter():
    store = FilterStore()
    store.set_filter("timebox", priority=["high"], list_name="work")
    criteria = store.clear_filter("timebox", "priority")
    assert criteria.priority == []
    assert criteria.list_name == "work"


def test_unknown_view_or_key_raises():
    store = FilterStore()
    with pytest.raises(InvalidInputError):
        store.set_filter("kanban", priority=["high"])
    with pytest.raises(InvalidInputError):
        store.set_filter("timebox", colour="red")
    with pytest.raises(InvalidInputError):
        store.clear_filter("timebox", "colour")
    with pytest.raises(InvalidInputError):
        store.get("agenda")


def test_build_filter_store_skips_empty_values():
    store = build_filter_store("timebox", priority=("high",), list_name=None, labels=[])
    assert store.active_filters("timebox") == {"priority": ["high"]}
    assert build_filter_store("lists").active_filters("lists") == {}

"""
FILE: doerfy/core/filters.py
PURPOSE: Per-view task filters (time box board, lists, calendar)
EXPORTS:
  - FilterCriteria (dataclass)
  - FilterStore (class)
  - matches(task, criteria) -> bool
  - build_filter_store(view, **criteria) -> FilterStore
  - FILTER_KEYS: Filter names accepted by set_filter()
DEPENDENCIES:
  - dataclasses (stdlib)
  - doerfy.core.models (Task)
NOTES:
  - Each view keeps its own criteria; clearing one view leaves the others
  - Scalar criteria match exactly, list criteria match any of their values
  - The due date filter only applies to tasks that have a schedule date
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Dict, Iterable, List, Optional

from .constants import VIEWS
from .dates import parse_day
from .exceptions import InvalidInputError
from .models import Task


@dataclass
class FilterCriteria:
    """Filter values for one view. None / empty means "not filtered"."""

    assignee: Optional[str] = None
    time_stage: List[str] = field(default_factory=list)
    list_name: Optional[str] = None
    priority: List[str] = field(default_factory=list)
    energy: List[str] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    location: Optional[str] = None
    story: Optional[str] = None
    due_date: Optional[date] = None

    def active(self) -> Dict[str, object]:
        """Only the criteria that are set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) not in (None, [], "")
        }


FILTER_KEYS = tuple(f.name for f in fields(FilterCriteria))
LIST_KEYS = ("time_stage", "priority", "energy", "labels")


def matches(task: Task, criteria: FilterCriteria) -> bool:
    if criteria.assignee and task.assignee != criteria.assignee:
        return False
    if criteria.time_stage and task.time_stage not in criteria.time_stage:
        return False
    if criteria.list_name and task.list_name != criteria.list_name:
        return False
    if criteria.priority and task.priority not in criteria.priority:
        return False
    if criteria.energy and task.energy not in criteria.energy:
        return False
    if criteria.location and task.location != criteria.location:
        return False
    if criteria.story and task.story != criteria.story:
        return False
    if criteria.labels and not any(label in task.labels for label in criteria.labels):
        return False
    if criteria.due_date and task.schedule and task.schedule.date:
        if parse_day(task.schedule.date) != criteria.due_date:
            return False
    return True


class FilterStore:
    """
    Holds the filter criteria of every view.

    The REPL keeps one instance for the whole session; one-shot CLI
    commands build a throwaway store from their options.
    """

    def __init__(self):
        self.filters: Dict[str, FilterCriteria] = {view: FilterCriteria() for view in VIEWS}

    def _check_view(self, view: str) -> None:
        if view not in self.filters:
            raise InvalidInputError(
                f"Invalid view '{view}'. Must be one of: {', '.join(VIEWS)}"
            )

    def get(self, view: str) -> FilterCriteria:
        self._check_view(view)
        return self.filters[view]

    def set_filter(self, view: str, **criteria) -> FilterCriteria:
        """
        Merge ``criteria`` into the view's filters.

        Raises:
            InvalidInputError: For an unknown view or filter key
        """
        self._check_view(view)
        unknown = [key for key in criteria if key not in FILTER_KEYS]
        if unknown:
            raise InvalidInputError(
                f"Unknown filter '{unknown[0]}'. Use one of: {', '.join(FILTER_KEYS)}"
            )

        for key in LIST_KEYS:
            if key in criteria and isinstance(criteria[key], str):
                criteria[key] = [criteria[key]]

        self.filters[view] = replace(self.filters[view], **criteria)
        return self.filters[view]

    def clear_filter(self, view: str, key: str) -> FilterCriteria:
        self._check_view(view)
        if key not in FILTER_KEYS:
            raise InvalidInputError(
                f"Unknown filter '{key}'. Use one of: {', '.join(FILTER_KEYS)}"
            )
        empty = [] if key in LIST_KEYS else None
        self.filters[view] = replace(self.filters[view], **{key: empty})
        return self.filters[view]

    def clear_all_filters(self, view: str) -> None:
        self._check_view(view)
        self.filters[view] = FilterCriteria()

    def active_filters(self, view: str) -> Dict[str, object]:
        return self.get(view).active()

    def filter_tasks(self, tasks: Iterable[Task], view: str) -> List[Task]:
        criteria = self.get(view)
        return [task for task in tasks if matches(task, criteria)]


def build_filter_store(view: str, **criteria) -> FilterStore:
    """
    One-off store for a single view, skipping criteria that are None or empty.

    Used by one-shot commands that take filters as options.
    """
    store = FilterStore()
    given = {key: value for key, value in criteria.items() if value not in (None, [], ())}
    for key in LIST_KEYS:
        if key in given:
            given[key] = list(given[key]) if not isinstance(given[key], str) else given[key]
    if given:
        store.set_filter(view, **given)
    return store

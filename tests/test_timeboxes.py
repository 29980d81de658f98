"""
Tests for time box configuration and aging thresholds.
"""

import pytest

from doerfy.core import service
from doerfy.core.exceptions import InvalidInputError, TimeBoxNotFoundError


def test_list_time_boxes_in_board_order():
    names = [tb.name for tb in service.list_time_boxes()]
    assert names == ["Do Queue", "Do", "Doing", "Do Today", "Done"]


def test_get_time_box_is_case_insensitive():
    assert service.get_time_box_or_raise(" Doing ").id == "doing"
    with pytest.raises(TimeBoxNotFoundError):
        service.get_time_box_or_raise("backlog")


@pytest.mark.parametrize(
    "warn, expire",
    [(-1, 5), (None, -1), (3, None), (5, 5), (6, 2)],
)
def test_validate_thresholds_rejects(warn, expire):
    with pytest.raises(InvalidInputError):
        service.validate_thresholds(warn, expire)


@pytest.mark.parametrize("warn, expire", [(None, None), (None, 4), (0, 1), (3, 10)])
def test_validate_thresholds_accepts(warn, expire):
    service.validate_thresholds(warn, expire)


def test_update_thresholds_keeps_unset_values():
    updated = service.update_time_box("doing", warn_threshold=3)
    assert (updated.warn_threshold, updated.expire_threshold) == (3, 7)

    updated = service.update_time_box("doing", expire_threshold=10)
    assert (updated.warn_threshold, updated.expire_threshold) == (3, 10)


def test_update_rejects_warn_not_below_stored_expire():
    with pytest.raises(InvalidInputError):
        service.update_time_box("doing", warn_threshold=7)
    assert service.get_time_box_or_raise("doing").warn_threshold == 6, "nothing saved"


def test_clear_thresholds_then_set_new():
    cleared = service.update_time_box("do", clear_thresholds=True)
    assert (cleared.warn_threshold, cleared.expire_threshold) == (None, None)

    expire_only = service.update_time_box("do", clear_thresholds=True, expire_threshold=14)
    assert (expire_only.warn_threshold, expire_only.expire_threshold) == (None, 14)


def test_rename_and_describe():
    updated = service.update_time_box("queue", name="  Backlog ", description="Someday")
    assert updated.name == "Backlog"
    assert updated.description == "Someday"

    with pytest.raises(InvalidInputError):
        service.update_time_box("queue", name="  ")


def test_reset_restores_defaults():
    service.update_time_box("today", name="Now", clear_thresholds=True)
    reset = service.reset_time_boxes()
    today = next(tb for tb in reset if tb.id == "today")
    assert (today.name, today.warn_threshold, today.expire_threshold) == ("Do Today", 1, 1)

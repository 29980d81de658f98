"""
Tests for repeating schedules: next occurrence, end conditions and rule
validation.
"""

from datetime import date

import pytest

from conftest import scheduled
from doerfy.core.exceptions import InvalidInputError
from doerfy.core.models import RecurrenceRule
from doerfy.core.recurrence import describe_rule, next_occurrence, validate_rule


def _next(due, after=None, **rule):
    return next_occurrence(scheduled(due, recurring=RecurrenceRule(**rule)), after)


def test_daily_with_interval():
    assert _next("2025-03-12", type="daily", interval=2) == date(2025, 3, 14)


def test_weekly_without_days_repeats_on_same_weekday():
    assert _next("2025-03-12", type="weekly") == date(2025, 3, 19)


def test_weekly_on_chosen_days():
    rule = dict(type="weekly", week_days=["mon", "thu"])
    assert _next("2025-03-12", **rule) == date(2025, 3, 13)
    assert _next("2025-03-12", after=date(2025, 3, 13), **rule) == date(2025, 3, 17)


def test_every_other_week_skips_odd_weeks():
    assert _next("2025-03-12", type="weekly", interval=2, week_days=["mon"]) == date(2025, 3, 24)


def test_monthly_clamps_to_month_end():
    rule = dict(type="monthly", month_day=31)
    assert _next("2025-01-31", **rule) == date(2025, 2, 28)
    assert _next("2025-01-31", after=date(2025, 2, 28), **rule) == date(2025, 3, 31)


def test_yearly_from_leap_day():
    assert _next("2024-02-29", type="yearly") == date(2025, 2, 28)


def test_workdays_only_skips_weekend():
    # 2025-03-14 is a Friday
    assert _next("2025-03-14", type="daily", workdays_only=True) == date(2025, 3, 17)


def test_catches_up_past_the_after_date():
    assert _next("2025-03-01", after=date(2025, 3, 12), type="daily") == date(2025, 3, 13)


def test_catches_up_from_a_very_old_anchor():
    after = date(2025, 3, 12)
    assert _next("1900-06-15", after=after, type="daily") == date(2025, 3, 13)
    assert _next("2000-01-05", after=after, type="weekly") == date(2025, 3, 19)
    assert _next("1990-01-31", after=after, type="monthly", month_day=31) == date(2025, 3, 31)
    assert _next("1900-06-15", after=after, type="yearly") == date(2025, 6, 15)


def test_catching_up_keeps_weekend_shift():
    # 2025-03-14 is a Friday
    rule = dict(type="daily", workdays_only=True)
    assert _next("2000-01-01", after=date(2025, 3, 14), **rule) == date(2025, 3, 17)


def test_ends_on_date():
    rule = dict(type="daily", ends="date", end_date="2025-03-13")
    assert _next("2025-03-12", **rule) == date(2025, 3, 13)
    assert _next("2025-03-12", after=date(2025, 3, 13), **rule) is None


def test_ends_after_occurrences():
    rule = dict(type="daily", ends="occurrences", occurrences=3, completed_occurrences=3)
    assert _next("2025-03-12", **rule) is None

    rule["completed_occurrences"] = 2
    assert _next("2025-03-12", **rule) == date(2025, 3, 13)


def test_no_rule_or_no_date_means_no_next():
    assert next_occurrence(scheduled("2025-03-12")) is None
    assert next_occurrence(scheduled(None, recurring=RecurrenceRule(type="daily"))) is None


@pytest.mark.parametrize(
    "rule",
    [
        RecurrenceRule(type="hourly"),
        RecurrenceRule(type="daily", interval=0),
        RecurrenceRule(type="weekly", week_days=["funday"]),
        RecurrenceRule(type="monthly", month_day=32),
        RecurrenceRule(type="daily", ends="never"),
        RecurrenceRule(type="daily", ends="date"),
        RecurrenceRule(type="daily", ends="occurrences", occurrences=0),
    ],
)
def test_validate_rule_rejects_bad_rules(rule):
    with pytest.raises(InvalidInputError):
        validate_rule(rule)


def test_validate_rule_accepts_good_rule():
    validate_rule(RecurrenceRule(type="weekly", interval=2, week_days=["mon", "fri"]))


def test_describe_rule():
    assert describe_rule(None) == "-"
    assert describe_rule(RecurrenceRule(type="daily")) == "every day"
    assert (
        describe_rule(RecurrenceRule(type="weekly", interval=2, week_days=["mon", "thu"]))
        == "every 2 weeks on mon, thu"
    )
    assert (
        describe_rule(RecurrenceRule(type="monthly", ends="occurrences", occurrences=6, completed_occurrences=2))
        == "every month, 2/6 done"
    )

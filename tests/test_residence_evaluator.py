from datetime import date, datetime, timedelta, timezone

import pytest

from app.application.use_cases.residence.evaluator import (
    SKIP_INACTIVE,
    SKIP_MALFORMED_EXPIRY_DATE,
    SKIP_NO_EXPIRY_DATE,
    classify_residence_status,
    days_until_expiry,
    evaluate_person,
    parse_expiry_date,
    select_tiers,
    skip_reason,
)
from app.domain.entities import NotificationTier, ResidenceStatus, User, UserRole

THREE_MONTHS = NotificationTier.THREE_MONTHS
ONE_MONTH = NotificationTier.ONE_MONTH
ONE_WEEK = NotificationTier.ONE_WEEK
DAILY = NotificationTier.DAILY


def _person(expiry=None, *, is_active=True):
    return User(
        id=7,
        username="resident",
        full_name="Resident Person",
        email="resident@example.com",
        password="hash",
        role=UserRole.ENGINEER,
        is_active=is_active,
        residence_expiry_date=expiry,
    )


@pytest.mark.parametrize(
    ("days", "expected"),
    [
        (120, []),
        (91, []),
        (90, [THREE_MONTHS]),
        (31, [THREE_MONTHS]),
        (30, [ONE_MONTH]),
        (8, [ONE_MONTH]),
        (7, [ONE_WEEK, DAILY]),
        (2, [ONE_WEEK, DAILY]),
        (1, [DAILY]),
        (0, [DAILY]),
        (-1, []),
        (-30, []),
    ],
)
def test_select_tiers_boundaries(days, expected):
    assert select_tiers(days) == expected


def test_one_week_before_expiry_fires_week_and_daily():
    evaluation = evaluate_person(_person(date(2025, 7, 8)), date(2025, 7, 1))

    assert evaluation is not None
    assert evaluation.days_until_expiry == 7
    assert set(evaluation.tiers) == {ONE_WEEK, DAILY}


def test_thirty_days_is_one_month_only():
    evaluation = evaluate_person(_person(date(2025, 7, 31)), date(2025, 7, 1))

    assert evaluation is not None
    assert evaluation.days_until_expiry == 30
    assert evaluation.tiers == (ONE_MONTH,)


def test_expired_residence_selects_no_tier():
    evaluation = evaluate_person(_person(date(2025, 6, 20)), date(2025, 7, 1))

    assert evaluation is not None
    assert evaluation.days_until_expiry == -11
    assert evaluation.tiers == ()


def test_days_until_expiry_rounds_partial_days_up():
    reference = datetime(2025, 7, 1, 15, 30, tzinfo=timezone(timedelta(hours=3)))

    assert days_until_expiry(date(2025, 7, 8), reference) == 7
    assert days_until_expiry(date(2025, 7, 2), reference) == 1
    assert days_until_expiry(date(2025, 7, 1), reference) == 0


def test_days_until_expiry_with_plain_dates():
    assert days_until_expiry(date(2025, 10, 1), date(2025, 7, 3)) == 90


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (date(2025, 1, 2), date(2025, 1, 2)),
        (datetime(2025, 1, 2, 10, 0), date(2025, 1, 2)),
        ("2025-01-02", date(2025, 1, 2)),
        ("2025-01-02T00:00:00", date(2025, 1, 2)),
        ("", None),
        ("not-a-date", None),
        (None, None),
    ],
)
def test_parse_expiry_date(value, expected):
    assert parse_expiry_date(value) == expected


def test_skip_reasons():
    assert skip_reason(_person(None)) == SKIP_NO_EXPIRY_DATE
    assert skip_reason(_person(date(2025, 1, 1), is_active=False)) == SKIP_INACTIVE
    assert skip_reason(_person("31/12/2025")) == SKIP_MALFORMED_EXPIRY_DATE
    assert skip_reason(_person(date(2025, 1, 1))) is None


def test_evaluate_person_returns_none_when_skipped():
    assert evaluate_person(_person(None), date(2025, 7, 1)) is None
    assert evaluate_person(_person("garbage"), date(2025, 7, 1)) is None


@pytest.mark.parametrize(
    ("days", "status"),
    [
        (-1, ResidenceStatus.EXPIRED),
        (0, ResidenceStatus.EXPIRING_SOON),
        (90, ResidenceStatus.EXPIRING_SOON),
        (91, ResidenceStatus.ACTIVE),
    ],
)
def test_classify_residence_status(days, status):
    assert classify_residence_status(days) is status

"""Compute days until a residence permit expires and the tiers that apply."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from app.domain.entities import (
    TIER_RULES,
    NotificationTier,
    ResidenceStatus,
    User,
)

logger = logging.getLogger(__name__)

EXPIRING_SOON_DAYS = 90

SKIP_INACTIVE = "inactive"
SKIP_NO_EXPIRY_DATE = "no_expiry_date"
SKIP_MALFORMED_EXPIRY_DATE = "malformed_expiry_date"
SKIP_NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ExpiryEvaluation:
    """Days remaining for a person and the tiers selected for that count."""

    user_id: int
    expiry_date: date
    days_until_expiry: int
    tiers: tuple[NotificationTier, ...]


def parse_expiry_date(value: date | datetime | str | None) -> date | None:
    """Return ``value`` as a :class:`date`, or ``None`` when missing/malformed."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            logger.warning("Ignoring malformed residence expiry date %r", value)
            return None
    logger.warning("Ignoring residence expiry date of type %s", type(value).__name__)
    return None


def days_until_expiry(expiry: date, reference: date | datetime) -> int:
    """Return ``ceil((expiry - reference) / 1 day)``.

    With a plain date the difference is a whole number of days. With a
    datetime the partial day left before midnight counts as a full day.
    """

    if isinstance(reference, datetime):
        expiry_start = datetime.combine(expiry, time.min, tzinfo=reference.tzinfo)
        return math.ceil((expiry_start - reference) / timedelta(days=1))
    return (expiry - reference).days


def select_tiers(days: int) -> list[NotificationTier]:
    """Return every tier whose window contains ``days``.

    Windows are not exclusive: 7 days left selects both ``1_week`` and
    ``daily``. Negative values (already expired) select nothing.
    """

    return [rule.tier for rule in TIER_RULES if rule.matches(days)]


def skip_reason(person: User) -> str | None:
    """Return why ``person`` is not evaluated, or ``None`` when it is."""

    if not person.is_active:
        return SKIP_INACTIVE
    if person.residence_expiry_date is None:
        return SKIP_NO_EXPIRY_DATE
    if parse_expiry_date(person.residence_expiry_date) is None:
        return SKIP_MALFORMED_EXPIRY_DATE
    return None


def evaluate_person(person: User, reference: date | datetime) -> ExpiryEvaluation | None:
    """Evaluate ``person`` against the tier table.

    Returns ``None`` for inactive persons and for persons whose expiry date is
    missing or malformed.
    """

    if skip_reason(person) is not None:
        return None
    expiry = parse_expiry_date(person.residence_expiry_date)
    if expiry is None:  # pragma: no cover - covered by skip_reason
        return None
    days = days_until_expiry(expiry, reference)
    return ExpiryEvaluation(
        user_id=person.id,
        expiry_date=expiry,
        days_until_expiry=days,
        tiers=tuple(select_tiers(days)),
    )


def classify_residence_status(days: int) -> ResidenceStatus:
    if days < 0:
        return ResidenceStatus.EXPIRED
    if days <= EXPIRING_SOON_DAYS:
        return ResidenceStatus.EXPIRING_SOON
    return ResidenceStatus.ACTIVE


__all__ = [
    "EXPIRING_SOON_DAYS",
    "SKIP_INACTIVE",
    "SKIP_NO_EXPIRY_DATE",
    "SKIP_MALFORMED_EXPIRY_DATE",
    "SKIP_NOT_FOUND",
    "ExpiryEvaluation",
    "classify_residence_status",
    "days_until_expiry",
    "evaluate_person",
    "parse_expiry_date",
    "select_tiers",
    "skip_reason",
]

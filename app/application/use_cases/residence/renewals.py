"""Use cases for listing expiring residences and recording renewals."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta

from sqlalchemy.orm import Session

from app.domain.entities import (
    EVENT_RESIDENCE_RENEWED,
    Notification,
    NotificationPriority,
    ResidenceNotificationAudit,
    ResidenceRenewal,
    ResidenceStatus,
    User,
)
from app.infrastructure.notifications import dispatch_notification
from app.infrastructure.repositories import (
    NotificationRepository,
    ResidenceNotificationRepository,
    ResidenceRenewalRepository,
    UserRepository,
)
from app.utils import now_in_app_timezone

from .evaluator import (
    EXPIRING_SOON_DAYS,
    classify_residence_status,
    days_until_expiry,
)

_RENEWED_TEXT = {
    "ar": ("تم تجديد الإقامة", "تم تجديد الإقامة حتى تاريخ {date}"),
    "en": ("Residence renewed", "Residence renewed until {date}"),
}


@dataclass(frozen=True)
class ExpiringResidence:
    """A person whose residence expires soon (or already expired)."""

    user: User
    days_until_expiry: int
    status: ResidenceStatus


def list_expiring_residences(
    session: Session, *, today: date, within_days: int = EXPIRING_SOON_DAYS
) -> list[ExpiringResidence]:
    """Return active persons whose residence expires within ``within_days``.

    Already expired residences are included so they stay visible to HR.
    """

    repository = UserRepository(session)
    users = repository.list_expiring_before(today + timedelta(days=within_days))
    entries: list[ExpiringResidence] = []
    for user in users:
        if user.residence_expiry_date is None:  # pragma: no cover - filtered by query
            continue
        days = days_until_expiry(user.residence_expiry_date, today)
        entries.append(
            ExpiringResidence(
                user=user, days_until_expiry=days, status=classify_residence_status(days)
            )
        )
    return entries


def renew_residence(
    session: Session,
    *,
    user_id: int,
    new_expiry_date: date,
    renewal_months: int,
    processed_by: int,
    language: str = "ar",
) -> tuple[User, ResidenceRenewal]:
    """Record a renewal, move the expiry date and notify the person."""

    if renewal_months <= 0:
        raise ValueError("Renewal period must be at least one month")

    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None:
        raise ValueError("User not found")

    now = now_in_app_timezone()
    renewal = ResidenceRenewalRepository(session).create(
        ResidenceRenewal(
            id=None,
            user_id=user.id,
            old_expiry_date=user.residence_expiry_date,
            new_expiry_date=new_expiry_date,
            renewal_period_months=renewal_months,
            processed_by=processed_by,
            processed_at=now,
            notes=f"تجديد الإقامة لمدة {renewal_months} شهر",
        ),
        commit=False,
    )
    updated = repository.update(
        replace(
            user,
            residence_expiry_date=new_expiry_date,
            residence_status=classify_residence_status(
                days_until_expiry(new_expiry_date, now.date())
            ),
        )
    )

    title, template = _RENEWED_TEXT.get(language, _RENEWED_TEXT["ar"])
    notification = NotificationRepository(session).create(
        Notification(
            id=None,
            user_id=updated.id,
            event_type=EVENT_RESIDENCE_RENEWED,
            title=title,
            message=template.format(date=new_expiry_date.isoformat()),
            priority=NotificationPriority.LOW,
            payload={
                "user_id": updated.id,
                "renewal_id": renewal.id,
                "expiry_date": new_expiry_date.isoformat(),
            },
            created_at=now,
        )
    )
    dispatch_notification(notification)
    return updated, renewal


def list_residence_notification_audits(
    session: Session, *, user_id: int | None = None, limit: int = 200
) -> list[ResidenceNotificationAudit]:
    return ResidenceNotificationRepository(session).list(user_id=user_id, limit=limit)


__all__ = [
    "ExpiringResidence",
    "list_expiring_residences",
    "list_residence_notification_audits",
    "renew_residence",
]

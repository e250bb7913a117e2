"""Write residence expiry notifications for a person and the oversight roles."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime

from app.domain.entities import (
    EVENT_RESIDENCE_EXPIRY,
    EVENT_RESIDENCE_EXPIRY_MANAGER,
    TIER_RULES_BY_TIER,
    DispatchResult,
    Notification,
    NotificationTier,
    ResidenceNotificationAudit,
    User,
    is_visible_to_role,
)
from app.infrastructure.residence_store import ResidenceNotificationStore
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

_LABELS = {
    "ar": {
        "employee": "الموظف",
        "residence_number": "رقم الإقامة",
        "expiry_date": "تاريخ الانتهاء",
        "unknown": "غير محدد",
    },
    "en": {
        "employee": "Employee",
        "residence_number": "Residence number",
        "expiry_date": "Expiry date",
        "unknown": "N/A",
    },
}


def build_expiry_message(
    person: User, title: str, expiry_date: date, *, language: str = "ar"
) -> str:
    """Return the notification body shared by the person and oversight copies."""

    labels = _LABELS.get(language, _LABELS["ar"])
    residence_number = person.residence_number or labels["unknown"]
    return (
        f"{title}\n"
        f"{labels['employee']}: {person.full_name}\n"
        f"{labels['residence_number']}: {residence_number}\n"
        f"{labels['expiry_date']}: {expiry_date.isoformat()}"
    )


class ResidenceNotificationDispatcher:
    """Create the notifications and audit row for one ``(person, tier)`` pair."""

    def __init__(
        self,
        store: ResidenceNotificationStore,
        *,
        language: str = "ar",
        publish: Callable[[Notification], None] | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._store = store
        self._language = language
        self._publish = publish
        self._clock = clock

    def dispatch(
        self,
        person: User,
        tier: NotificationTier,
        *,
        expiry_date: date,
        days_until_expiry: int,
        oversight_users: Sequence[User],
    ) -> DispatchResult:
        """Write ``1 + len(oversight_users)`` notifications and one audit row.

        The rows are committed together, so a failed dispatch leaves nothing
        behind and the tier fires again on the next sweep. Errors are logged
        and returned as ``DispatchResult.err``; they are never raised to the
        caller.
        """

        rule = TIER_RULES_BY_TIER[tier]
        title = rule.title(self._language)
        message = build_expiry_message(
            person, title, expiry_date, language=self._language
        )
        payload = {
            "user_id": person.id,
            "tier": tier.value,
            "expiry_date": expiry_date.isoformat(),
            "days_until_expiry": days_until_expiry,
        }
        now = self._clock()

        recipients: list[User] = [person, *oversight_users]
        notifications = [
            Notification(
                id=None,
                user_id=recipient.id,
                event_type=EVENT_RESIDENCE_EXPIRY_MANAGER if index else EVENT_RESIDENCE_EXPIRY,
                title=f"{title} - {person.full_name}" if index else title,
                message=message,
                priority=rule.priority,
                payload=dict(payload),
                created_at=now,
            )
            for index, recipient in enumerate(recipients)
        ]
        audit = ResidenceNotificationAudit(
            id=None,
            user_id=person.id,
            tier=tier,
            expiry_date=expiry_date,
            days_until_expiry=days_until_expiry,
            sent_to=",".join(
                f"{manager.role.value}:{manager.id}" for manager in oversight_users
            ),
            is_processed=False,
            sent_at=now,
        )

        try:
            created = self._store.insert_dispatch(notifications, audit)
        except Exception as exc:
            logger.exception(
                "Error sending %s residence notification for user %s", tier.value, person.id
            )
            return DispatchResult.err(tier, str(exc) or exc.__class__.__name__)

        for recipient, notification in zip(recipients, created):
            self._push(notification, recipient)

        logger.info(
            "Sent %s residence notification for user %s to %d recipients",
            tier.value,
            person.id,
            len(created),
        )
        return DispatchResult.ok(tier, len(created))

    def _push(self, notification: Notification, recipient: User) -> None:
        if self._publish is None:
            return
        if not is_visible_to_role(notification.event_type, recipient.role):
            logger.debug(
                "Not pushing %s to user %s: role %s has no residence visibility",
                notification.event_type,
                recipient.id,
                recipient.role.value,
            )
            return
        try:
            self._publish(notification)
        except Exception:
            # Realtime delivery is best-effort; the notification is already stored.
            logger.warning(
                "Could not push notification %s to user %s",
                notification.id,
                notification.user_id,
                exc_info=True,
            )


__all__ = ["ResidenceNotificationDispatcher", "build_expiry_message"]

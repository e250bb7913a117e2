"""Helper utilities shared across API route handlers."""

from collections.abc import Iterable

from app.domain.entities import Notification, User, is_visible_to_role


def visible_notifications(
    notifications: Iterable[Notification], user: User
) -> list[Notification]:
    """Drop residence expiry alerts the user's role is not allowed to see."""

    return [
        notification
        for notification in notifications
        if is_visible_to_role(notification.event_type, user.role)
    ]

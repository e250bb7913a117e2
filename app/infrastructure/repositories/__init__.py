"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .residence_notification_repository import ResidenceNotificationRepository
from .residence_renewal_repository import ResidenceRenewalRepository
from .user_repository import UserRepository

__all__ = [
    "NotificationRepository",
    "ResidenceNotificationRepository",
    "ResidenceRenewalRepository",
    "UserRepository",
]

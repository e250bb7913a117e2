"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .residence import ResidenceNotificationModel, ResidenceRenewalModel
from .user import UserModel

__all__ = [
    "NotificationModel",
    "ResidenceNotificationModel",
    "ResidenceRenewalModel",
    "UserModel",
]

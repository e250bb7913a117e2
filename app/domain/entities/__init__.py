"""Domain entities exposed by the application."""

from .notification import (
    EVENT_RESIDENCE_EXPIRY,
    EVENT_RESIDENCE_EXPIRY_MANAGER,
    EVENT_RESIDENCE_RENEWED,
    RESIDENCE_RESTRICTED_EVENTS,
    Notification,
    NotificationPriority,
    is_visible_to_role,
)
from .residence import (
    REPEATING_TIERS,
    TIER_RULES,
    TIER_RULES_BY_TIER,
    NotificationTier,
    ResidenceNotificationAudit,
    ResidenceRenewal,
    TierRule,
)
from .role import (
    OVERSIGHT_ROLES,
    RESIDENCE_MANAGER_ROLES,
    RESIDENCE_NOTIFICATION_VIEWER_ROLES,
    RESIDENCE_VIEWER_ROLES,
    UserRole,
)
from .sweep import DispatchResult, PersonSweepResult, SweepReport
from .user import Nationality, ResidenceStatus, User

__all__ = [
    "EVENT_RESIDENCE_EXPIRY",
    "EVENT_RESIDENCE_EXPIRY_MANAGER",
    "EVENT_RESIDENCE_RENEWED",
    "RESIDENCE_RESTRICTED_EVENTS",
    "Notification",
    "NotificationPriority",
    "is_visible_to_role",
    "REPEATING_TIERS",
    "TIER_RULES",
    "TIER_RULES_BY_TIER",
    "NotificationTier",
    "ResidenceNotificationAudit",
    "ResidenceRenewal",
    "TierRule",
    "OVERSIGHT_ROLES",
    "RESIDENCE_MANAGER_ROLES",
    "RESIDENCE_NOTIFICATION_VIEWER_ROLES",
    "RESIDENCE_VIEWER_ROLES",
    "UserRole",
    "DispatchResult",
    "PersonSweepResult",
    "SweepReport",
    "Nationality",
    "ResidenceStatus",
    "User",
]

"""Domain roles that can be assigned to a staff member."""

from enum import Enum


class UserRole(str, Enum):
    """Closed set of roles known to the tracker."""

    ADMIN = "admin"
    PROJECT_MANAGER = "project_manager"
    ENGINEER = "engineer"
    ADMIN_STAFF = "admin_staff"
    HR_MANAGER = "hr_manager"
    GENERAL_MANAGER = "general_manager"


# Receive a copy of every residence expiry notification.
OVERSIGHT_ROLES: frozenset[UserRole] = frozenset(
    {UserRole.HR_MANAGER, UserRole.GENERAL_MANAGER, UserRole.ADMIN}
)

# May read residence notifications in their inbox.
RESIDENCE_NOTIFICATION_VIEWER_ROLES: frozenset[UserRole] = frozenset(
    {
        UserRole.ADMIN,
        UserRole.HR_MANAGER,
        UserRole.GENERAL_MANAGER,
        UserRole.PROJECT_MANAGER,
    }
)

# May list expiring residences.
RESIDENCE_VIEWER_ROLES: frozenset[UserRole] = OVERSIGHT_ROLES

# May renew residences and trigger manual sweeps.
RESIDENCE_MANAGER_ROLES: frozenset[UserRole] = frozenset(
    {UserRole.ADMIN, UserRole.HR_MANAGER}
)


__all__ = [
    "UserRole",
    "OVERSIGHT_ROLES",
    "RESIDENCE_NOTIFICATION_VIEWER_ROLES",
    "RESIDENCE_VIEWER_ROLES",
    "RESIDENCE_MANAGER_ROLES",
]

"""Domain entity representing a staff member."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from .role import UserRole


class Nationality(str, Enum):
    """Whether the staff member is a citizen or holds a residence permit."""

    SAUDI = "saudi"
    RESIDENT = "resident"


class ResidenceStatus(str, Enum):
    """Lifecycle state of a residence permit relative to today."""

    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


@dataclass
class User:
    """Core attributes describing a staff member of the firm."""

    id: int | None
    username: str
    full_name: str
    email: str
    password: str
    role: UserRole
    is_active: bool
    nationality: Nationality = Nationality.SAUDI
    residence_number: str | None = None
    residence_expiry_date: date | None = None
    residence_status: ResidenceStatus = ResidenceStatus.ACTIVE
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_role(self, *roles: UserRole) -> bool:
        """Return ``True`` when the user's role is one of ``roles``."""

        return self.role in roles

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.role is UserRole.ADMIN


__all__ = ["Nationality", "ResidenceStatus", "User"]

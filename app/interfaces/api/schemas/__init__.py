from .auth import Token
from .notification import (
    NotificationCountResponse,
    NotificationMarkReadRequest,
    NotificationRead,
)
from .residence import (
    DispatchResultRead,
    ExpiringResidenceRead,
    PersonSweepResultRead,
    ResidenceNotificationAuditRead,
    ResidenceRenewalRead,
    ResidenceRenewRequest,
    ResidenceRenewResponse,
    SweepReportRead,
)
from .user import StaffRead, StaffUpdate

__all__ = [
    "Token",
    "NotificationCountResponse",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "DispatchResultRead",
    "ExpiringResidenceRead",
    "PersonSweepResultRead",
    "ResidenceNotificationAuditRead",
    "ResidenceRenewalRead",
    "ResidenceRenewRequest",
    "ResidenceRenewResponse",
    "SweepReportRead",
    "StaffRead",
    "StaffUpdate",
]

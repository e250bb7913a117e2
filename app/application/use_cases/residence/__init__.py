"""Residence permit expiry tracking use cases."""

from .dispatcher import ResidenceNotificationDispatcher, build_expiry_message
from .evaluator import (
    ExpiryEvaluation,
    classify_residence_status,
    days_until_expiry,
    evaluate_person,
    parse_expiry_date,
    select_tiers,
    skip_reason,
)
from .renewals import (
    ExpiringResidence,
    list_expiring_residences,
    list_residence_notification_audits,
    renew_residence,
)
from .service import ResidenceExpiryService, build_residence_expiry_service

__all__ = [
    "ResidenceNotificationDispatcher",
    "build_expiry_message",
    "ExpiryEvaluation",
    "classify_residence_status",
    "days_until_expiry",
    "evaluate_person",
    "parse_expiry_date",
    "select_tiers",
    "skip_reason",
    "ExpiringResidence",
    "list_expiring_residences",
    "list_residence_notification_audits",
    "renew_residence",
    "ResidenceExpiryService",
    "build_residence_expiry_service",
]

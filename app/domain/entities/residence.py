"""Residence permit tracking entities: expiry tiers, audit rows and renewals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from .notification import NotificationPriority


class NotificationTier(str, Enum):
    """Threshold bands that decide when an expiry notification fires."""

    THREE_MONTHS = "3_months"
    ONE_MONTH = "1_month"
    ONE_WEEK = "1_week"
    DAILY = "daily"


@dataclass(frozen=True)
class TierRule:
    """Window of days-until-expiry covered by a tier.

    ``upper`` is always inclusive. ``lower`` is exclusive unless
    ``lower_inclusive`` is set.
    """

    tier: NotificationTier
    lower: int
    upper: int
    priority: NotificationPriority
    title_ar: str
    title_en: str
    lower_inclusive: bool = False

    def matches(self, days_until_expiry: int) -> bool:
        if days_until_expiry > self.upper:
            return False
        if self.lower_inclusive:
            return days_until_expiry >= self.lower
        return days_until_expiry > self.lower

    def title(self, language: str = "ar") -> str:
        return self.title_en if language == "en" else self.title_ar


TIER_RULES: tuple[TierRule, ...] = (
    TierRule(
        tier=NotificationTier.THREE_MONTHS,
        lower=30,
        upper=90,
        priority=NotificationPriority.LOW,
        title_ar="تنبيه: الإقامة تنتهي خلال 3 أشهر",
        title_en="Notice: residence expires within 3 months",
    ),
    TierRule(
        tier=NotificationTier.ONE_MONTH,
        lower=7,
        upper=30,
        priority=NotificationPriority.MEDIUM,
        title_ar="تحذير: الإقامة تنتهي خلال شهر واحد",
        title_en="Warning: residence expires within one month",
    ),
    TierRule(
        tier=NotificationTier.ONE_WEEK,
        lower=1,
        upper=7,
        priority=NotificationPriority.HIGH,
        title_ar="تحذير عاجل: الإقامة تنتهي خلال أسبوع",
        title_en="Urgent: residence expires within one week",
    ),
    TierRule(
        tier=NotificationTier.DAILY,
        lower=0,
        upper=7,
        lower_inclusive=True,
        priority=NotificationPriority.HIGH,
        title_ar="تحذير فوري: الإقامة تنتهي غداً",
        title_en="Immediate: residence is about to expire",
    ),
)

TIER_RULES_BY_TIER: dict[NotificationTier, TierRule] = {
    rule.tier: rule for rule in TIER_RULES
}

# Tiers that may fire again on each new day while their window holds.
REPEATING_TIERS = frozenset({NotificationTier.DAILY})


@dataclass
class ResidenceNotificationAudit:
    """Record of a tier having fired for a person and expiry date."""

    id: int | None
    user_id: int
    tier: NotificationTier
    expiry_date: date
    days_until_expiry: int
    sent_to: str
    is_processed: bool = False
    sent_at: datetime | None = None


@dataclass
class ResidenceRenewal:
    """History entry written whenever HR renews a residence permit."""

    id: int | None
    user_id: int
    old_expiry_date: date | None
    new_expiry_date: date
    renewal_period_months: int
    processed_by: int
    processed_at: datetime | None = None
    notes: str | None = None


__all__ = [
    "NotificationTier",
    "TierRule",
    "TIER_RULES",
    "TIER_RULES_BY_TIER",
    "REPEATING_TIERS",
    "ResidenceNotificationAudit",
    "ResidenceRenewal",
]

"""Outcome types produced by residence expiry sweeps."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .residence import NotificationTier


@dataclass(frozen=True)
class DispatchResult:
    """Either ``ok`` with the number of notifications written, or ``err``."""

    tier: NotificationTier
    count: int = 0
    error: str | None = None

    @classmethod
    def ok(cls, tier: NotificationTier, count: int) -> "DispatchResult":
        return cls(tier=tier, count=count)

    @classmethod
    def err(cls, tier: NotificationTier, reason: str) -> "DispatchResult":
        return cls(tier=tier, error=reason)

    @property
    def is_ok(self) -> bool:
        return self.error is None


@dataclass
class PersonSweepResult:
    """What happened to a single person during a sweep."""

    user_id: int
    days_until_expiry: int | None = None
    tiers: list[NotificationTier] = field(default_factory=list)
    dispatches: list[DispatchResult] = field(default_factory=list)
    already_sent: list[NotificationTier] = field(default_factory=list)
    skipped_reason: str | None = None

    @property
    def notifications_created(self) -> int:
        return sum(result.count for result in self.dispatches if result.is_ok)

    @property
    def failed(self) -> bool:
        return any(not result.is_ok for result in self.dispatches)


@dataclass
class SweepReport:
    """Aggregated outcome of one sweep over the tracked persons."""

    started_at: datetime
    finished_at: datetime | None = None
    results: list[PersonSweepResult] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def persons_evaluated(self) -> int:
        return sum(1 for result in self.results if result.skipped_reason is None)

    @property
    def persons_skipped(self) -> int:
        return sum(1 for result in self.results if result.skipped_reason is not None)

    @property
    def notifications_created(self) -> int:
        return sum(result.notifications_created for result in self.results)

    @property
    def failures(self) -> list[PersonSweepResult]:
        return [result for result in self.results if result.failed]


__all__ = ["DispatchResult", "PersonSweepResult", "SweepReport"]

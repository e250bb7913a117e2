"""Schemas for residence expiry tracking endpoints."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationTier, ResidenceStatus, SweepReport

from .user import StaffRead


class ExpiringResidenceRead(BaseModel):
    user: StaffRead
    days_until_expiry: int
    status: ResidenceStatus

    model_config = ConfigDict(from_attributes=True)


class ResidenceRenewRequest(BaseModel):
    user_id: int = Field(..., ge=1)
    new_expiry_date: date
    renewal_months: int = Field(..., ge=1, le=120)


class ResidenceRenewalRead(BaseModel):
    id: int
    user_id: int
    old_expiry_date: date | None
    new_expiry_date: date
    renewal_period_months: int
    processed_by: int
    processed_at: datetime | None
    notes: str | None

    model_config = ConfigDict(from_attributes=True)


class ResidenceRenewResponse(BaseModel):
    message: str
    user: StaffRead
    renewal: ResidenceRenewalRead


class ResidenceNotificationAuditRead(BaseModel):
    id: int
    user_id: int
    tier: NotificationTier
    expiry_date: date
    days_until_expiry: int
    sent_to: str
    is_processed: bool
    sent_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class DispatchResultRead(BaseModel):
    tier: NotificationTier
    ok: bool
    count: int
    error: str | None


class PersonSweepResultRead(BaseModel):
    user_id: int
    days_until_expiry: int | None
    tiers: list[NotificationTier]
    already_sent: list[NotificationTier]
    dispatches: list[DispatchResultRead]
    skipped_reason: str | None


class SweepReportRead(BaseModel):
    ok: bool
    error: str | None
    started_at: datetime
    finished_at: datetime | None
    persons_evaluated: int
    persons_skipped: int
    notifications_created: int
    failures: int
    results: list[PersonSweepResultRead]

    @classmethod
    def from_report(cls, report: SweepReport) -> "SweepReportRead":
        return cls(
            ok=report.ok,
            error=report.error,
            started_at=report.started_at,
            finished_at=report.finished_at,
            persons_evaluated=report.persons_evaluated,
            persons_skipped=report.persons_skipped,
            notifications_created=report.notifications_created,
            failures=len(report.failures),
            results=[
                PersonSweepResultRead(
                    user_id=result.user_id,
                    days_until_expiry=result.days_until_expiry,
                    tiers=result.tiers,
                    already_sent=result.already_sent,
                    dispatches=[
                        DispatchResultRead(
                            tier=dispatch.tier,
                            ok=dispatch.is_ok,
                            count=dispatch.count,
                            error=dispatch.error,
                        )
                        for dispatch in result.dispatches
                    ],
                    skipped_reason=result.skipped_reason,
                )
                for result in report.results
            ],
        )


__all__ = [
    "DispatchResultRead",
    "ExpiringResidenceRead",
    "PersonSweepResultRead",
    "ResidenceNotificationAuditRead",
    "ResidenceRenewalRead",
    "ResidenceRenewRequest",
    "ResidenceRenewResponse",
    "SweepReportRead",
]

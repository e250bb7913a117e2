"""Residence expiry tracking endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.use_cases.residence import (
    list_expiring_residences,
    list_residence_notification_audits,
    renew_residence,
)
from app.config import get_settings
from app.domain.entities import (
    RESIDENCE_MANAGER_ROLES,
    RESIDENCE_VIEWER_ROLES,
    User,
)
from app.infrastructure.database import get_db
from app.infrastructure.scheduler import ResidenceNotificationScheduler
from app.interfaces.api.dependencies import get_residence_scheduler, require_roles
from app.interfaces.api.schemas import (
    ExpiringResidenceRead,
    ResidenceNotificationAuditRead,
    ResidenceRenewalRead,
    ResidenceRenewRequest,
    ResidenceRenewResponse,
    StaffRead,
    SweepReportRead,
)
from app.utils import today_in_app_timezone

router = APIRouter(prefix="/residence", tags=["residence"])
logger = logging.getLogger(__name__)


@router.get("/expiring", response_model=list[ExpiringResidenceRead])
def list_expiring(
    within_days: int = Query(90, ge=0, le=366),
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*RESIDENCE_VIEWER_ROLES)),
):
    """Return persons whose residence expires within ``within_days`` days."""

    entries = list_expiring_residences(
        db, today=today_in_app_timezone(), within_days=within_days
    )
    return [
        ExpiringResidenceRead(
            user=StaffRead.model_validate(entry.user),
            days_until_expiry=entry.days_until_expiry,
            status=entry.status,
        )
        for entry in entries
    ]


@router.post("/renew", response_model=ResidenceRenewResponse)
def renew(
    payload: ResidenceRenewRequest,
    db: Session = Depends(get_db),
    scheduler: ResidenceNotificationScheduler = Depends(get_residence_scheduler),
    current_user: User = Depends(require_roles(*RESIDENCE_MANAGER_ROLES)),
):
    try:
        user, renewal = renew_residence(
            db,
            user_id=payload.user_id,
            new_expiry_date=payload.new_expiry_date,
            renewal_months=payload.renewal_months,
            processed_by=current_user.id,
            language=get_settings().notification_language,
        )
    except ValueError as exc:
        detail = str(exc)
        status_code = (
            status.HTTP_404_NOT_FOUND
            if detail == "User not found"
            else status.HTTP_400_BAD_REQUEST
        )
        raise HTTPException(status_code=status_code, detail=detail) from exc

    logger.info(
        "User %s renewed the residence of user %s until %s",
        current_user.id,
        user.id,
        user.residence_expiry_date,
    )
    scheduler.trigger_for_person(user.id)
    return ResidenceRenewResponse(
        message="Residence renewed",
        user=StaffRead.model_validate(user),
        renewal=ResidenceRenewalRead.model_validate(renewal),
    )


@router.post("/check", response_model=SweepReportRead)
def run_check(
    user_id: int | None = Query(None, ge=1),
    scheduler: ResidenceNotificationScheduler = Depends(get_residence_scheduler),
    current_user: User = Depends(require_roles(*RESIDENCE_MANAGER_ROLES)),
):
    """Run a sweep now, for everyone or for a single person."""

    logger.info("Manual residence check requested by user %s", current_user.id)
    if user_id is None:
        report = scheduler.run_sweep()
    else:
        report = scheduler.run_sweep_for_person(user_id)
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Residence check is unavailable",
        )
    return SweepReportRead.from_report(report)


@router.get("/notifications", response_model=list[ResidenceNotificationAuditRead])
def list_audits(
    user_id: int | None = Query(None, ge=1),
    limit: int = Query(200, ge=1, le=1000),
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*RESIDENCE_VIEWER_ROLES)),
):
    """Return the residence notification history, newest first."""

    audits = list_residence_notification_audits(db, user_id=user_id, limit=limit)
    return [ResidenceNotificationAuditRead.model_validate(audit) for audit in audits]

"""Routes to read and update staff records."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases.users import get_user as get_user_uc
from app.application.use_cases.users import update_user as update_user_uc
from app.domain.entities import OVERSIGHT_ROLES, RESIDENCE_MANAGER_ROLES, User
from app.infrastructure.database import get_db
from app.infrastructure.scheduler import ResidenceNotificationScheduler
from app.interfaces.api.dependencies import (
    get_current_active_user,
    get_residence_scheduler,
)
from app.interfaces.api.schemas import StaffRead, StaffUpdate

router = APIRouter(prefix="/staff", tags=["staff"])
logger = logging.getLogger(__name__)

_SELF_EDITABLE_FIELDS = {"full_name", "password"}


def _to_read_model(user: User) -> StaffRead:
    return StaffRead.model_validate(user)


@router.get("/me", response_model=StaffRead)
def read_current_user(current_user: User = Depends(get_current_active_user)):
    """Return the authenticated staff member."""

    return _to_read_model(current_user)


@router.get("/{user_id}", response_model=StaffRead)
def read_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    if user_id != current_user.id and current_user.role not in OVERSIGHT_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    try:
        user = get_user_uc(db, user_id, include_inactive=True)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _to_read_model(user)


@router.patch("/{user_id}", response_model=StaffRead)
def update_user(
    user_id: int,
    user_in: StaffUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    scheduler: ResidenceNotificationScheduler = Depends(get_residence_scheduler),
):
    """Update a staff record.

    When the residence expiry date changes, or an inactive record is
    reactivated, the person is re-checked right away instead of waiting for
    the next scheduled sweep.
    """

    update_data = user_in.model_dump(exclude_unset=True)

    if current_user.role not in RESIDENCE_MANAGER_ROLES:
        if user_id != current_user.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
        forbidden = set(update_data) - _SELF_EDITABLE_FIELDS
        if forbidden:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Cannot change: {', '.join(sorted(forbidden))}",
            )

    residence_kwargs = {
        field: update_data[field]
        for field in ("residence_number", "residence_expiry_date")
        if field in update_data
    }

    try:
        was_active = get_user_uc(db, user_id, include_inactive=True).is_active
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    try:
        user, expiry_changed = update_user_uc(
            db,
            user_id=user_id,
            full_name=update_data.get("full_name"),
            email=update_data.get("email"),
            role=update_data.get("role"),
            is_active=update_data.get("is_active"),
            nationality=update_data.get("nationality"),
            password=update_data.get("password"),
            **residence_kwargs,
        )
    except ValueError as exc:
        detail = str(exc)
        status_code = (
            status.HTTP_404_NOT_FOUND
            if detail == "User not found"
            else status.HTTP_400_BAD_REQUEST
        )
        raise HTTPException(status_code=status_code, detail=detail) from exc

    reactivated = user.is_active and not was_active
    if (expiry_changed or reactivated) and user.residence_expiry_date is not None:
        logger.info(
            "Residence expiry of user %s is %s (%s); re-checking",
            user.id,
            user.residence_expiry_date,
            "reactivated" if reactivated else "changed",
        )
        scheduler.trigger_for_person(user.id)

    return _to_read_model(user)

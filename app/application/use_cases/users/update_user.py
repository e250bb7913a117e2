"""Use case for updating staff information."""

from dataclasses import replace
from datetime import date, datetime

from sqlalchemy.orm import Session

from app.application.use_cases.residence.evaluator import (
    classify_residence_status,
    days_until_expiry,
)
from app.domain.entities import Nationality, ResidenceStatus, User, UserRole
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import get_password_hash
from app.utils import today_in_app_timezone

_UNSET = object()


def update_user(
    session: Session,
    *,
    user_id: int,
    full_name: str | None = None,
    email: str | None = None,
    role: UserRole | None = None,
    is_active: bool | None = None,
    nationality: Nationality | None = None,
    residence_number: str | None | object = _UNSET,
    residence_expiry_date: date | None | object = _UNSET,
    password: str | None = None,
) -> tuple[User, bool]:
    """Update the user and report whether the residence expiry date changed.

    ``residence_number`` and ``residence_expiry_date`` accept ``None`` to clear
    the value; leave them out to keep the current one.
    """

    repository = UserRepository(session)
    current_user = repository.get(user_id)
    if current_user is None:
        raise ValueError("User not found")

    new_email = current_user.email
    if email is not None and email != current_user.email:
        existing_with_email = repository.get_by_email(email)
        if existing_with_email and existing_with_email.id != user_id:
            raise ValueError("Email is already registered")
        new_email = email

    new_expiry = current_user.residence_expiry_date
    if residence_expiry_date is not _UNSET:
        new_expiry = residence_expiry_date  # type: ignore[assignment]
    expiry_changed = new_expiry != current_user.residence_expiry_date

    residence_status = current_user.residence_status
    if expiry_changed:
        residence_status = (
            classify_residence_status(days_until_expiry(new_expiry, today_in_app_timezone()))
            if new_expiry is not None
            else ResidenceStatus.ACTIVE
        )

    updated_user = replace(
        current_user,
        full_name=full_name if full_name is not None else current_user.full_name,
        email=new_email,
        role=role if role is not None else current_user.role,
        is_active=is_active if is_active is not None else current_user.is_active,
        nationality=nationality if nationality is not None else current_user.nationality,
        residence_number=(
            current_user.residence_number
            if residence_number is _UNSET
            else residence_number
        ),
        residence_expiry_date=new_expiry,
        residence_status=residence_status,
        updated_at=datetime.utcnow(),
    )

    if password:
        updated_user = replace(updated_user, password=get_password_hash(password))

    return repository.update(updated_user), expiry_changed

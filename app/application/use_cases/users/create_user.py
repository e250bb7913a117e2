"""Use case for creating staff users."""

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


def create_user(
    session: Session,
    *,
    username: str,
    full_name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.ADMIN_STAFF,
    is_active: bool = True,
    nationality: Nationality = Nationality.SAUDI,
    residence_number: str | None = None,
    residence_expiry_date: date | None = None,
) -> User:
    """Create a new user ensuring unique usernames and email addresses."""

    repository = UserRepository(session)

    if repository.get_by_username(username):
        raise ValueError("Username is already taken")
    if repository.get_by_email(email):
        raise ValueError("Email is already registered")

    residence_status = ResidenceStatus.ACTIVE
    if residence_expiry_date is not None:
        residence_status = classify_residence_status(
            days_until_expiry(residence_expiry_date, today_in_app_timezone())
        )

    user = User(
        id=None,
        username=username,
        full_name=full_name,
        email=email,
        password=get_password_hash(password),
        role=role,
        is_active=is_active,
        nationality=nationality,
        residence_number=residence_number,
        residence_expiry_date=residence_expiry_date,
        residence_status=residence_status,
        created_at=datetime.utcnow(),
    )

    return repository.create(user)

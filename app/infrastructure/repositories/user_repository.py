"""Persistence layer for staff user data."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy.orm import Session

from app.domain.entities import Nationality, ResidenceStatus, User, UserRole
from app.infrastructure.models import UserModel


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self, skip: int = 0, limit: int = 100) -> Sequence[User]:
        query = (
            self.session.query(UserModel)
            .order_by(UserModel.id)
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_username(self, username: str) -> User | None:
        model = self.session.query(UserModel).filter_by(username=username).first()
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = self.session.query(UserModel).filter_by(email=email).first()
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, user: User) -> User:
        model = self.session.get(UserModel, user.id) if user.id is not None else None
        if not model:
            msg = f"User with id {user.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_active_with_residence_expiry(self) -> Sequence[User]:
        """Return active users that have a residence expiry date on file."""

        query = (
            self.session.query(UserModel)
            .filter(UserModel.is_active.is_(True))
            .filter(UserModel.residence_expiry_date.isnot(None))
            .order_by(UserModel.residence_expiry_date, UserModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_expiring_before(self, limit_date: date) -> Sequence[User]:
        """Return active users whose residence expires on or before ``limit_date``."""

        query = (
            self.session.query(UserModel)
            .filter(UserModel.is_active.is_(True))
            .filter(UserModel.residence_expiry_date.isnot(None))
            .filter(UserModel.residence_expiry_date <= limit_date)
            .order_by(UserModel.residence_expiry_date, UserModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_by_roles(
        self, roles: Iterable[UserRole], *, active_only: bool = True
    ) -> Sequence[User]:
        values = sorted(role.value for role in roles)
        if not values:
            return []
        query = self.session.query(UserModel).filter(UserModel.role.in_(values))
        if active_only:
            query = query.filter(UserModel.is_active.is_(True))
        return [self._to_entity(model) for model in query.order_by(UserModel.id).all()]

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            full_name=model.full_name,
            email=model.email,
            password=model.password,
            role=UserRole(model.role),
            is_active=bool(model.is_active),
            nationality=Nationality(model.nationality or Nationality.SAUDI.value),
            residence_number=model.residence_number,
            residence_expiry_date=model.residence_expiry_date,
            residence_status=ResidenceStatus(
                model.residence_status or ResidenceStatus.ACTIVE.value
            ),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.username = user.username
        model.full_name = user.full_name
        model.email = user.email
        model.password = user.password
        model.role = user.role.value
        model.is_active = user.is_active
        model.nationality = user.nationality.value
        model.residence_number = user.residence_number
        model.residence_expiry_date = user.residence_expiry_date
        model.residence_status = user.residence_status.value
        if user.created_at is not None:
            model.created_at = user.created_at


__all__ = ["UserRepository"]

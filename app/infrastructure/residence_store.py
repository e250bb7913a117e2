"""Persistence collaborator used by the residence expiry pipeline."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from contextlib import contextmanager
from datetime import date
from typing import Iterator, Protocol

from sqlalchemy.orm import Session

from app.domain.entities import (
    OVERSIGHT_ROLES,
    Notification,
    NotificationTier,
    ResidenceNotificationAudit,
    User,
)
from app.infrastructure.repositories import (
    NotificationRepository,
    ResidenceNotificationRepository,
    UserRepository,
)


class ResidenceNotificationStore(Protocol):
    """Reads persons and writes notifications on behalf of the sweep."""

    def get_all_active_persons_with_expiry(self) -> Sequence[User]: ...

    def get_person(self, person_id: int) -> User | None: ...

    def get_oversight_users(self) -> Sequence[User]: ...

    def insert_notification(self, notification: Notification) -> Notification: ...

    def insert_notification_audit(
        self, audit: ResidenceNotificationAudit
    ) -> ResidenceNotificationAudit: ...

    def insert_dispatch(
        self,
        notifications: Sequence[Notification],
        audit: ResidenceNotificationAudit,
    ) -> list[Notification]: ...

    def has_audit(
        self,
        person_id: int,
        tier: NotificationTier,
        expiry_date: date,
        *,
        sent_on: date | None = None,
    ) -> bool: ...


class SqlAlchemyResidenceStore:
    """:class:`ResidenceNotificationStore` backed by the ORM repositories.

    Every call opens and closes its own session so the store can be shared
    with the scheduler thread.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_all_active_persons_with_expiry(self) -> Sequence[User]:
        with self._session() as session:
            return list(UserRepository(session).list_active_with_residence_expiry())

    def get_person(self, person_id: int) -> User | None:
        with self._session() as session:
            return UserRepository(session).get(person_id)

    def get_oversight_users(self) -> Sequence[User]:
        with self._session() as session:
            return list(UserRepository(session).list_by_roles(OVERSIGHT_ROLES))

    def insert_notification(self, notification: Notification) -> Notification:
        with self._session() as session:
            return NotificationRepository(session).create(notification)

    def insert_notification_audit(
        self, audit: ResidenceNotificationAudit
    ) -> ResidenceNotificationAudit:
        with self._session() as session:
            return ResidenceNotificationRepository(session).create(audit)

    def insert_dispatch(
        self,
        notifications: Sequence[Notification],
        audit: ResidenceNotificationAudit,
    ) -> list[Notification]:
        """Store every notification and the audit row in a single transaction."""

        with self._session() as session:
            notification_repo = NotificationRepository(session)
            stored = [
                notification_repo.create(notification, commit=False)
                for notification in notifications
            ]
            ResidenceNotificationRepository(session).create(audit, commit=False)
            session.commit()
            return stored

    def has_audit(
        self,
        person_id: int,
        tier: NotificationTier,
        expiry_date: date,
        *,
        sent_on: date | None = None,
    ) -> bool:
        with self._session() as session:
            return ResidenceNotificationRepository(session).exists(
                user_id=person_id,
                tier=tier,
                expiry_date=expiry_date,
                sent_on=sent_on,
            )


__all__ = ["ResidenceNotificationStore", "SqlAlchemyResidenceStore"]

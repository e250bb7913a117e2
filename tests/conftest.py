"""Shared fixtures: a throwaway SQLite database and seeded staff users."""

from __future__ import annotations

import os
import pathlib
import sys
from dataclasses import replace
from datetime import date

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = pathlib.Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_TIMEZONE"] = "Asia/Riyadh"
os.environ["RESIDENCE_SCHEDULER_ENABLED"] = "false"

DEFAULT_PASSWORD = "Secret123!"


@pytest.fixture()
def db_session():
    """Yield a session bound to freshly created tables."""

    from app.infrastructure import database, models  # noqa: F401

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
        database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)


@pytest.fixture()
def make_user(db_session):
    """Factory that persists a staff user through the create use case."""

    from app.application.use_cases.users import create_user
    from app.domain.entities import Nationality, UserRole

    def _make_user(
        username: str,
        *,
        role: UserRole = UserRole.ENGINEER,
        residence_expiry_date: date | None = None,
        residence_number: str | None = None,
        is_active: bool = True,
    ):
        return create_user(
            db_session,
            username=username,
            full_name=username.replace("_", " ").title(),
            email=f"{username}@example.com",
            password=DEFAULT_PASSWORD,
            role=role,
            is_active=is_active,
            nationality=(
                Nationality.RESIDENT
                if residence_expiry_date is not None
                else Nationality.SAUDI
            ),
            residence_number=residence_number,
            residence_expiry_date=residence_expiry_date,
        )

    return _make_user


class InMemoryResidenceStore:
    """Residence store kept in memory, with switches to simulate failures."""

    def __init__(self, persons=(), oversight_users=()):
        self.persons = list(persons)
        self.oversight_users = list(oversight_users)
        self.notifications = []
        self.audits = []
        self.fail_for_user_ids: set[int] = set()
        self.fail_listing = False

    def get_all_active_persons_with_expiry(self):
        if self.fail_listing:
            raise RuntimeError("database unavailable")
        return [
            person
            for person in self.persons
            if person.is_active and person.residence_expiry_date is not None
        ]

    def get_person(self, person_id):
        for person in self.persons:
            if person.id == person_id:
                return person
        return None

    def get_oversight_users(self):
        return list(self.oversight_users)

    def insert_notification(self, notification):
        if notification.user_id in self.fail_for_user_ids:
            raise RuntimeError(f"cannot write notification for {notification.user_id}")
        stored = replace(notification, id=len(self.notifications) + 1)
        self.notifications.append(stored)
        return stored

    def insert_notification_audit(self, audit):
        stored = replace(audit, id=len(self.audits) + 1)
        self.audits.append(stored)
        return stored

    def insert_dispatch(self, notifications, audit):
        staged = len(self.notifications)
        try:
            stored = [self.insert_notification(n) for n in notifications]
            self.insert_notification_audit(audit)
        except Exception:
            del self.notifications[staged:]
            raise
        return stored

    def has_audit(self, person_id, tier, expiry_date, *, sent_on=None):
        for audit in self.audits:
            if (audit.user_id, audit.tier, audit.expiry_date) != (
                person_id,
                tier,
                expiry_date,
            ):
                continue
            if sent_on is None or (audit.sent_at and audit.sent_at.date() == sent_on):
                return True
        return False


@pytest.fixture()
def memory_store():
    return InMemoryResidenceStore()


@pytest.fixture()
def default_password() -> str:
    return DEFAULT_PASSWORD

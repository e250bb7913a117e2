from datetime import date, datetime, timedelta, timezone

import pytest

from app.application.use_cases.residence import (
    ResidenceNotificationDispatcher,
    build_expiry_message,
)
from app.domain.entities import (
    EVENT_RESIDENCE_EXPIRY,
    EVENT_RESIDENCE_EXPIRY_MANAGER,
    NotificationPriority,
    NotificationTier,
    User,
    UserRole,
)

NOW = datetime(2025, 7, 1, 9, 0, tzinfo=timezone(timedelta(hours=3)))


def _user(user_id, role=UserRole.ENGINEER, **kwargs):
    return User(
        id=user_id,
        username=f"user{user_id}",
        full_name=kwargs.pop("full_name", f"User {user_id}"),
        email=f"user{user_id}@example.com",
        password="hash",
        role=role,
        is_active=True,
        **kwargs,
    )


@pytest.fixture()
def person():
    return _user(1, full_name="Ahmed Ali", residence_number="2456789012",
                 residence_expiry_date=date(2025, 7, 8))


@pytest.fixture()
def managers():
    return [_user(10, UserRole.HR_MANAGER), _user(11, UserRole.GENERAL_MANAGER)]


def test_dispatch_writes_person_manager_and_audit_rows(memory_store, person, managers):
    pushed = []
    dispatcher = ResidenceNotificationDispatcher(
        memory_store, publish=pushed.append, clock=lambda: NOW
    )

    result = dispatcher.dispatch(
        person,
        NotificationTier.ONE_WEEK,
        expiry_date=date(2025, 7, 8),
        days_until_expiry=7,
        oversight_users=managers,
    )

    assert result.is_ok
    assert result.count == 3
    recipients = [n.user_id for n in memory_store.notifications]
    assert recipients == [1, 10, 11]

    own, *copies = memory_store.notifications
    assert own.event_type == EVENT_RESIDENCE_EXPIRY
    assert own.priority is NotificationPriority.HIGH
    assert own.title == "تحذير عاجل: الإقامة تنتهي خلال أسبوع"
    assert own.payload["tier"] == "1_week"
    assert own.payload["days_until_expiry"] == 7
    for copy in copies:
        assert copy.event_type == EVENT_RESIDENCE_EXPIRY_MANAGER
        assert copy.title == f"{own.title} - Ahmed Ali"
        assert copy.message == own.message

    (audit,) = memory_store.audits
    assert audit.tier is NotificationTier.ONE_WEEK
    assert audit.expiry_date == date(2025, 7, 8)
    assert audit.days_until_expiry == 7
    assert audit.sent_to == "hr_manager:10,general_manager:11"
    assert audit.sent_at == NOW

    assert [n.user_id for n in pushed] == [10, 11]


def test_dispatch_without_managers_only_notifies_person(memory_store, person):
    dispatcher = ResidenceNotificationDispatcher(memory_store, clock=lambda: NOW)

    result = dispatcher.dispatch(
        person,
        NotificationTier.THREE_MONTHS,
        expiry_date=date(2025, 9, 1),
        days_until_expiry=62,
        oversight_users=[],
    )

    assert result.is_ok
    assert result.count == 1
    assert memory_store.audits[0].sent_to == ""
    assert memory_store.notifications[0].priority is NotificationPriority.LOW


def test_dispatch_failure_is_returned_not_raised(memory_store, person, managers):
    memory_store.fail_for_user_ids.add(11)
    pushed = []
    dispatcher = ResidenceNotificationDispatcher(
        memory_store, publish=pushed.append, clock=lambda: NOW
    )

    result = dispatcher.dispatch(
        person,
        NotificationTier.DAILY,
        expiry_date=date(2025, 7, 8),
        days_until_expiry=7,
        oversight_users=managers,
    )

    assert not result.is_ok
    assert result.tier is NotificationTier.DAILY
    assert "11" in result.error
    assert memory_store.audits == []
    assert memory_store.notifications == []
    assert pushed == []


def test_own_alert_is_pushed_only_to_roles_with_residence_visibility(
    memory_store, managers
):
    pushed = []
    dispatcher = ResidenceNotificationDispatcher(
        memory_store, publish=pushed.append, clock=lambda: NOW
    )
    engineer = _user(2, residence_expiry_date=date(2025, 7, 20))
    project_manager = _user(
        3, UserRole.PROJECT_MANAGER, residence_expiry_date=date(2025, 7, 20)
    )

    for person in (engineer, project_manager):
        dispatcher.dispatch(
            person,
            NotificationTier.ONE_MONTH,
            expiry_date=date(2025, 7, 20),
            days_until_expiry=19,
            oversight_users=managers,
        )

    assert [n.user_id for n in memory_store.notifications] == [2, 10, 11, 3, 10, 11]
    assert [(n.user_id, n.event_type) for n in pushed] == [
        (10, EVENT_RESIDENCE_EXPIRY_MANAGER),
        (11, EVENT_RESIDENCE_EXPIRY_MANAGER),
        (3, EVENT_RESIDENCE_EXPIRY),
        (10, EVENT_RESIDENCE_EXPIRY_MANAGER),
        (11, EVENT_RESIDENCE_EXPIRY_MANAGER),
    ]


def test_retry_after_failed_dispatch_stores_a_single_copy(
    memory_store, person, managers
):
    dispatcher = ResidenceNotificationDispatcher(memory_store, clock=lambda: NOW)
    memory_store.fail_for_user_ids.add(11)
    dispatch = dict(
        expiry_date=date(2025, 7, 8), days_until_expiry=7, oversight_users=managers
    )

    assert not dispatcher.dispatch(person, NotificationTier.DAILY, **dispatch).is_ok

    memory_store.fail_for_user_ids.clear()
    assert dispatcher.dispatch(person, NotificationTier.DAILY, **dispatch).is_ok

    assert [n.user_id for n in memory_store.notifications] == [1, 10, 11]
    assert len(memory_store.audits) == 1

def test_push_failures_do_not_fail_the_dispatch(memory_store, person, managers):
    attempts = []

    def broken_publish(notification):
        attempts.append(notification.user_id)
        raise RuntimeError("socket closed")

    dispatcher = ResidenceNotificationDispatcher(
        memory_store, publish=broken_publish, clock=lambda: NOW
    )

    result = dispatcher.dispatch(
        person,
        NotificationTier.ONE_MONTH,
        expiry_date=date(2025, 7, 20),
        days_until_expiry=19,
        oversight_users=managers,
    )

    assert result.is_ok
    assert len(memory_store.notifications) == 3
    assert attempts == [10, 11]


def test_english_message_uses_placeholder_for_missing_residence_number():
    person = _user(3, full_name="Sara Khan")

    message = build_expiry_message(
        person, "Notice", date(2025, 9, 30), language="en"
    )

    assert message.splitlines() == [
        "Notice",
        "Employee: Sara Khan",
        "Residence number: N/A",
        "Expiry date: 2025-09-30",
    ]


def test_english_titles(memory_store, person):
    dispatcher = ResidenceNotificationDispatcher(
        memory_store, language="en", clock=lambda: NOW
    )

    dispatcher.dispatch(
        person,
        NotificationTier.ONE_MONTH,
        expiry_date=date(2025, 7, 20),
        days_until_expiry=19,
        oversight_users=[],
    )

    assert memory_store.notifications[0].title == (
        "Warning: residence expires within one month"
    )

from datetime import timedelta

from app.domain.entities import UserRole
from app.utils import today_in_app_timezone


def test_read_current_user(client, make_user, login):
    make_user("resident", residence_expiry_date=today_in_app_timezone() + timedelta(days=40))

    response = client.get("/staff/me", headers=login("resident"))

    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "resident"
    assert body["nationality"] == "resident"
    assert body["residence_status"] == "expiring_soon"
    assert "password" not in body


def test_staff_cannot_read_other_records(client, make_user, login):
    make_user("engineer")
    other = make_user("other")
    make_user("hr", role=UserRole.HR_MANAGER)

    assert client.get(f"/staff/{other.id}", headers=login("engineer")).status_code == 403
    assert client.get(f"/staff/{other.id}", headers=login("hr")).status_code == 200
    assert client.get("/staff/9999", headers=login("hr")).status_code == 404


def test_changing_expiry_date_rechecks_the_person(client, make_user, login):
    resident = make_user("resident", residence_number="2412345678")
    hr = make_user("hr", role=UserRole.HR_MANAGER)
    hr_headers = login("hr")
    new_expiry = today_in_app_timezone() + timedelta(days=5)

    response = client.patch(
        f"/staff/{resident.id}",
        json={"residence_expiry_date": new_expiry.isoformat()},
        headers=hr_headers,
    )

    assert response.status_code == 200
    assert response.json()["residence_expiry_date"] == new_expiry.isoformat()
    assert response.json()["residence_status"] == "expiring_soon"

    manager_view = client.get("/notifications/", headers=hr_headers).json()
    assert len(manager_view) == 2
    assert {n["event_type"] for n in manager_view} == {"residence_expiry_manager"}
    assert {n["payload"]["tier"] for n in manager_view} == {"1_week", "daily"}
    assert all(n["priority"] == "high" for n in manager_view)
    assert all(n["title"].endswith(" - Resident") for n in manager_view)

    audits = client.get(
        "/residence/notifications", params={"user_id": resident.id}, headers=hr_headers
    ).json()
    assert {a["tier"] for a in audits} == {"1_week", "daily"}
    assert all(a["sent_to"] == f"hr_manager:{hr.id}" for a in audits)


def test_unchanged_expiry_date_does_not_notify(client, make_user, login):
    expiry = today_in_app_timezone() + timedelta(days=5)
    resident = make_user("resident", residence_expiry_date=expiry)
    make_user("hr", role=UserRole.HR_MANAGER)
    hr_headers = login("hr")

    response = client.patch(
        f"/staff/{resident.id}",
        json={"full_name": "Renamed Resident"},
        headers=hr_headers,
    )

    assert response.status_code == 200
    assert client.get("/notifications/", headers=hr_headers).json() == []


def test_reactivating_a_resident_rechecks_the_person(client, make_user, login):
    resident = make_user(
        "resident",
        residence_expiry_date=today_in_app_timezone() + timedelta(days=5),
        is_active=False,
    )
    make_user("hr", role=UserRole.HR_MANAGER)
    hr_headers = login("hr")

    response = client.patch(
        f"/staff/{resident.id}", json={"is_active": True}, headers=hr_headers
    )

    assert response.status_code == 200
    assert response.json()["is_active"] is True
    manager_view = client.get("/notifications/", headers=hr_headers).json()
    assert {n["payload"]["tier"] for n in manager_view} == {"1_week", "daily"}

    response = client.patch(
        f"/staff/{resident.id}", json={"is_active": True}, headers=hr_headers
    )
    assert response.status_code == 200
    assert len(client.get("/notifications/", headers=hr_headers).json()) == 2


def test_unknown_staff_record_is_not_found(client, make_user, login):
    make_user("hr", role=UserRole.HR_MANAGER)

    response = client.patch(
        "/staff/9999", json={"is_active": True}, headers=login("hr")
    )

    assert response.status_code == 404

def test_staff_can_only_edit_their_own_name_and_password(client, make_user, login):
    engineer = make_user("engineer")
    other = make_user("other")
    headers = login("engineer")

    response = client.patch(
        f"/staff/{engineer.id}", json={"full_name": "New Name"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["full_name"] == "New Name"

    response = client.patch(
        f"/staff/{engineer.id}", json={"role": "admin"}, headers=headers
    )
    assert response.status_code == 403

    response = client.patch(
        f"/staff/{other.id}", json={"full_name": "Nope"}, headers=headers
    )
    assert response.status_code == 403


def test_update_rejects_unknown_fields_and_duplicate_email(client, make_user, login):
    make_user("hr", role=UserRole.HR_MANAGER)
    target = make_user("target")
    make_user("taken")
    headers = login("hr")

    response = client.patch(f"/staff/{target.id}", json={"salary": 1}, headers=headers)
    assert response.status_code == 422

    response = client.patch(
        f"/staff/{target.id}", json={"email": "taken@example.com"}, headers=headers
    )
    assert response.status_code == 400

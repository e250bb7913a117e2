from datetime import timedelta

from app.domain.entities import UserRole
from app.utils import today_in_app_timezone


def test_expiring_list_includes_expired_and_is_role_gated(client, make_user, login):
    today = today_in_app_timezone()
    soon = make_user("soon", residence_expiry_date=today + timedelta(days=20))
    expired = make_user("expired", residence_expiry_date=today - timedelta(days=3))
    make_user("later", residence_expiry_date=today + timedelta(days=200))
    make_user("gm", role=UserRole.GENERAL_MANAGER)

    response = client.get("/residence/expiring", headers=login("gm"))

    assert response.status_code == 200
    entries = response.json()
    assert [entry["user"]["id"] for entry in entries] == [expired.id, soon.id]
    assert entries[0]["days_until_expiry"] == -3
    assert entries[0]["status"] == "expired"
    assert entries[1]["days_until_expiry"] == 20
    assert entries[1]["status"] == "expiring_soon"

    assert client.get("/residence/expiring", headers=login("soon")).status_code == 403


def test_renew_residence(client, make_user, login):
    today = today_in_app_timezone()
    resident = make_user("resident", residence_expiry_date=today + timedelta(days=10))
    hr = make_user("hr", role=UserRole.HR_MANAGER)
    new_expiry = today + timedelta(days=375)

    response = client.post(
        "/residence/renew",
        json={
            "user_id": resident.id,
            "new_expiry_date": new_expiry.isoformat(),
            "renewal_months": 12,
        },
        headers=login("hr"),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["residence_expiry_date"] == new_expiry.isoformat()
    assert body["user"]["residence_status"] == "active"
    assert body["renewal"]["old_expiry_date"] == (today + timedelta(days=10)).isoformat()
    assert body["renewal"]["renewal_period_months"] == 12
    assert body["renewal"]["processed_by"] == hr.id

    notifications = client.get("/notifications/", headers=login("resident")).json()
    assert [n["event_type"] for n in notifications] == ["residence_renewed"]
    assert new_expiry.isoformat() in notifications[0]["message"]


def test_first_recorded_residence_has_no_previous_expiry(client, make_user, login):
    resident = make_user("resident")
    make_user("hr", role=UserRole.HR_MANAGER)
    new_expiry = today_in_app_timezone() + timedelta(days=365)

    response = client.post(
        "/residence/renew",
        json={
            "user_id": resident.id,
            "new_expiry_date": new_expiry.isoformat(),
            "renewal_months": 12,
        },
        headers=login("hr"),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["renewal"]["old_expiry_date"] is None
    assert body["renewal"]["new_expiry_date"] == new_expiry.isoformat()
    assert body["user"]["residence_expiry_date"] == new_expiry.isoformat()

def test_renew_validation(client, make_user, login):
    today = today_in_app_timezone()
    resident = make_user("resident", residence_expiry_date=today)
    make_user("hr", role=UserRole.HR_MANAGER)
    make_user("gm", role=UserRole.GENERAL_MANAGER)
    payload = {
        "user_id": resident.id,
        "new_expiry_date": (today + timedelta(days=365)).isoformat(),
        "renewal_months": 0,
    }

    assert client.post("/residence/renew", json=payload, headers=login("hr")).status_code == 422

    payload["renewal_months"] = 12
    assert client.post("/residence/renew", json=payload, headers=login("gm")).status_code == 403

    payload["user_id"] = 9999
    assert client.post("/residence/renew", json=payload, headers=login("hr")).status_code == 404


def test_manual_check_returns_the_sweep_report(client, make_user, login):
    today = today_in_app_timezone()
    resident = make_user("resident", residence_expiry_date=today + timedelta(days=60))
    make_user("admin", role=UserRole.ADMIN)
    make_user("citizen")
    headers = login("admin")

    response = client.post("/residence/check", headers=headers)

    assert response.status_code == 200
    report = response.json()
    assert report["ok"] is True
    assert report["persons_evaluated"] == 1
    assert report["notifications_created"] == 2
    (result,) = report["results"]
    assert result["user_id"] == resident.id
    assert result["tiers"] == ["3_months"]
    assert result["dispatches"][0]["ok"] is True

    again = client.post("/residence/check", headers=headers).json()
    assert again["notifications_created"] == 0
    assert again["results"][0]["already_sent"] == ["3_months"]

    single = client.post(
        "/residence/check", params={"user_id": 9999}, headers=headers
    ).json()
    assert single["results"][0]["skipped_reason"] == "not_found"


def test_manual_check_requires_residence_manager(client, make_user, login):
    make_user("pm", role=UserRole.PROJECT_MANAGER)

    assert client.post("/residence/check", headers=login("pm")).status_code == 403

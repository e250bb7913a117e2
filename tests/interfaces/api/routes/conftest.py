from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient


@pytest.fixture()
def client(db_session):
    """Return a test client bound to a clean application instance."""

    from app.main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def login(client, default_password):
    """Return a helper that authenticates and returns bearer headers."""

    def _login(username: str, password: str | None = None) -> dict[str, str]:
        response = client.post(
            "/auth/token", data={"username": username, "password": password or default_password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login

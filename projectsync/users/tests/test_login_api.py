import pytest
from rest_framework import status
from rest_framework.test import APIClient

from projectsync.users.models import User

pytestmark = pytest.mark.django_db

LOGIN_URL = "/api/auth/login"


def _login(client, username="alice", password="secret123", role="admin"):  # noqa: S107
    return client.post(
        LOGIN_URL,
        {"username": username, "password": password, "role": role},
        format="json",
    )


def test_login_registers_and_returns_token():
    client = APIClient()
    r = _login(client)
    assert r.status_code == status.HTTP_200_OK, r.content
    assert set(r.data) == {"token", "user"}
    assert r.data["user"]["username"] == "alice"
    assert r.data["user"]["role"] == "admin"
    assert "password" not in r.data["user"]
    user = User.objects.get(username="alice")
    assert user.role == User.Role.ADMIN
    assert user.check_password("secret123")


@pytest.mark.parametrize("url", ["/api/auth/login/", "/api/v1/auth/login"])
def test_login_url_variants(url):
    client = APIClient()
    r = client.post(
        url,
        {"username": "alice", "password": "secret123", "role": "viewer"},
        format="json",
    )
    assert r.status_code == status.HTTP_200_OK


def test_wrong_password_is_401_with_generic_message():
    client = APIClient()
    _login(client)
    r = _login(client, password="not-the-one")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.json() == {"error": "Invalid credentials"}


def test_validation_errors_listed():
    client = APIClient()
    r = _login(client, username="a!", password="123", role="owner")
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    body = r.json()
    assert body["error"] == "Validation failed"
    fields = {d["field"] for d in body["details"]}
    assert fields == {"username", "password", "role"}
    assert all("value" not in d for d in body["details"] if d["field"] == "password")
    assert not User.objects.exists()


def test_token_opens_protected_endpoints():
    client = APIClient()
    token = _login(client, role="viewer").data["token"]
    assert client.get("/api/projects").status_code == status.HTTP_401_UNAUTHORIZED
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    assert client.get("/api/projects").status_code == status.HTTP_200_OK


def test_tampered_token_rejected():
    client = APIClient()
    token = _login(client).data["token"]
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token[:-2]}ab")
    r = client.get("/api/projects")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert "error" in r.json()

from __future__ import annotations

import pytest
from rest_framework.test import APIClient

from projectsync.realtime.channel import get_broadcast_channel
from projectsync.realtime.channel import reset_broadcast_channel
from projectsync.store import get_record_store
from projectsync.store import reset_stores

TEST_PASSWORD = "secret123"  # noqa: S105


@pytest.fixture(autouse=True)
def _fresh_stores_and_channel():
    reset_stores()
    reset_broadcast_channel()
    yield
    reset_stores()
    reset_broadcast_channel()


@pytest.fixture
def memory_store(settings):
    """Pin the in-memory backing; no database access needed."""

    settings.PROJECTSYNC_STORE_MODE = "memory"
    return get_record_store()


@pytest.fixture
def channel():
    return get_broadcast_channel()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def login():
    def _login(username: str, role: str, password: str = TEST_PASSWORD) -> str:
        client = APIClient()
        response = client.post(
            "/api/auth/login",
            {"username": username, "password": password, "role": role},
            format="json",
        )
        assert response.status_code == 200, response.content  # noqa: PLR2004
        return response.data["token"]

    return _login


def _bearer_client(token: str) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def admin_client(login):
    return _bearer_client(login("alice", "admin"))


@pytest.fixture
def viewer_client(login):
    return _bearer_client(login("victor", "viewer"))

from http import HTTPStatus

import pytest
from django.urls import resolve
from django.urls import reverse

from config.schema import assign_group_tag


def test_routes_mirrored_under_v1():
    assert reverse("api:projects-list") == "/api/projects"
    assert reverse("api_v1:projects-list") == "/api/v1/projects"
    assert resolve("/api/projects/").view_name == "api:projects-list"
    assert resolve("/api/v1/notifications/3/read").view_name == (
        "api_v1:notifications-mark-read"
    )
    assert resolve("/api/auth/login").view_name == "api:auth-login"


@pytest.mark.parametrize(
    ("path", "tag"),
    [
        ("/api/auth/login", "Authentication"),
        ("/api/v1/projects/{id}", "Projects"),
        ("/api/notifications/{id}/read", "Notifications"),
        ("/health/", None),
    ],
)
def test_assign_group_tag(path, tag):
    assert assign_group_tag(path) == tag


@pytest.mark.django_db
def test_schema_generated(client):
    response = client.get(reverse("api-schema"), {"format": "json"})
    assert response.status_code == HTTPStatus.OK
    schema = response.json()
    assert any(p.rstrip("/") == "/api/projects" for p in schema["paths"])
    tags = {t["name"] for t in schema["tags"]}
    assert {"Authentication", "Projects", "Notifications"} <= tags


@pytest.mark.django_db
def test_docs_page(client):
    response = client.get(reverse("api-docs"))
    assert response.status_code == HTTPStatus.OK

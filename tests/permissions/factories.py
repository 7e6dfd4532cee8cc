from __future__ import annotations

from dataclasses import dataclass

from projectsync.users.credentials import PublicUser
from projectsync.users.credentials import get_credential_store

TEST_PASSWORD = "TestPass123"  # noqa: S105


@dataclass
class RoleContext:
    user: PublicUser
    token: str


def create_user_with_role(username: str, *, role: str) -> RoleContext:
    """Register ``username`` through the login flow and keep its token."""

    result = get_credential_store().authenticate(username, TEST_PASSWORD, role)
    return RoleContext(user=result.user, token=result.token)

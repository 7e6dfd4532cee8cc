"""Login with auto-registration.

An unseen username is registered with the submitted password and role; a
known username must present the matching password. Every failure reads the
same so callers cannot tell which usernames exist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any

from django.contrib.auth.hashers import check_password
from django.contrib.auth.hashers import make_password

from projectsync.core.exceptions import InvalidCredentials
from projectsync.store import UsernameTaken
from projectsync.store import get_user_store

from .authentication import issue_access_token

if TYPE_CHECKING:  # import for type checking only
    from projectsync.store import UserStore
    from projectsync.store.records import UserRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublicUser:
    id: int
    username: str
    role: str

    @classmethod
    def from_record(cls, user: UserRecord) -> PublicUser:
        return cls(id=user.id, username=user.username, role=user.role)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username, "role": self.role}


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: PublicUser


class CredentialStore:
    def __init__(self, users: UserStore):
        self.users = users

    def authenticate(self, username: str, password: str, requested_role: str) -> LoginResult:
        user = self.users.get_user(username)
        created = False
        if user is None:
            try:
                user = self.users.add_user(
                    username, make_password(password), requested_role
                )
                created = True
            except UsernameTaken:
                # Lost a concurrent first login; check against the winner.
                user = self.users.get_user(username)
                if user is None:
                    raise InvalidCredentials from None

        if not created and not check_password(password, user.password):
            raise InvalidCredentials

        if created:
            logger.info("Registered user %s with role %s", user.username, user.role)
        # The stored role wins over a differing requested role.
        return LoginResult(
            token=issue_access_token(user),
            user=PublicUser.from_record(user),
        )


def get_credential_store() -> CredentialStore:
    return CredentialStore(get_user_store())

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any

from rest_framework_simplejwt.authentication import JWTStatelessUserAuthentication
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

if TYPE_CHECKING:  # import for type checking only
    from rest_framework.request import Request

    from projectsync.store.records import UserRecord


class BearerTokenAuthentication(JWTStatelessUserAuthentication):
    """Authenticate ``Authorization: Bearer <token>`` without a user lookup.

    The token carries ``user_id``, ``username`` and ``role``; views read the
    acting identity from ``request.auth``.
    """


def issue_access_token(user: UserRecord) -> str:
    token = AccessToken()
    token[api_settings.USER_ID_CLAIM] = user.id
    token["username"] = user.username
    token["role"] = user.role
    return str(token)


@dataclass(frozen=True)
class Actor:
    user_id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        from .permissions import ROLE_ADMIN

        return self.role == ROLE_ADMIN

    @classmethod
    def from_token(cls, token: Any) -> Actor:
        return cls(
            user_id=token[api_settings.USER_ID_CLAIM],
            username=token.get("username", ""),
            role=token.get("role", ""),
        )


def actor_from_request(request: Request) -> Actor:
    return Actor.from_token(request.auth)

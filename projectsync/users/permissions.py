from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework.permissions import SAFE_METHODS
from rest_framework.permissions import BasePermission

from projectsync.core.exceptions import Forbidden

from .models import User

if TYPE_CHECKING:  # import for type checking only
    from .authentication import Actor

ROLE_ADMIN = User.Role.ADMIN.value
ROLE_VIEWER = User.Role.VIEWER.value


def require_admin(actor: Actor) -> None:
    """Raise ``Forbidden`` unless ``actor`` may mutate projects."""

    if actor is None or not actor.is_admin:
        raise Forbidden


class IsAdminOrReadOnly(BasePermission):
    """Read access for every signed-in role, writes for admins only."""

    message = Forbidden.default_detail

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        token = getattr(request, "auth", None)
        return bool(token is not None and token.get("role") == ROLE_ADMIN)

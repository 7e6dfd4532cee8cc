"""Socket.IO server pushing project events to every connected client.

Convention:
- Socket.IO path: /ws/events/ (``REALTIME_SOCKETIO_PATH``)
- Auth: `query.token` or `auth.token` (JWT access token from login)

Clients only listen; the server ignores anything they emit. With
``REDIS_URL`` set, emits fan out across processes through Redis.
"""

from __future__ import annotations

import logging
import time
from typing import Any
from urllib.parse import parse_qs

import socketio
from asgiref.sync import async_to_sync
from django.conf import settings
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

from projectsync.users.authentication import Actor

logger = logging.getLogger(__name__)


def _client_manager() -> socketio.AsyncManager | None:
    url = getattr(settings, "REDIS_URL", "")
    if not url:
        return None
    return socketio.AsyncRedisManager(url)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*",
    client_manager=_client_manager(),
    logger=False,
    engineio_logger=False,
)


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract JWT token from Socket.IO environ/auth.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    return None


def identify(token: str) -> Actor:
    """Validate ``token`` and return who it belongs to; raises ``TokenError``."""

    return Actor.from_token(AccessToken(token))


def _has_expired(token: str) -> bool:
    """True when ``token`` decodes but its ``exp`` claim is in the past."""

    try:
        unverified = AccessToken(token, verify=False)
    except TokenError:
        return False
    exp = unverified.get("exp")
    return isinstance(exp, (int, float)) and exp <= time.time()


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = _extract_token(environ, auth)
    if not token:
        msg = "unauthorized"
        raise ConnectionRefusedError(msg)

    try:
        actor = identify(token)
    except TokenError as exc:
        if _has_expired(token):
            msg = "jwt_expired"
            raise ConnectionRefusedError(msg) from exc
        msg = "unauthorized"
        raise ConnectionRefusedError(msg) from exc
    except KeyError as exc:  # token without a user_id claim
        msg = "unauthorized"
        raise ConnectionRefusedError(msg) from exc

    await sio.save_session(
        sid,
        {"user_id": actor.user_id, "username": actor.username, "role": actor.role},
    )
    logger.info("Socket.IO client connected: %s (%s)", actor.username, sid)


@sio.event
async def disconnect(sid: str, reason: Any = None):
    logger.info("Socket.IO client disconnected: %s (%s)", sid, reason)


def emit_event_to_all(event: str, payload: dict[str, Any]) -> None:
    """Emit an event to every connected client from sync Django code."""

    async_to_sync(sio.emit)(event, payload)

"""Stores that prefer the database and fall back to memory per call."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from django.db import DEFAULT_DB_ALIAS
from django.db import DatabaseError
from django.db import connections

from projectsync.core.exceptions import UpstreamUnavailable

from .base import RecordStore
from .base import UserStore
from .database import DatabaseRecordStore
from .database import DatabaseUserStore
from .memory import MemoryRecordStore
from .memory import MemoryUserStore
from .records import NOTIFICATION_LIMIT

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def database_probe(alias: str = DEFAULT_DB_ALIAS) -> bool:
    """True when a connection to ``alias`` can be opened."""

    try:
        connections[alias].ensure_connection()
    except DatabaseError:
        return False
    return True


class _DualMode:
    """Route each call to the durable store when it answers, else to memory.

    Records written while in memory mode are not copied back once the
    database returns.
    """

    def __init__(self, durable, fallback, probe: Callable[[], bool] = database_probe):
        self.durable = durable
        self.fallback = fallback
        self.probe = probe
        self.mode = durable.mode

    def _switch(self, mode: str) -> None:
        if mode != self.mode:
            logger.warning("Store mode switched from %s to %s", self.mode, mode)
            self.mode = mode

    def _call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        if self.probe():
            try:
                result = getattr(self.durable, name)(*args, **kwargs)
            except UpstreamUnavailable as exc:
                logger.warning("Database unavailable during %s: %s", name, exc)
            else:
                self._switch(self.durable.mode)
                return result
        self._switch(self.fallback.mode)
        return getattr(self.fallback, name)(*args, **kwargs)


class DualModeRecordStore(_DualMode, RecordStore):
    def __init__(self, probe: Callable[[], bool] = database_probe):
        super().__init__(DatabaseRecordStore(), MemoryRecordStore(), probe)

    def insert_project(self, draft):
        return self._call("insert_project", draft)

    def list_projects(self, filters=None):
        return self._call("list_projects", filters)

    def update_project(self, project_id, fields):
        return self._call("update_project", project_id, fields)

    def delete_project(self, project_id):
        return self._call("delete_project", project_id)

    def insert_notification(self, draft):
        return self._call("insert_notification", draft)

    def list_notifications(self, limit=NOTIFICATION_LIMIT):
        return self._call("list_notifications", limit)

    def mark_notification_read(self, notification_id):
        return self._call("mark_notification_read", notification_id)


class DualModeUserStore(_DualMode, UserStore):
    def __init__(self, probe: Callable[[], bool] = database_probe):
        super().__init__(DatabaseUserStore(), MemoryUserStore(), probe)

    def get_user(self, username):
        return self._call("get_user", username)

    def add_user(self, username, password_hash, role):
        return self._call("add_user", username, password_hash, role)

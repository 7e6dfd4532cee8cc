"""Process-local stores used when the database is unreachable."""

from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from typing import TYPE_CHECKING
from typing import Any

from django.utils import timezone

from projectsync.core.exceptions import RecordNotFound

from .base import RecordStore
from .base import UsernameTaken
from .base import UserStore
from .database import NOTIFICATION_NOT_FOUND
from .database import PROJECT_NOT_FOUND
from .database import coerce_pk
from .records import NOTIFICATION_LIMIT
from .records import PROJECT_WRITABLE_FIELDS
from .records import NotificationRecord
from .records import ProjectRecord
from .records import UserRecord
from .records import advance_timestamp

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Mapping

    from .records import NotificationDraft
    from .records import ProjectDraft
    from .records import ProjectFilters


def _newest_first(record) -> tuple:
    return (record.created_at, record.id)


class MemoryRecordStore(RecordStore):
    mode = "memory"

    def __init__(self):
        self._lock = threading.RLock()
        self._projects: list[ProjectRecord] = []
        self._notifications: list[NotificationRecord] = []
        self._project_ids = itertools.count(1)
        self._notification_ids = itertools.count(1)

    def _find_project(self, project_id: Any) -> int:
        key = coerce_pk(project_id, PROJECT_NOT_FOUND)
        for index, project in enumerate(self._projects):
            if project.id == key:
                return index
        raise RecordNotFound(PROJECT_NOT_FOUND)

    def insert_project(self, draft: ProjectDraft) -> ProjectRecord:
        with self._lock:
            now = timezone.now()
            record = ProjectRecord(
                id=next(self._project_ids),
                title=draft.title,
                description=draft.description,
                status=draft.status,
                priority=draft.priority,
                due_date=draft.due_date,
                created_by=draft.created_by,
                created_at=now,
                updated_at=now,
            )
            self._projects.append(record)
            return replace(record)

    def list_projects(self, filters: ProjectFilters | None = None) -> list[ProjectRecord]:
        with self._lock:
            matched = [
                replace(p)
                for p in self._projects
                if filters is None or filters.matches(p)
            ]
        matched.sort(key=_newest_first, reverse=True)
        return matched

    def update_project(self, project_id: Any, fields: Mapping[str, Any]) -> ProjectRecord:
        with self._lock:
            index = self._find_project(project_id)
            current = self._projects[index]
            changes = {k: fields[k] for k in PROJECT_WRITABLE_FIELDS if k in fields}
            updated = replace(
                current,
                **changes,
                updated_at=advance_timestamp(current.updated_at),
            )
            self._projects[index] = updated
            return replace(updated)

    def delete_project(self, project_id: Any) -> ProjectRecord:
        with self._lock:
            index = self._find_project(project_id)
            return self._projects.pop(index)

    def insert_notification(self, draft: NotificationDraft) -> NotificationRecord:
        with self._lock:
            record = NotificationRecord(
                id=next(self._notification_ids),
                message=draft.message,
                type=draft.type,
                project_id=draft.project_id,
                user_id=draft.user_id,
                read=False,
                created_at=timezone.now(),
            )
            self._notifications.append(record)
            return replace(record)

    def list_notifications(self, limit: int = NOTIFICATION_LIMIT) -> list[NotificationRecord]:
        with self._lock:
            items = [replace(n) for n in self._notifications]
        items.sort(key=_newest_first, reverse=True)
        return items[:limit]

    def mark_notification_read(self, notification_id: Any) -> NotificationRecord:
        key = coerce_pk(notification_id, NOTIFICATION_NOT_FOUND)
        with self._lock:
            for index, notification in enumerate(self._notifications):
                if notification.id == key:
                    if not notification.read:
                        notification = replace(notification, read=True)  # noqa: PLW2901
                        self._notifications[index] = notification
                    return replace(notification)
        raise RecordNotFound(NOTIFICATION_NOT_FOUND)


class MemoryUserStore(UserStore):
    mode = "memory"

    def __init__(self):
        self._lock = threading.RLock()
        self._users: dict[str, UserRecord] = {}
        self._ids = itertools.count(1)

    def get_user(self, username: str) -> UserRecord | None:
        with self._lock:
            user = self._users.get(username)
            return replace(user) if user is not None else None

    def add_user(self, username: str, password_hash: str, role: str) -> UserRecord:
        with self._lock:
            if username in self._users:
                raise UsernameTaken(username)
            record = UserRecord(
                id=next(self._ids),
                username=username,
                password=password_hash,
                role=role,
                created_at=timezone.now(),
            )
            self._users[username] = record
            return replace(record)

from __future__ import annotations

import abc
from typing import TYPE_CHECKING
from typing import Any

from .records import NOTIFICATION_LIMIT

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Mapping

    from .records import NotificationDraft
    from .records import NotificationRecord
    from .records import ProjectDraft
    from .records import ProjectFilters
    from .records import ProjectRecord
    from .records import UserRecord


class UsernameTaken(Exception):  # noqa: N818
    """Another writer registered the same username first."""


class RecordStore(abc.ABC):
    """CRUD over projects and notifications.

    Lookups by an id that names no record raise ``RecordNotFound``.
    """

    mode: str = ""

    @abc.abstractmethod
    def insert_project(self, draft: ProjectDraft) -> ProjectRecord: ...

    @abc.abstractmethod
    def list_projects(self, filters: ProjectFilters | None = None) -> list[ProjectRecord]:
        """Matching projects, newest ``created_at`` first."""

    @abc.abstractmethod
    def update_project(self, project_id: Any, fields: Mapping[str, Any]) -> ProjectRecord:
        """Merge ``fields`` into the project and re-stamp ``updated_at``."""

    @abc.abstractmethod
    def delete_project(self, project_id: Any) -> ProjectRecord:
        """Remove the project and return its last state."""

    @abc.abstractmethod
    def insert_notification(self, draft: NotificationDraft) -> NotificationRecord: ...

    @abc.abstractmethod
    def list_notifications(self, limit: int = NOTIFICATION_LIMIT) -> list[NotificationRecord]:
        """Most recent notifications first, at most ``limit``."""

    @abc.abstractmethod
    def mark_notification_read(self, notification_id: Any) -> NotificationRecord:
        """Set ``read``; a notification that is already read is returned as is."""


class UserStore(abc.ABC):
    mode: str = ""

    @abc.abstractmethod
    def get_user(self, username: str) -> UserRecord | None: ...

    @abc.abstractmethod
    def add_user(self, username: str, password_hash: str, role: str) -> UserRecord:
        """Persist a new user; raises ``UsernameTaken`` on a duplicate."""

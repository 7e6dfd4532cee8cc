"""Merge pushed project events into a client's local state.

Every operation is keyed by id and idempotent, so applying the direct HTTP
response and then the broadcast of the same mutation leaves one entry.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)

PROJECT_CREATED = "projectCreated"
PROJECT_UPDATED = "projectUpdated"
PROJECT_DELETED = "projectDeleted"


def _key(value: Any) -> str:
    return str(value)


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class ProjectListReconciler:
    """Local project list, newest first."""

    def __init__(self, projects: list[dict[str, Any]] | None = None):
        self.projects: list[dict[str, Any]] = []
        if projects:
            self.replace_all(projects)

    def __len__(self):
        return len(self.projects)

    def __iter__(self):
        return iter(self.projects)

    def ids(self) -> list[str]:
        return [_key(p.get("id")) for p in self.projects]

    def _index(self, project_id: Any) -> int | None:
        key = _key(project_id)
        for index, project in enumerate(self.projects):
            if _key(project.get("id")) == key:
                return index
        return None

    def get(self, project_id: Any) -> dict[str, Any] | None:
        index = self._index(project_id)
        return self.projects[index] if index is not None else None

    def replace_all(self, projects: list[dict[str, Any]]) -> None:
        """Adopt a fresh server listing, dropping repeated ids."""

        seen: set[str] = set()
        merged = []
        for project in projects:
            key = _key(project.get("id"))
            if key in seen:
                continue
            seen.add(key)
            merged.append(dict(project))
        self.projects = merged

    def apply_created(self, project: dict[str, Any]) -> bool:
        if self._index(project.get("id")) is not None:
            return False
        self.projects.insert(0, dict(project))
        return True

    # The direct response to our own create follows the same rule as the
    # broadcast, whichever arrives first.
    record_created = apply_created

    def apply_updated(self, project: dict[str, Any]) -> bool:
        index = self._index(project.get("id"))
        if index is None:
            return False
        current = self.projects[index]
        incoming_at = _parse_timestamp(project.get("updatedAt"))
        current_at = _parse_timestamp(current.get("updatedAt"))
        if incoming_at and current_at and incoming_at < current_at:
            logger.debug("Skipping stale update for project %s", project.get("id"))
            return False
        self.projects[index] = dict(project)
        return True

    def apply_deleted(self, project_id: Any) -> bool:
        index = self._index(project_id)
        if index is None:
            return False
        del self.projects[index]
        return True

    def apply(self, event_name: str, payload: dict[str, Any]) -> bool:
        """Apply one wire event; returns whether local state changed."""

        if event_name == PROJECT_CREATED:
            return self.apply_created(payload["project"])
        if event_name == PROJECT_UPDATED:
            return self.apply_updated(payload["project"])
        if event_name == PROJECT_DELETED:
            return self.apply_deleted(payload["projectId"])
        logger.debug("Ignoring unknown event %s", event_name)
        return False


class NotificationFeed:
    """Newest-first notification list kept alongside the project list."""

    def __init__(self):
        self.items: list[dict[str, Any]] = []

    def __len__(self):
        return len(self.items)

    def replace_all(self, notifications: list[dict[str, Any]]) -> None:
        self.items = [dict(n) for n in notifications]

    def add(self, notification: dict[str, Any] | None) -> bool:
        if not notification:
            return False
        key = _key(notification.get("id"))
        if any(_key(n.get("id")) == key for n in self.items):
            return False
        self.items.insert(0, dict(notification))
        return True

    def mark_read(self, notification_id: Any) -> bool:
        key = _key(notification_id)
        for item in self.items:
            if _key(item.get("id")) == key:
                if item.get("read"):
                    return False
                item["read"] = True
                return True
        return False

    def unread_count(self) -> int:
        return sum(1 for n in self.items if not n.get("read"))

    def apply(self, event_name: str, payload: dict[str, Any]) -> bool:
        if event_name in (PROJECT_CREATED, PROJECT_UPDATED, PROJECT_DELETED):
            return self.add(payload.get("notification"))
        return False

"""Plain record types handed out by every store implementation.

Stores return copies; callers never hold a reference into store state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from datetime import datetime
from datetime import timedelta

from django.utils import timezone

NOTIFICATION_LIMIT = 50

# Fields a project update may overwrite.
PROJECT_WRITABLE_FIELDS = ("title", "description", "status", "priority", "due_date")


@dataclass
class ProjectRecord:
    id: int
    title: str
    description: str
    status: str
    priority: str
    due_date: date | None
    created_by: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ProjectDraft:
    title: str
    description: str
    status: str
    priority: str
    created_by: str
    due_date: date | None = None


@dataclass(frozen=True)
class ProjectFilters:
    search: str = ""
    status: str = ""
    priority: str = ""

    def matches(self, project: ProjectRecord) -> bool:
        if self.search:
            needle = self.search.lower()
            if (
                needle not in project.title.lower()
                and needle not in project.description.lower()
            ):
                return False
        if self.status and project.status != self.status:
            return False
        return not (self.priority and project.priority != self.priority)


@dataclass
class NotificationRecord:
    id: int
    message: str
    type: str
    project_id: int
    user_id: int
    read: bool
    created_at: datetime


@dataclass(frozen=True)
class NotificationDraft:
    message: str
    type: str
    project_id: int
    user_id: int


@dataclass
class UserRecord:
    id: int
    username: str
    password: str
    role: str
    created_at: datetime


def advance_timestamp(previous: datetime | None = None) -> datetime:
    """Current time, nudged forward so it always lands after ``previous``."""

    now = timezone.now()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now

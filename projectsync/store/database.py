"""Durable stores backed by the Django ORM."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING
from typing import Any

from django.db import IntegrityError
from django.db import InterfaceError
from django.db import OperationalError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from projectsync.core.exceptions import RecordNotFound
from projectsync.core.exceptions import UpstreamUnavailable
from projectsync.notifications.models import Notification
from projectsync.projects.models import Project
from projectsync.users.models import User

from .base import RecordStore
from .base import UsernameTaken
from .base import UserStore
from .records import NOTIFICATION_LIMIT
from .records import PROJECT_WRITABLE_FIELDS
from .records import NotificationRecord
from .records import ProjectRecord
from .records import UserRecord
from .records import advance_timestamp

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterator
    from collections.abc import Mapping

    from .records import NotificationDraft
    from .records import ProjectDraft
    from .records import ProjectFilters

PROJECT_NOT_FOUND = "Project not found"
NOTIFICATION_NOT_FOUND = "Notification not found"


@contextlib.contextmanager
def _guarded() -> Iterator[None]:
    """Report connection-level database failures as ``UpstreamUnavailable``."""

    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        raise UpstreamUnavailable(str(exc)) from exc


def coerce_pk(value: Any, message: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise RecordNotFound(message) from None


def project_to_record(obj: Project) -> ProjectRecord:
    return ProjectRecord(
        id=obj.pk,
        title=obj.title,
        description=obj.description,
        status=obj.status,
        priority=obj.priority,
        due_date=obj.due_date,
        created_by=obj.created_by,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
    )


def notification_to_record(obj: Notification) -> NotificationRecord:
    return NotificationRecord(
        id=obj.pk,
        message=obj.message,
        type=obj.notification_type,
        project_id=obj.project_id,
        user_id=obj.actor_id,
        read=obj.is_read,
        created_at=obj.created_at,
    )


class DatabaseRecordStore(RecordStore):
    mode = "database"

    def insert_project(self, draft: ProjectDraft) -> ProjectRecord:
        now = timezone.now()
        with _guarded():
            obj = Project.objects.create(
                title=draft.title,
                description=draft.description,
                status=draft.status,
                priority=draft.priority,
                due_date=draft.due_date,
                created_by=draft.created_by,
                created_at=now,
                updated_at=now,
            )
        return project_to_record(obj)

    def list_projects(self, filters: ProjectFilters | None = None) -> list[ProjectRecord]:
        qs = Project.objects.all()
        if filters is not None:
            if filters.search:
                qs = qs.filter(
                    Q(title__icontains=filters.search)
                    | Q(description__icontains=filters.search)
                )
            if filters.status:
                qs = qs.filter(status=filters.status)
            if filters.priority:
                qs = qs.filter(priority=filters.priority)
        with _guarded():
            return [project_to_record(p) for p in qs.order_by("-created_at", "-id")]

    def _get_project(self, project_id: Any) -> Project:
        pk = coerce_pk(project_id, PROJECT_NOT_FOUND)
        try:
            return Project.objects.get(pk=pk)
        except Project.DoesNotExist:
            raise RecordNotFound(PROJECT_NOT_FOUND) from None

    def update_project(self, project_id: Any, fields: Mapping[str, Any]) -> ProjectRecord:
        with _guarded():
            obj = self._get_project(project_id)
            for name in PROJECT_WRITABLE_FIELDS:
                if name in fields:
                    setattr(obj, name, fields[name])
            obj.updated_at = advance_timestamp(obj.updated_at)
            # Full-row save: concurrent updates to one id resolve last-write-wins.
            obj.save()
        return project_to_record(obj)

    def delete_project(self, project_id: Any) -> ProjectRecord:
        with _guarded():
            obj = self._get_project(project_id)
            record = project_to_record(obj)
            obj.delete()
        return record

    def insert_notification(self, draft: NotificationDraft) -> NotificationRecord:
        with _guarded():
            obj = Notification.objects.create(
                message=draft.message,
                notification_type=draft.type,
                project_id=draft.project_id,
                actor_id=draft.user_id,
            )
        return notification_to_record(obj)

    def list_notifications(self, limit: int = NOTIFICATION_LIMIT) -> list[NotificationRecord]:
        qs = Notification.objects.order_by("-created_at", "-id")[:limit]
        with _guarded():
            return [notification_to_record(n) for n in qs]

    def mark_notification_read(self, notification_id: Any) -> NotificationRecord:
        pk = coerce_pk(notification_id, NOTIFICATION_NOT_FOUND)
        with _guarded():
            try:
                notification = Notification.objects.get(pk=pk)
            except Notification.DoesNotExist:
                raise RecordNotFound(NOTIFICATION_NOT_FOUND) from None
            if not notification.is_read:
                notification.is_read = True
                notification.save(update_fields=["is_read"])
        return notification_to_record(notification)


def user_to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.pk,
        username=user.username,
        password=user.password,
        role=user.role,
        created_at=user.created_at,
    )


class DatabaseUserStore(UserStore):
    mode = "database"

    def get_user(self, username: str) -> UserRecord | None:
        with _guarded():
            user = User.objects.filter(username=username).first()
        return user_to_record(user) if user is not None else None

    def add_user(self, username: str, password_hash: str, role: str) -> UserRecord:
        with _guarded():
            try:
                with transaction.atomic():
                    user = User.objects.create(
                        username=username,
                        password=password_hash,
                        role=role,
                    )
            except IntegrityError as exc:
                raise UsernameTaken(username) from exc
        return user_to_record(user)

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from projectsync.notifications.api.serializers import NotificationSerializer
from projectsync.projects.api.serializers import ProjectSerializer
from projectsync.realtime.channel import BroadcastEvent

if TYPE_CHECKING:  # import for type checking only
    from projectsync.store.records import NotificationRecord
    from projectsync.store.records import ProjectRecord

PROJECT_CREATED = "projectCreated"
PROJECT_UPDATED = "projectUpdated"
PROJECT_DELETED = "projectDeleted"


def _notification_payload(notification: NotificationRecord | None) -> dict[str, Any] | None:
    if notification is None:
        return None
    return dict(NotificationSerializer(notification).data)


def build_project_event(
    name: str,
    project: ProjectRecord,
    notification: NotificationRecord | None,
) -> BroadcastEvent:
    if name == PROJECT_DELETED:
        payload: dict[str, Any] = {"projectId": project.id}
    else:
        payload = {"project": dict(ProjectSerializer(project).data)}
    payload["notification"] = _notification_payload(notification)
    return BroadcastEvent(name, payload)


def project_created(project, notification=None) -> BroadcastEvent:
    return build_project_event(PROJECT_CREATED, project, notification)


def project_updated(project, notification=None) -> BroadcastEvent:
    return build_project_event(PROJECT_UPDATED, project, notification)


def project_deleted(project, notification=None) -> BroadcastEvent:
    return build_project_event(PROJECT_DELETED, project, notification)

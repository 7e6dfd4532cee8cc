"""Mutation pipeline for projects.

Each mutation runs validate, authorize, write, notify, publish in that order.
A missing project stops the pipeline at the write. Notification and publish
failures are logged and do not fail the request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from projectsync.core.validation import validate_payload
from projectsync.notifications.models import Notification
from projectsync.notifications.services import compose_message
from projectsync.projects.api.serializers import ProjectCreateSerializer
from projectsync.projects.api.serializers import ProjectUpdateSerializer
from projectsync.realtime.channel import get_broadcast_channel
from projectsync.realtime.events import projects as project_events
from projectsync.store import get_record_store
from projectsync.store.records import NotificationDraft
from projectsync.store.records import ProjectDraft
from projectsync.users.permissions import require_admin

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Callable

    from projectsync.realtime.channel import BroadcastChannel
    from projectsync.realtime.channel import BroadcastEvent
    from projectsync.store import RecordStore
    from projectsync.store.records import NotificationRecord
    from projectsync.store.records import ProjectRecord
    from projectsync.users.authentication import Actor

logger = logging.getLogger(__name__)


class MutationCoordinator:
    def __init__(
        self,
        store: RecordStore,
        channel: BroadcastChannel,
        *,
        authorize: Callable[[Actor], None] = require_admin,
    ):
        self.store = store
        self.channel = channel
        self.authorize = authorize

    def create_project(self, actor: Actor, payload: Any) -> ProjectRecord:
        data = validate_payload(payload, ProjectCreateSerializer)
        self.authorize(actor)
        project = self.store.insert_project(
            ProjectDraft(created_by=actor.username, **data)
        )
        notification = self._record_notification(
            Notification.Type.CREATE, project, actor
        )
        self._publish(project_events.project_created(project, notification))
        return project

    def update_project(self, actor: Actor, project_id: Any, payload: Any) -> ProjectRecord:
        data = validate_payload(payload, ProjectUpdateSerializer)
        self.authorize(actor)
        project = self.store.update_project(project_id, data)
        notification = self._record_notification(
            Notification.Type.UPDATE, project, actor
        )
        self._publish(project_events.project_updated(project, notification))
        return project

    def delete_project(self, actor: Actor, project_id: Any) -> ProjectRecord:
        self.authorize(actor)
        project = self.store.delete_project(project_id)
        notification = self._record_notification(
            Notification.Type.DELETE, project, actor
        )
        self._publish(project_events.project_deleted(project, notification))
        return project

    def _record_notification(
        self,
        notification_type: str,
        project: ProjectRecord,
        actor: Actor,
    ) -> NotificationRecord | None:
        draft = NotificationDraft(
            message=compose_message(notification_type, project.title, actor.username),
            type=notification_type,
            project_id=project.id,
            user_id=actor.user_id,
        )
        try:
            return self.store.insert_notification(draft)
        except Exception:
            logger.exception(
                "Could not record %s notification for project %s",
                notification_type,
                project.id,
            )
            return None

    def _publish(self, event: BroadcastEvent) -> None:
        try:
            self.channel.publish(event)
        except Exception:
            logger.exception("Broadcast of %s failed", event.name)


def get_mutation_coordinator() -> MutationCoordinator:
    return MutationCoordinator(get_record_store(), get_broadcast_channel())

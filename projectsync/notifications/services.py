from __future__ import annotations

from projectsync.notifications.models import Notification

MESSAGE_TEMPLATES = {
    Notification.Type.CREATE: 'New project "{title}" was created by {username}',
    Notification.Type.UPDATE: 'Project "{title}" was updated by {username}',
    Notification.Type.DELETE: 'Project "{title}" was deleted by {username}',
}


def compose_message(notification_type: str, title: str, username: str) -> str:
    template = MESSAGE_TEMPLATES[Notification.Type(notification_type)]
    return template.format(title=title, username=username)

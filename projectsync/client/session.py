"""Python client for the projectsync API.

HTTP calls go through ``requests``; live updates arrive over a Socket.IO
connection and are merged into a ``ProjectListReconciler`` and a
``NotificationFeed``. Payloads are checked with the server's serializers
before anything is sent.
"""

from __future__ import annotations

import logging
import threading
from typing import Any
from urllib.parse import urljoin

import requests
import socketio

from projectsync.core.exceptions import FieldError
from projectsync.core.validation import validate_payload
from projectsync.projects.api.serializers import ProjectCreateSerializer
from projectsync.projects.api.serializers import ProjectUpdateSerializer
from projectsync.users.api.serializers import LoginSerializer

from .reconciler import PROJECT_CREATED
from .reconciler import PROJECT_DELETED
from .reconciler import PROJECT_UPDATED
from .reconciler import NotificationFeed
from .reconciler import ProjectListReconciler

logger = logging.getLogger(__name__)

DEFAULT_SOCKETIO_PATH = "ws/events"


class ApiError(Exception):
    """Non-2xx response; carries the server's ``error`` and ``details``."""

    def __init__(self, status_code: int, error: str, details: list | None = None):
        super().__init__(f"{status_code}: {error}")
        self.status_code = status_code
        self.error = error
        self.details = [
            FieldError(d.get("field", ""), d.get("message", ""), d.get("value"))
            if isinstance(d, dict)
            else d
            for d in details or []
        ]


class ProjectSyncClient:
    def __init__(
        self,
        base_url: str,
        *,
        http: requests.Session | None = None,
        socket_client: socketio.Client | None = None,
        socketio_path: str = DEFAULT_SOCKETIO_PATH,
        timeout: float = 10,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.http = http or requests.Session()
        self.socket = socket_client or socketio.Client(reconnection=True)
        self.socketio_path = socketio_path
        self.timeout = timeout
        self.token: str | None = None
        self.user: dict[str, Any] | None = None
        self.projects = ProjectListReconciler()
        self.notifications = NotificationFeed()
        self._lock = threading.RLock()
        # Events seen while a reload is in flight; replayed over the fresh lists.
        self._pending: list[tuple[str, dict[str, Any]]] | None = None
        self._register_handlers()

    # HTTP ------------------------------------------------------------------
    def _url(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = self.http.request(
            method,
            self._url(path),
            headers=headers,
            timeout=self.timeout,
            **kwargs,
        )
        try:
            body = response.json()
        except ValueError:
            body = None
        if not response.ok:
            error = body.get("error") if isinstance(body, dict) else None
            details = body.get("details") if isinstance(body, dict) else None
            raise ApiError(response.status_code, error or response.reason, details)
        return body

    def login(self, username: str, password: str, role: str) -> dict[str, Any]:
        data = validate_payload(
            {"username": username, "password": password, "role": role},
            LoginSerializer,
        )
        body = self._request("POST", "api/auth/login", json=data)
        self.token = body["token"]
        self.user = body["user"]
        return self.user

    def fetch_projects(self, **filters: str) -> list[dict[str, Any]]:
        params = {k: v for k, v in filters.items() if v}
        projects = self._request("GET", "api/projects", params=params)
        if not params:
            with self._lock:
                self.projects.replace_all(projects)
        return projects

    def create_project(self, payload: dict[str, Any]) -> dict[str, Any]:
        validate_payload(payload, ProjectCreateSerializer)
        project = self._request("POST", "api/projects", json=payload)
        with self._lock:
            self.projects.record_created(project)
        return project

    def update_project(self, project_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
        validate_payload(payload, ProjectUpdateSerializer)
        project = self._request("PUT", f"api/projects/{project_id}", json=payload)
        with self._lock:
            self.projects.apply_updated(project)
        return project

    def delete_project(self, project_id: Any) -> None:
        self._request("DELETE", f"api/projects/{project_id}")
        with self._lock:
            self.projects.apply_deleted(project_id)

    def fetch_notifications(self) -> list[dict[str, Any]]:
        notifications = self._request("GET", "api/notifications")
        with self._lock:
            self.notifications.replace_all(notifications)
        return notifications

    def mark_notification_read(self, notification_id: Any) -> dict[str, Any]:
        notification = self._request("PUT", f"api/notifications/{notification_id}/read")
        with self._lock:
            self.notifications.mark_read(notification_id)
        return notification

    # Socket.IO -------------------------------------------------------------
    def _register_handlers(self) -> None:
        self.socket.on("connect", self._on_connect)
        self.socket.on("disconnect", self._on_disconnect)
        for name in (PROJECT_CREATED, PROJECT_UPDATED, PROJECT_DELETED):
            self.socket.on(name, self._event_handler(name))

    def _event_handler(self, name: str):
        def handler(payload):
            self.handle_event(name, payload)

        return handler

    def handle_event(self, name: str, payload: dict[str, Any]) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.append((name, payload))
            self._apply(name, payload)

    def _apply(self, name: str, payload: dict[str, Any]) -> None:
        self.projects.apply(name, payload)
        self.notifications.apply(name, payload)

    def _on_connect(self) -> None:
        # Events missed while disconnected are never replayed; refetch instead.
        logger.info("Connected to %s, refreshing state", self.base_url)
        with self._lock:
            self._pending = []
        try:
            self.fetch_projects()
            self.fetch_notifications()
        finally:
            with self._lock:
                pending, self._pending = self._pending or [], None
                for name, payload in pending:
                    self._apply(name, payload)

    def _on_disconnect(self, *args) -> None:
        logger.info("Disconnected from %s", self.base_url)

    def connect(self) -> None:
        if not self.token:
            msg = "login() must succeed before connect()"
            raise RuntimeError(msg)
        self.socket.connect(
            self.base_url,
            auth={"token": self.token},
            socketio_path=self.socketio_path,
        )

    def disconnect(self) -> None:
        self.socket.disconnect()

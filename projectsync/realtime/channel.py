"""In-process publish/subscribe for project events.

Every subscriber owns a FIFO queue. ``publish`` enqueues onto a snapshot of the
sessions connected at that moment, so each session sees events in publish
order, late subscribers get nothing from before they joined, and one broken
session never holds up the rest.
"""

from __future__ import annotations

import functools
import itertools
import logging
import queue
import threading
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

_session_ids = itertools.count(1)


@dataclass(frozen=True)
class BroadcastEvent:
    name: str
    payload: dict[str, Any] = field(default_factory=dict)


class SessionClosed(Exception):  # noqa: N818
    pass


class Session:
    """One subscriber's view of the channel."""

    def __init__(self, channel: BroadcastChannel | None = None):
        self.sid = f"local-{next(_session_ids)}"
        self.channel = channel
        self.closed = False
        self._queue: queue.SimpleQueue[BroadcastEvent] = queue.SimpleQueue()

    def __repr__(self):
        return f"<Session {self.sid}>"

    def deliver(self, event: BroadcastEvent) -> None:
        if self.closed:
            raise SessionClosed(self.sid)
        self._queue.put(event)

    def receive(self, timeout: float | None = None) -> BroadcastEvent:
        """Next event, blocking up to ``timeout``; raises ``queue.Empty``."""

        return self._queue.get(timeout=timeout)

    def drain(self) -> list[BroadcastEvent]:
        events = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events

    def close(self) -> None:
        if self.channel is not None:
            self.channel.unsubscribe(self)
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class BroadcastChannel:
    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}

    @property
    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def subscribe(self) -> Session:
        session = Session(self)
        with self._lock:
            self._sessions[session.sid] = session
        logger.debug("Session %s subscribed", session.sid)
        return session

    def unsubscribe(self, session: Session) -> None:
        with self._lock:
            self._sessions.pop(session.sid, None)

    def publish(self, event: BroadcastEvent) -> None:
        with self._lock:
            targets = list(self._sessions.values())
        for session in targets:
            try:
                session.deliver(event)
            except Exception:
                logger.exception("Delivery of %s to %s failed", event.name, session.sid)


class SocketIOBroadcastChannel(BroadcastChannel):
    """Emit to every connected Socket.IO client, plus the local fan-out.

    Socket.IO connections are reached through ``emit_event_to_all`` only and
    never hold a local ``Session``; local sessions serve in-process listeners.
    """

    def publish(self, event: BroadcastEvent) -> None:
        super().publish(event)
        from .socketio import emit_event_to_all

        emit_event_to_all(event.name, event.payload)


@functools.cache
def _channel(dotted_path: str) -> BroadcastChannel:
    return import_string(dotted_path)()


def get_broadcast_channel() -> BroadcastChannel:
    return _channel(settings.REALTIME_BROADCAST_CHANNEL)


def reset_broadcast_channel() -> None:
    _channel.cache_clear()


@receiver(setting_changed)
def _reset_on_setting_change(*, setting, **kwargs):
    if setting == "REALTIME_BROADCAST_CHANNEL":
        reset_broadcast_channel()

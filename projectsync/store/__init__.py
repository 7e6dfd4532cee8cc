"""Record and user stores selected by ``PROJECTSYNC_STORE_MODE``.

``database`` uses the ORM only, ``memory`` keeps everything in process, and
``auto`` probes the database on each call and falls back to memory.
"""

from __future__ import annotations

import functools

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed
from django.dispatch import receiver

from .base import RecordStore
from .base import UsernameTaken
from .base import UserStore

__all__ = [
    "RecordStore",
    "UserStore",
    "UsernameTaken",
    "get_record_store",
    "get_user_store",
    "reset_stores",
]


def _mode() -> str:
    return getattr(settings, "PROJECTSYNC_STORE_MODE", "auto")


@functools.cache
def _record_store(mode: str) -> RecordStore:
    from .database import DatabaseRecordStore
    from .fallback import DualModeRecordStore
    from .memory import MemoryRecordStore

    factories = {
        "database": DatabaseRecordStore,
        "memory": MemoryRecordStore,
        "auto": DualModeRecordStore,
    }
    try:
        return factories[mode]()
    except KeyError:
        msg = f"Unknown PROJECTSYNC_STORE_MODE {mode!r}"
        raise ImproperlyConfigured(msg) from None


@functools.cache
def _user_store(mode: str) -> UserStore:
    from .database import DatabaseUserStore
    from .fallback import DualModeUserStore
    from .memory import MemoryUserStore

    factories = {
        "database": DatabaseUserStore,
        "memory": MemoryUserStore,
        "auto": DualModeUserStore,
    }
    try:
        return factories[mode]()
    except KeyError:
        msg = f"Unknown PROJECTSYNC_STORE_MODE {mode!r}"
        raise ImproperlyConfigured(msg) from None


def get_record_store() -> RecordStore:
    return _record_store(_mode())


def get_user_store() -> UserStore:
    return _user_store(_mode())


def reset_stores() -> None:
    """Drop cached stores; memory-held records are discarded with them."""

    _record_store.cache_clear()
    _user_store.cache_clear()


@receiver(setting_changed)
def _reset_on_setting_change(*, setting, **kwargs):
    if setting == "PROJECTSYNC_STORE_MODE":
        reset_stores()

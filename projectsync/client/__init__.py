from .reconciler import NotificationFeed
from .reconciler import ProjectListReconciler
from .session import ApiError
from .session import ProjectSyncClient

__all__ = [
    "ApiError",
    "NotificationFeed",
    "ProjectListReconciler",
    "ProjectSyncClient",
]

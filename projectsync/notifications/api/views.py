from __future__ import annotations

from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from projectsync.store import get_record_store

from .serializers import NotificationSerializer


@extend_schema_view(
    list=extend_schema(tags=["Notifications"], responses=NotificationSerializer(many=True)),
    mark_read=extend_schema(
        tags=["Notifications"], request=None, responses=NotificationSerializer
    ),
)
class NotificationViewSet(viewsets.ViewSet):
    """Shared notification feed.

    - list: the 50 most recent notifications, newest first
    - mark_read: flag one notification as read (idempotent)
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = "[^/]+"

    def list(self, request):
        records = get_record_store().list_notifications()
        return Response(NotificationSerializer(records, many=True).data)

    @action(detail=True, methods=["put"], url_path="read")
    def mark_read(self, request, pk=None):
        record = get_record_store().mark_notification_read(pk)
        return Response(NotificationSerializer(record).data)

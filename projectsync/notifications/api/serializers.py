from rest_framework import serializers


class NotificationSerializer(serializers.Serializer):
    """Read serializer for notification records."""

    id = serializers.ReadOnlyField()
    message = serializers.CharField(read_only=True)
    type = serializers.CharField(read_only=True)
    projectId = serializers.ReadOnlyField(source="project_id")  # noqa: N815
    userId = serializers.ReadOnlyField(source="user_id")  # noqa: N815
    read = serializers.BooleanField(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815

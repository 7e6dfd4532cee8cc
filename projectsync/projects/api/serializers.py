from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from projectsync.projects.models import Project

STATUS_CHOICES_TEXT = ", ".join(Project.Status.values)
PRIORITY_CHOICES_TEXT = ", ".join(Project.Priority.values)

# ISO dates, plus the full timestamps browsers send from date pickers.
DUE_DATE_INPUT_FORMATS = [
    "iso-8601",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S",
]


def _title_field() -> serializers.CharField:
    return serializers.CharField(
        min_length=3,
        max_length=100,
        error_messages={
            "required": "Title is required",
            "blank": "Title is required",
            "null": "Title is required",
            "min_length": "Title must be at least 3 characters long",
            "max_length": "Title cannot exceed 100 characters",
        },
    )


def _description_field() -> serializers.CharField:
    return serializers.CharField(
        min_length=10,
        max_length=1000,
        error_messages={
            "required": "Description is required",
            "blank": "Description is required",
            "null": "Description is required",
            "min_length": "Description must be at least 10 characters long",
            "max_length": "Description cannot exceed 1000 characters",
        },
    )


def _status_field(**kwargs) -> serializers.ChoiceField:
    return serializers.ChoiceField(
        choices=Project.Status.choices,
        error_messages={
            "required": "Status is required",
            "null": "Status is required",
            "invalid_choice": f"Status must be one of: {STATUS_CHOICES_TEXT}",
        },
        **kwargs,
    )


def _priority_field(**kwargs) -> serializers.ChoiceField:
    return serializers.ChoiceField(
        choices=Project.Priority.choices,
        error_messages={
            "required": "Priority is required",
            "null": "Priority is required",
            "invalid_choice": f"Priority must be one of: {PRIORITY_CHOICES_TEXT}",
        },
        **kwargs,
    )


class _ProjectPayloadSerializer(serializers.Serializer):
    """Fields shared by the create and update payloads."""

    title = _title_field()
    description = _description_field()
    dueDate = serializers.DateField(  # noqa: N815
        source="due_date",
        allow_null=True,
        default=None,
        input_formats=DUE_DATE_INPUT_FORMATS,
        error_messages={
            "invalid": "Due date must be a valid date",
            "datetime": "Due date must be a valid date",
        },
    )

    def to_internal_value(self, data):
        # An empty dueDate means "no due date".
        if hasattr(data, "get") and data.get("dueDate") == "":
            data = {key: data[key] for key in data}
            data["dueDate"] = None
        return super().to_internal_value(data)


class ProjectCreateSerializer(_ProjectPayloadSerializer):
    status = _status_field(default=Project.Status.PLANNING)
    priority = _priority_field(default=Project.Priority.MEDIUM)

    def validate_dueDate(self, value):  # noqa: N802
        if value is not None and value < timezone.localdate():
            msg = "Due date cannot be in the past"
            raise serializers.ValidationError(msg)
        return value


class ProjectUpdateSerializer(_ProjectPayloadSerializer):
    """Full replacement: everything but the due date is required."""

    status = _status_field()
    priority = _priority_field()


class ProjectQuerySerializer(serializers.Serializer):
    search = serializers.CharField(
        max_length=100,
        allow_blank=True,
        default="",
        error_messages={"max_length": "Search term cannot exceed 100 characters"},
    )
    status = serializers.ChoiceField(
        choices=Project.Status.choices,
        allow_blank=True,
        default="",
        error_messages={
            "invalid_choice": f"Status filter must be one of: {STATUS_CHOICES_TEXT}",
        },
    )
    priority = serializers.ChoiceField(
        choices=Project.Priority.choices,
        allow_blank=True,
        default="",
        error_messages={
            "invalid_choice": (
                f"Priority filter must be one of: {PRIORITY_CHOICES_TEXT}"
            ),
        },
    )


class ProjectSerializer(serializers.Serializer):
    """Wire form of a project record."""

    id = serializers.ReadOnlyField()
    title = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    priority = serializers.CharField(read_only=True)
    dueDate = serializers.DateField(source="due_date", read_only=True)  # noqa: N815
    createdBy = serializers.CharField(source="created_by", read_only=True)  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

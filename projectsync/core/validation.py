"""Validation gate shared by the HTTP API and the Python client.

Schemas are DRF serializers. Every field is checked before anything is
reported, unknown keys are dropped, and defaults are applied to the returned
data. The client runs the same gate before sending a request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from projectsync.core.exceptions import ValidationFailed
from projectsync.core.exceptions import flatten_errors

if TYPE_CHECKING:  # import for type checking only
    from rest_framework import serializers


def validate_payload(
    payload: Any,
    schema: type[serializers.Serializer],
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return the sanitized payload or raise ``ValidationFailed``."""

    serializer = schema(data=payload, context=context or {})
    if not serializer.is_valid():
        raw = payload if hasattr(payload, "get") else None
        secret = [name for name, field in serializer.fields.items() if field.write_only]
        raise ValidationFailed(flatten_errors(serializer.errors, raw, hidden=secret))
    return dict(serializer.validated_data)

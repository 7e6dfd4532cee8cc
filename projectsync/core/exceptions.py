"""Error taxonomy shared by the HTTP API, the stores and the client.

Every API error leaves the server as ``{"error": str}`` or, for validation
failures, ``{"error": str, "details": [{"field", "message", "value"?}]}``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field as dc_field
from typing import TYPE_CHECKING
from typing import Any

from rest_framework import exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.settings import api_settings
from rest_framework.views import exception_handler

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "Validation failed"
SERVER_ERROR = "Server error"

_NO_VALUE = object()


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str
    value: Any = dc_field(default=_NO_VALUE, compare=False)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"field": self.field, "message": self.message}
        if self.value is not _NO_VALUE:
            out["value"] = self.value
        return out


def flatten_errors(
    detail: Any,
    payload: Mapping[str, Any] | None = None,
    *,
    hidden: Iterable[str] = (),
) -> list[FieldError]:
    """Turn DRF's nested ``serializer.errors`` into one entry per message.

    Submitted values are echoed back except for the fields named in ``hidden``.
    """

    payload = payload or {}
    hidden = frozenset(hidden)
    if isinstance(detail, dict):
        items: Iterable[tuple[str, Any]] = detail.items()
    else:
        items = [(api_settings.NON_FIELD_ERRORS_KEY, detail)]

    errors: list[FieldError] = []
    for name, messages in items:
        if not isinstance(messages, (list, tuple)):
            messages = [messages]  # noqa: PLW2901
        for message in messages:
            if name in payload and name not in hidden:
                errors.append(FieldError(name, str(message), payload.get(name)))
            else:
                errors.append(FieldError(name, str(message)))
    return errors


class ValidationFailed(exceptions.ValidationError):
    """Payload rejected by the validation gate; carries every field problem."""

    def __init__(self, details: list[FieldError]):
        self.details = list(details)
        grouped: dict[str, list[str]] = {}
        for item in self.details:
            grouped.setdefault(item.field, []).append(item.message)
        super().__init__(grouped)


class InvalidCredentials(exceptions.AuthenticationFailed):
    default_detail = "Invalid credentials"
    default_code = "invalid_credentials"


class Forbidden(exceptions.PermissionDenied):
    default_detail = "Admin access required"
    default_code = "forbidden"


class RecordNotFound(exceptions.NotFound):
    default_detail = "Record not found"
    default_code = "not_found"


class UpstreamUnavailable(Exception):  # noqa: N818
    """The durable store could not be reached; callers fall back to memory."""


def _error_message(data: Any) -> str:
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        for value in data.values():
            return _error_message(value)
        return ""
    if isinstance(data, (list, tuple)) and data:
        return _error_message(data[0])
    return str(data)


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled error in %s",
            type(view).__name__ if view is not None else "-",
            exc_info=exc,
        )
        return Response(
            {"error": SERVER_ERROR},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationFailed):
        details = exc.details
    elif isinstance(exc, exceptions.ValidationError):
        request = context.get("request")
        payload = getattr(request, "data", None) if request is not None else None
        details = flatten_errors(exc.detail, payload if hasattr(payload, "get") else None)
    else:
        response.data = {"error": _error_message(response.data)}
        return response

    response.data = {
        "error": VALIDATION_FAILED,
        "details": [item.to_dict() for item in details],
    }
    return response

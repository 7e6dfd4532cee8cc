from rest_framework import exceptions
from rest_framework import status

from projectsync.core.exceptions import FieldError
from projectsync.core.exceptions import Forbidden
from projectsync.core.exceptions import RecordNotFound
from projectsync.core.exceptions import ValidationFailed
from projectsync.core.exceptions import api_exception_handler
from projectsync.core.exceptions import flatten_errors


def test_flatten_errors_keeps_submitted_value():
    errors = flatten_errors(
        {"title": ["too short"], "status": ["bad", "worse"]},
        {"title": "ab"},
    )
    assert [e.to_dict() for e in errors] == [
        {"field": "title", "message": "too short", "value": "ab"},
        {"field": "status", "message": "bad"},
        {"field": "status", "message": "worse"},
    ]


def test_flatten_errors_hides_named_fields():
    errors = flatten_errors(
        {"password": ["too short"], "username": ["too short"]},
        {"password": "123", "username": "al"},
        hidden=["password"],
    )
    assert [e.to_dict() for e in errors] == [
        {"field": "password", "message": "too short"},
        {"field": "username", "message": "too short", "value": "al"},
    ]


def test_validation_failed_body():
    exc = ValidationFailed([FieldError("title", "Title is required")])
    response = api_exception_handler(exc, {})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data == {
        "error": "Validation failed",
        "details": [{"field": "title", "message": "Title is required"}],
    }


def test_plain_drf_validation_error_is_reshaped():
    exc = exceptions.ValidationError({"search": ["Too long"]})
    response = api_exception_handler(exc, {})
    assert response.data["error"] == "Validation failed"
    assert response.data["details"] == [{"field": "search", "message": "Too long"}]


def test_error_bodies_carry_one_message():
    response = api_exception_handler(Forbidden(), {})
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.data == {"error": "Admin access required"}

    response = api_exception_handler(RecordNotFound("Project not found"), {})
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data == {"error": "Project not found"}


def test_unexpected_error_is_logged_as_server_error(caplog):
    response = api_exception_handler(RuntimeError("boom"), {"view": object()})
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.data == {"error": "Server error"}
    assert "Unhandled error in object" in caplog.text

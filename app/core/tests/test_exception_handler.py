"""
Tests for the DRF exception handler.

Every error leaving a view is rendered as {error, error_code[, errors]}
with the status of its kind.
"""

from django.http import Http404
from rest_framework import exceptions

from core.exception_handler import api_exception_handler
from core.exceptions import NotFoundError, RateLimitError


def handle(exc):
    return api_exception_handler(exc, {"view": None})


class TestApiExceptionHandler:
    def test_application_error_uses_its_status(self):
        response = handle(NotFoundError("Meeting not found", error_code="MEETING_NOT_FOUND"))

        assert response.status_code == 404
        assert response.data == {
            "error": "Meeting not found",
            "error_code": "MEETING_NOT_FOUND",
        }

    def test_application_error_details_are_kept(self):
        response = handle(RateLimitError("Slow down", details={"retry_after": 5}))

        assert response.status_code == 429
        assert response.data["details"] == {"retry_after": 5}

    def test_serializer_errors_are_attached(self):
        exc = exceptions.ValidationError({"content": ["This field may not be blank."]})

        response = handle(exc)

        assert response.status_code == 400
        assert response.data["error_code"] == "VALIDATION_ERROR"
        assert response.data["error"] == "This field may not be blank."
        assert response.data["errors"] == {"content": ["This field may not be blank."]}

    def test_not_authenticated(self):
        response = handle(exceptions.NotAuthenticated())

        assert response.status_code == 401
        assert response.data["error_code"] == "UNAUTHENTICATED"
        assert "credentials" in response.data["error"].lower()

    def test_django_404(self):
        response = handle(Http404())

        assert response.status_code == 404
        assert response.data["error_code"] == "NOT_FOUND"

    def test_unexpected_error_is_500(self, caplog):
        response = handle(ZeroDivisionError("boom"))

        assert response.status_code == 500
        assert response.data == {
            "error": "Internal server error",
            "error_code": "UNEXPECTED_ERROR",
        }
        assert "boom" in caplog.text

"""
Tests for the service layer result wrapper.

- ServiceResult: status mapping and response body
- BaseService.handle_exception: logging and error codes
"""

import logging

from core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from core.services import BaseService, ServiceResult


class DummyService(BaseService):
    pass


class TestServiceResult:
    def test_success_is_truthy_with_200(self):
        result = ServiceResult.success({"id": 1})

        assert result
        assert result.status_code == 200
        assert result.to_response() == {"success": True, "data": {"id": 1}}

    def test_plain_failure_is_a_validation_failure(self):
        result = ServiceResult.failure(
            "Message content cannot be empty",
            "EMPTY_CONTENT",
            errors={"content": ["This field may not be blank."]},
        )

        assert not result
        assert result.status_code == 400
        assert result.to_response() == {
            "success": False,
            "error": "Message content cannot be empty",
            "error_code": "EMPTY_CONTENT",
            "errors": {"content": ["This field may not be blank."]},
        }

    def test_from_exception_keeps_error_kind(self):
        result = ServiceResult.from_exception(
            NotFoundError("Channel not found", error_code="CHANNEL_NOT_FOUND")
        )

        assert result.status_code == 404
        assert result.error == "Channel not found"
        assert result.error_code == "CHANNEL_NOT_FOUND"

    def test_from_exception_code_override(self):
        result = ServiceResult.from_exception(
            PermissionDeniedError("Nope"), error_code="NOT_OWNER"
        )

        assert result.status_code == 403
        assert result.error_code == "NOT_OWNER"

    def test_from_foreign_exception_uses_class_name(self):
        result = ServiceResult.from_exception(KeyError("missing"))

        assert result.status_code == 400
        assert result.error_code == "KEYERROR"


class TestHandleException:
    def test_logs_with_context_and_returns_failure(self, caplog):
        with caplog.at_level(logging.ERROR):
            result = DummyService.handle_exception(
                RuntimeError("cache down"), "Error setting presence", error_code="PRESENCE_ERROR"
            )

        assert not result
        assert result.error_code == "PRESENCE_ERROR"
        assert "Error setting presence: cache down" in caplog.text
        assert caplog.records[-1].name.endswith("DummyService")

    def test_taxonomy_error_keeps_status(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = DummyService.handle_exception(
                ConflictError("Already a member", error_code="ALREADY_MEMBER"),
                log_level=logging.WARNING,
            )

        assert result.status_code == 409
        assert result.error_code == "ALREADY_MEMBER"

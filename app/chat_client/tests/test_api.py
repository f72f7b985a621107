"""
Tests for ChatApiClient.

Responses are canned with httpx.MockTransport; the tests check request
shapes and how error statuses map onto the error kinds.
"""

import json

import httpx
import pytest

from chat_client.api import ChatApiClient
from chat_client.tests.helpers import API_BASE_URL, make_message
from core.exceptions import (
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
    ValidationError,
)


def client_with(handler, token="tok"):
    return ChatApiClient(API_BASE_URL, token=token, transport=httpx.MockTransport(handler))


class TestRequests:
    def test_list_messages_sends_paging_and_bearer_token(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"messages": [make_message(1)]})

        messages = client_with(handler).list_messages(7, limit=20, skip=5)

        assert seen["url"] == "http://testserver/api/v1/messages/channel/7/?limit=20&skip=5"
        assert seen["auth"] == "Bearer tok"
        assert [m["_id"] for m in messages] == [1]

    def test_send_message_posts_camel_case_body(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                201, json={"message": "Message sent successfully", "data": make_message(3)}
            )

        message = client_with(handler).send_message(7, "hi")

        assert seen["method"] == "POST"
        assert seen["body"] == {"content": "hi", "channelId": 7, "type": "text"}
        assert message["_id"] == 3

    def test_login_keeps_access_token(self):
        def handler(request):
            return httpx.Response(
                200, json={"message": "ok", "token": "new", "refresh": "r", "user": {"_id": 1}}
            )

        api = client_with(handler, token=None)
        user = api.login("a@example.com", "secret1")

        assert user == {"_id": 1}
        assert api.token == "new"

    def test_no_authorization_header_without_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"communities": []})

        client_with(handler, token=None).list_communities()

        assert seen["auth"] is None


class TestErrorMapping:
    @pytest.mark.parametrize(
        ("status_code", "error_class"),
        [
            (400, ValidationError),
            (401, UnauthenticatedError),
            (403, PermissionDeniedError),
            (404, NotFoundError),
            (409, ConflictError),
            (500, ExternalServiceError),
        ],
    )
    def test_status_maps_to_error_kind(self, status_code, error_class):
        def handler(request):
            return httpx.Response(status_code, json={"error": "nope", "error_code": "CODE"})

        with pytest.raises(error_class) as exc_info:
            client_with(handler).delete_message(1)

        assert exc_info.value.message == "nope"
        assert exc_info.value.error_code == "CODE"

    def test_validation_field_errors_are_kept(self):
        def handler(request):
            return httpx.Response(
                400,
                json={
                    "error": "Message content cannot be empty",
                    "error_code": "VALIDATION_ERROR",
                    "errors": {"content": ["Message content cannot be empty"]},
                },
            )

        with pytest.raises(ValidationError) as exc_info:
            client_with(handler).send_message(7, "")

        assert exc_info.value.details == {
            "errors": {"content": ["Message content cannot be empty"]}
        }

    def test_server_error_without_body_is_unexpected(self):
        def handler(request):
            return httpx.Response(502, content=b"Bad gateway")

        with pytest.raises(ExternalServiceError) as exc_info:
            client_with(handler).list_communities()

        assert exc_info.value.error_code == "UNEXPECTED_ERROR"

    def test_transport_failure_is_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ExternalServiceError) as exc_info:
            client_with(handler).list_communities()

        assert exc_info.value.error_code == "NETWORK_ERROR"

"""
HTTP client for the ConverseX REST API.

Error responses are raised as the matching error kind from
core.exceptions, so callers handle a 403 from the server the same way
the services report it:

    400 -> ValidationError
    401 -> UnauthenticatedError
    403 -> PermissionDeniedError
    404 -> NotFoundError
    409 -> ConflictError
    429 -> RateLimitError
    anything else, and transport failures -> ExternalServiceError

Usage:
    with ChatApiClient("https://chat.example.com/api/v1/") as api:
        api.login("alice@example.com", "secret123")
        messages = api.list_messages(channel_id=3)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    UnauthenticatedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_ERRORS: dict[int, type[BaseApplicationError]] = {
    400: ValidationError,
    401: UnauthenticatedError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    429: RateLimitError,
}


def error_from_response(response: httpx.Response) -> BaseApplicationError:
    """Build the error kind encoded by a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    error_class = STATUS_ERRORS.get(response.status_code)
    if error_class is None:
        return ExternalServiceError(
            body.get("error") or f"Unexpected response ({response.status_code})",
            error_code=body.get("error_code") or "UNEXPECTED_ERROR",
            details={"status_code": response.status_code},
        )

    details = {"errors": body["errors"]} if body.get("errors") else None
    return error_class(
        body.get("error") or response.reason_phrase,
        error_code=body.get("error_code"),
        details=details,
    )


class ChatApiClient:
    """
    Synchronous client for messages, channels and communities.

    Args:
        base_url: API root, e.g. "https://chat.example.com/api/v1/"
        token: Access token sent as a Bearer credential
        transport: Optional httpx transport (tests use httpx.MockTransport)
        timeout: Request timeout in seconds
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.token = token
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> ChatApiClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ExternalServiceError(
                "Could not reach the chat server", error_code="NETWORK_ERROR"
            ) from e

        if response.is_success:
            return response.json() if response.content else {}

        error = error_from_response(response)
        logger.debug(f"{method} {path} -> {response.status_code} {error.error_code}")
        raise error

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in and keep the access token for later requests."""
        body = self._request("POST", "auth/login/", json={"email": email, "password": password})
        self.token = body["token"]
        return body["user"]

    def me(self) -> dict[str, Any]:
        return self._request("GET", "auth/me/")["user"]

    # -------------------------------------------------------------------------
    # Directory
    # -------------------------------------------------------------------------

    def list_communities(self) -> list[dict[str, Any]]:
        return self._request("GET", "communities/")["communities"]

    def list_channels(self, community_id: int) -> list[dict[str, Any]]:
        return self._request("GET", f"channels/community/{community_id}/")["channels"]

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def list_messages(
        self, channel_id: int, limit: int | None = None, skip: int | None = None
    ) -> list[dict[str, Any]]:
        """Latest messages of a channel, oldest first."""
        params = {}
        if limit is not None:
            params["limit"] = limit
        if skip is not None:
            params["skip"] = skip
        body = self._request("GET", f"messages/channel/{channel_id}/", params=params)
        return body["messages"]

    def send_message(self, channel_id: int, content: str, type: str = "text") -> dict[str, Any]:
        body = self._request(
            "POST",
            "messages/",
            json={"content": content, "channelId": channel_id, "type": type},
        )
        return body["data"]

    def edit_message(self, message_id: int, content: str) -> dict[str, Any]:
        body = self._request("PUT", f"messages/{message_id}/", json={"content": content})
        return body["data"]

    def delete_message(self, message_id: int) -> None:
        self._request("DELETE", f"messages/{message_id}/")

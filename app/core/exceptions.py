"""
Base exception classes for application-wide error handling.

This module provides the error taxonomy shared by every domain app:
- Consistent error responses across REST views and the realtime hub
- Machine-readable error codes for client handling
- An HTTP status per error kind, so a specific failure is never reported
  as a generic 500

Exception Hierarchy:
    BaseApplicationError (base, 400)
    ├── UnauthenticatedError - Missing or invalid credential (401)
    ├── ValidationError - Malformed input (400)
    ├── NotFoundError - Dangling reference to a resource (404)
    ├── PermissionDeniedError - Authenticated but not allowed (403)
    ├── ConflictError - Duplicate join, duplicate registration (409)
    ├── RateLimitError - Rate limit exceeded (429)
    └── ExternalServiceError - Third-party service failures (502)

Usage:
    from core.exceptions import NotFoundError, PermissionDeniedError

    # Raise with message only
    raise NotFoundError("Channel not found")

    # Raise with error code for client handling
    raise PermissionDeniedError(
        "You can only edit your own messages", error_code="NOT_AUTHOR"
    )

    # Carry inside a ServiceResult instead of raising
    return ServiceResult.from_exception(NotFoundError("Channel not found"))

Note:
    Services return these wrapped in ServiceResult for expected failures.
    core.exception_handler renders any of them raised inside a DRF view.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
        status_code: HTTP status that encodes the error kind

    Example:
        try:
            channel = ChannelService.get_channel(channel_id)
        except NotFoundError as e:
            logger.warning(f"Channel not found: {e.error_code}")
            return Response(e.to_dict(), status=e.status_code)
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class UnauthenticatedError(BaseApplicationError):
    """
    Raised when a credential is missing, malformed, or expired.

    Clients react to this by re-authenticating.

    Example:
        result = IdentityService.verify_token(token)
        if not result:
            raise UnauthenticatedError("Invalid or expired token")
    """

    default_error_code: str = "UNAUTHENTICATED"
    status_code: int = 401


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Empty or oversized message content
    - Unknown preference sections
    - Business rule violations on input shape

    Example:
        raise ValidationError(
            "Message content cannot be empty", error_code="EMPTY_CONTENT"
        )

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        raise NotFoundError(
            f"Community {community_id} not found",
            error_code="COMMUNITY_NOT_FOUND",
            details={"community_id": community_id},
        )
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when an authenticated user lacks permission for an operation.

    Use for:
    - Editing or deleting someone else's message
    - Owner-only directory mutations by non-owners
    - Reading a community the user is not a member of
    - Joining a private community

    Note:
        For authentication failures (missing/invalid token), use
        UnauthenticatedError. Use this for authorization failures.
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Joining a community twice
    - Registering an email or username that already exists

    Example:
        if community.members.filter(pk=user.pk).exists():
            raise ConflictError("You are already a member", error_code="ALREADY_MEMBER")
    """

    default_error_code: str = "CONFLICT"
    status_code: int = 409


class RateLimitError(BaseApplicationError):
    """
    Raised when rate limit is exceeded.

    Note:
        Include retry_after in details when possible to help clients.
    """

    default_error_code: str = "RATE_LIMIT_EXCEEDED"
    status_code: int = 429


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external collaborator call fails.

    Note:
        Log the original error for debugging but don't expose
        internal details to clients in production.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = 502

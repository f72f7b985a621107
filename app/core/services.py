"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, models handle data, services handle logic.

Pattern Comparison:
    - ServiceResult: Use for expected failures (validation, business rules)
    - Exceptions: Use for unexpected failures (database errors, bugs)

Usage:
    from core.exceptions import NotFoundError
    from core.services import BaseService, ServiceResult

    class ChannelService(BaseService):
        @classmethod
        def get_channel(cls, channel_id: int) -> ServiceResult[Channel]:
            channel = Channel.objects.filter(pk=channel_id).first()
            if channel is None:
                return ServiceResult.from_exception(
                    NotFoundError("Channel not found", error_code="CHANNEL_NOT_FOUND")
                )
            return ServiceResult.success(channel)

    # In view
    result = ChannelService.get_channel(pk)
    if not result:
        return Response(result.to_response(), status=result.status_code)
    return Response({"channel": ChannelSerializer(result.data).data})

Related:
    - core.exceptions: Error taxonomy carried by failed results
    - core.exception_handler: Rendering of exceptions raised inside views
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Provides consistent success/failure handling without exceptions.
    Use this for expected failures (validation errors, business rule violations).

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures
        exception: Taxonomy error describing the failure kind, if any

    Usage:
        # Success case
        return ServiceResult.success(message)

        # Failure case (validation, HTTP 400)
        return ServiceResult.failure("Message content cannot be empty", "EMPTY_CONTENT")

        # Failure with a specific kind (HTTP status taken from the error)
        return ServiceResult.from_exception(
            PermissionDeniedError("Only the owner can delete", error_code="NOT_OWNER")
        )

        # Check result
        result = MessageService.edit_message(user, message_id, content)
        if result.success:
            message = result.data
        else:
            print(f"Error: {result.error} ({result.error_code})")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)
    exception: BaseApplicationError | None = field(default=None, repr=False)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Failures created this way are validation failures (HTTP 400).
        Use from_exception() for any other failure kind.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors (for validation failures)

        Returns:
            ServiceResult with success=False and error details
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    @classmethod
    def from_exception(cls, exc: Exception, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        Taxonomy errors keep their message, code and kind; any other
        exception is reported with its class name as the code.

        Args:
            exc: The caught or constructed exception
            error_code: Optional error code override

        Returns:
            ServiceResult with error details from exception

        Example:
            return ServiceResult.from_exception(
                ConflictError("You are already a member", error_code="ALREADY_MEMBER")
            )
        """
        if isinstance(exc, BaseApplicationError):
            return cls(
                success=False,
                error=exc.message,
                error_code=error_code or exc.error_code,
                exception=exc,
            )
        return cls(
            success=False,
            error=str(exc),
            error_code=error_code or exc.__class__.__name__.upper(),
        )

    @property
    def status_code(self) -> int:
        """
        HTTP status encoding the failure kind.

        Returns 200 for successful results and 400 for failures that
        carry no taxonomy error.
        """
        if self.success:
            return 200
        if self.exception is not None:
            return self.exception.status_code
        return 400

    def to_response(self) -> dict[str, Any]:
        """
        Convert to API response format.

        Returns:
            Dict with success status and data or error details
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {
            "success": False,
            "error": self.error,
        }
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response

    def __bool__(self) -> bool:
        """Allow using result in boolean context (same as result.success)."""
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management
    - Exception handling patterns

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Services should be stateless
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction. If any operation fails, all
        changes are rolled back.

        Example:
            with cls.atomic():
                community = Community.objects.create(...)
                Channel.objects.create(community=community, name="general")
                # If the channel insert fails, the community is rolled back too
        """
        from django.db import transaction

        with transaction.atomic():
            yield

    @classmethod
    def handle_exception(
        cls,
        exc: Exception,
        context: str = "",
        log_level: int = logging.ERROR,
        error_code: str | None = None,
    ) -> ServiceResult:
        """
        Convert exception to ServiceResult with logging.

        Args:
            exc: The caught exception
            context: Additional context for logging
            log_level: Logging level (default ERROR)
            error_code: Code reported instead of the exception class name

        Returns:
            ServiceResult with error details
        """
        logger = cls.get_logger()
        message = f"{context}: {exc}" if context else str(exc)
        logger.log(log_level, message, exc_info=True)
        return ServiceResult.from_exception(exc, error_code=error_code)


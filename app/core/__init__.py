"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps
(authentication, communities, chat, meetings):

- Generic, reusable base classes (no domain-specific logic)
- Clear extension points for domain apps
- Infrastructure concerns separated from business logic

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes and HTTP status
    - UnauthenticatedError: Missing or invalid credential
    - ValidationError: Input validation failures
    - NotFoundError: Resource not found
    - PermissionDeniedError: Authorization failures
    - ConflictError: State conflicts (duplicates, etc.)
    - RateLimitError: Rate limit exceeded
    - ExternalServiceError: Third-party service failures

Exception handler (configured in REST_FRAMEWORK settings):
    - core.exception_handler.api_exception_handler

Note:
    - Business logic should NOT go here. Extend core classes in your domain apps.
    - Django models are NOT imported here to avoid AppRegistryNotReady
      errors. Import them directly from core.models.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

# Exceptions (no Django dependencies)
from .exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    UnauthenticatedError,
    ValidationError,
)

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "UnauthenticatedError",
    "ValidationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ConflictError",
    "RateLimitError",
    "ExternalServiceError",
]

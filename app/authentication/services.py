"""
Authentication services.

This module provides:
- AuthService: registration, login, logout and profile updates
- PreferenceService: whole-section preference replacement
- IdentityService: the identity verifier mapping a bearer token to a user

Related files:
    - models.py: User, UserStatus, PreferenceSection
    - serializers.py: Per-section preference serializers
    - chat/middleware.py: Websocket authentication via IdentityService

Security:
    - Passwords hashed with Django's configured hasher
    - Tokens are simplejwt access/refresh pairs
    - Refresh tokens are blacklisted on logout
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.contrib.auth import authenticate
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from authentication.models import PreferenceSection, User, UserStatus
from core.exceptions import (
    ConflictError,
    UnauthenticatedError,
    ValidationError,
)
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from typing import Any


class AuthService(BaseService):
    """
    Centralized authentication business logic.

    Usage:
        from authentication.services import AuthService

        result = AuthService.register("ada", "ada@example.com", "secret1")
        if result.success:
            tokens = AuthService.issue_tokens(result.data)
    """

    @staticmethod
    def issue_tokens(user: User) -> dict[str, str]:
        """
        Issue a JWT access/refresh pair for a user.

        Returns:
            {"token": <access>, "refresh": <refresh>}
        """
        refresh = RefreshToken.for_user(user)
        return {"token": str(refresh.access_token), "refresh": str(refresh)}

    @classmethod
    def register(cls, username: str, email: str, password: str) -> ServiceResult[User]:
        """
        Create a new account.

        Args:
            username: Public name (already length-validated)
            email: Login email
            password: Raw password

        Returns:
            ServiceResult with the new User, or ConflictError when the
            email or username is already in use
        """
        username = username.strip()
        email = email.lower().strip()

        if User.objects.filter(email__iexact=email).exists():
            return ServiceResult.from_exception(
                ConflictError("Email already registered", error_code="EMAIL_TAKEN")
            )
        if User.objects.filter(username__iexact=username).exists():
            return ServiceResult.from_exception(
                ConflictError("Username already taken", error_code="USERNAME_TAKEN")
            )

        user = User.objects.create_user(email=email, password=password, username=username)

        cls.get_logger().info(f"User {user.id} registered as {user.username}")
        return ServiceResult.success(user)

    @classmethod
    def login(cls, email: str, password: str) -> ServiceResult[User]:
        """
        Authenticate with email and password and mark the user online.

        Returns:
            ServiceResult with the User, or UnauthenticatedError on bad
            credentials (the message does not reveal which part was wrong)
        """
        user = authenticate(email=email.lower().strip(), password=password)
        if user is None:
            cls.get_logger().warning(f"Failed login attempt for {email}")
            return ServiceResult.from_exception(
                UnauthenticatedError("Invalid credentials", error_code="INVALID_CREDENTIALS")
            )

        user.status = UserStatus.ONLINE
        user.save(update_fields=["status", "updated_at"])

        cls.get_logger().info(f"User {user.id} logged in")
        return ServiceResult.success(user)

    @classmethod
    def logout(cls, user: User, refresh: str | None = None) -> ServiceResult[User]:
        """
        Mark the user offline and blacklist the refresh token if given.

        Returns:
            ServiceResult with the User, or ValidationError when the
            supplied refresh token is invalid (status is still updated)
        """
        user.status = UserStatus.OFFLINE
        user.save(update_fields=["status", "updated_at"])

        if refresh:
            try:
                RefreshToken(refresh).blacklist()
            except TokenError as exc:
                cls.get_logger().warning(f"Logout for user {user.id} with bad refresh token: {exc}")
                return ServiceResult.from_exception(
                    ValidationError(
                        "Invalid or expired refresh token",
                        error_code="INVALID_REFRESH_TOKEN",
                    )
                )

        cls.get_logger().info(f"User {user.id} logged out")
        return ServiceResult.success(user)

    @classmethod
    def update_profile(
        cls,
        user: User,
        avatar: str | None = None,
        username: str | None = None,
        status: str | None = None,
    ) -> ServiceResult[User]:
        """
        Update the public profile fields that were supplied.

        Returns:
            ServiceResult with the User, or ConflictError when the new
            username belongs to someone else
        """
        update_fields = ["updated_at"]

        if username is not None:
            username = username.strip()
            taken = (
                User.objects.filter(username__iexact=username)
                .exclude(pk=user.pk)
                .exists()
            )
            if taken:
                return ServiceResult.from_exception(
                    ConflictError("Username already taken", error_code="USERNAME_TAKEN")
                )
            user.username = username
            update_fields.append("username")

        if avatar is not None:
            user.avatar = avatar
            update_fields.append("avatar")

        if status is not None:
            user.status = status
            update_fields.append("status")

        user.save(update_fields=update_fields)

        cls.get_logger().info(f"User {user.id} updated profile fields {update_fields[1:]}")
        return ServiceResult.success(user)

    @classmethod
    def set_status(cls, user: User, status: str) -> User:
        """Set a user's status without any other profile change."""
        if user.status != status:
            user.status = status
            user.save(update_fields=["status", "updated_at"])
        return user


class PreferenceService(BaseService):
    """
    Whole-section preference replacement.

    A section update replaces one named section only; other sections are
    left untouched and keys inside the section are never merged with the
    previously stored values.
    """

    @classmethod
    def update_section(
        cls, user: User, section: str, values: Any
    ) -> ServiceResult[dict]:
        """
        Replace one preference section.

        Args:
            user: The user whose preferences change
            section: A PreferenceSection value
            values: The new section object (request body)

        Returns:
            ServiceResult with the stored section, ValidationError for an
            unknown section, or a field-level failure for invalid values
        """
        from authentication.serializers import PREFERENCE_SERIALIZERS

        if section not in PREFERENCE_SERIALIZERS:
            return ServiceResult.from_exception(
                ValidationError(
                    "Invalid preference section",
                    error_code="INVALID_PREFERENCE_SECTION",
                )
            )
        if not isinstance(values, dict):
            return ServiceResult.from_exception(
                ValidationError(
                    "Preference section must be a JSON object",
                    error_code="INVALID_PREFERENCE_VALUES",
                )
            )

        serializer = PREFERENCE_SERIALIZERS[section](data=values)
        if not serializer.is_valid():
            return ServiceResult.failure(
                "Invalid preference values",
                error_code="INVALID_PREFERENCE_VALUES",
                errors=serializer.errors,
            )

        data = dict(serializer.validated_data)
        if section == PreferenceSection.ACCOUNTS:
            user.linked_accounts = data
            user.save(update_fields=["linked_accounts", "updated_at"])
        else:
            preferences = dict(user.preferences or {})
            preferences[section] = data
            user.preferences = preferences
            user.save(update_fields=["preferences", "updated_at"])

        cls.get_logger().info(f"User {user.id} replaced preference section {section}")
        return ServiceResult.success(data)


class IdentityService(BaseService):
    """
    Identity verifier: maps a bearer credential to a user.

    Used by the REST layer (through simplejwt authentication), by the
    websocket middleware on handshake, and by the realtime hub when a
    client announces its identity.
    """

    @classmethod
    def verify_token(cls, token: str | None) -> ServiceResult[User]:
        """
        Verify a JWT access token and resolve its user.

        Returns:
            ServiceResult with the active User, UnauthenticatedError for a
            missing/invalid/expired token (also when the token refers
            to a user that no longer exists or is disabled)
        """
        if not token:
            return ServiceResult.from_exception(
                UnauthenticatedError("No token provided", error_code="TOKEN_MISSING")
            )

        try:
            access = AccessToken(token)
        except TokenError as exc:
            cls.get_logger().debug(f"Token rejected: {exc}")
            return ServiceResult.from_exception(
                UnauthenticatedError("Invalid or expired token", error_code="TOKEN_INVALID")
            )

        user_id = access.get(jwt_settings.USER_ID_CLAIM)
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            return ServiceResult.from_exception(
                UnauthenticatedError("User not found", error_code="USER_NOT_FOUND")
            )
        if not user.is_active:
            return ServiceResult.from_exception(
                UnauthenticatedError("User account is disabled", error_code="USER_INACTIVE")
            )

        return ServiceResult.success(user)

"""
Authentication models.

This module defines the user model the chat core authenticates against:
- User: email-based login, public chat identity (username, avatar, status),
  per-section preferences and linked account flags

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: AuthService, PreferenceService, IdentityService
    - serializers.py: Public (author) and private (me) user shapes

The set of communities a user belongs to is the reverse side of
Community.members (``user.communities``), so there is a single
source of truth for membership.
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.core.validators import MinLengthValidator
from django.db import models

from authentication.managers import UserManager

DEFAULT_AVATAR = "/ConverseX.jpg"


class UserStatus(models.TextChoices):
    """
    Presence-like status shown next to a user's name.

    Mutated by login (ONLINE), logout (OFFLINE), joining a meeting (MEETING)
    and explicit profile updates (BUSY, AWAY).
    """

    ONLINE = "online", "Online"
    OFFLINE = "offline", "Offline"
    BUSY = "busy", "Busy"
    AWAY = "away", "Away"
    MEETING = "meeting", "In a meeting"


class PreferenceSection(models.TextChoices):
    """
    Named preference sections that can be replaced one at a time.

    ACCOUNTS maps onto User.linked_accounts; every other section lives
    under its own key in User.preferences.
    """

    APPEARANCE = "appearance", "Appearance"
    GENERAL = "general", "General"
    NOTIFICATIONS = "notifications", "Notifications"
    PRIVACY = "privacy", "Privacy"
    ACCOUNTS = "accounts", "Linked accounts"


PREFERENCE_DEFAULTS = {
    PreferenceSection.APPEARANCE: {
        "darkMode": True,
        "compactLayout": False,
        "autoUpdates": True,
    },
    PreferenceSection.GENERAL: {
        "autoJoin": False,
        "language": "English (US)",
        "timezone": "GMT+05:30",
    },
    PreferenceSection.NOTIFICATIONS: {
        "messages": True,
        "mentions": True,
        "sound": True,
        "emailDigest": False,
    },
    PreferenceSection.PRIVACY: {
        "showStatus": True,
        "readReceipts": True,
        "shareActivity": False,
    },
}

LINKED_ACCOUNT_DEFAULTS = {
    "google": False,
    "microsoft": False,
    "github": False,
}


def default_preferences() -> dict:
    """Return a fresh copy of the default preference sections."""
    return {section.value: dict(values) for section, values in PREFERENCE_DEFAULTS.items()}


def default_linked_accounts() -> dict:
    """Return a fresh copy of the default linked account flags."""
    return dict(LINKED_ACCOUNT_DEFAULTS)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the login identifier.

    Fields:
        email: Login identifier, unique
        username: Public display name, unique, 3-30 characters
        avatar: Avatar URL or path
        status: UserStatus value
        preferences: Preference sections (see PREFERENCE_DEFAULTS)
        linked_accounts: OAuth provider flags (google, microsoft, github)
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email="ada@example.com",
            username="ada",
            password="secret123",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (login identifier)",
    )

    username = models.CharField(
        max_length=30,
        unique=True,
        validators=[MinLengthValidator(3)],
        help_text="Public display name (3-30 characters)",
    )

    avatar = models.CharField(
        max_length=500,
        default=DEFAULT_AVATAR,
        help_text="Avatar URL or static path",
    )

    status = models.CharField(
        max_length=10,
        choices=UserStatus.choices,
        default=UserStatus.OFFLINE,
        help_text="Status shown to other members",
    )

    preferences = models.JSONField(
        default=default_preferences,
        blank=True,
        help_text="Preference sections: appearance, general, notifications, privacy",
    )

    linked_accounts = models.JSONField(
        default=default_linked_accounts,
        blank=True,
        help_text="Linked OAuth providers: google, microsoft, github",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        """Return the username as string representation."""
        return self.username

    def get_full_name(self):
        return self.username

    def get_short_name(self):
        return self.username

    def get_preference_section(self, section: str) -> dict:
        """
        Return one preference section merged over its defaults.

        Args:
            section: A PreferenceSection value

        Returns:
            Dict with every key of the section present
        """
        section = PreferenceSection(section)
        if section == PreferenceSection.ACCOUNTS:
            return {**LINKED_ACCOUNT_DEFAULTS, **(self.linked_accounts or {})}
        stored = (self.preferences or {}).get(section.value, {})
        return {**PREFERENCE_DEFAULTS[section], **stored}

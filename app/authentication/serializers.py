"""
Serializers for authentication models.

This module provides DRF serializers for:
- Public user identity (embedded as a message author or community member)
- Current user (the /me/ shape, including community summaries)
- Registration, login and profile updates
- Preference sections (one strict serializer per section)

Related files:
    - models.py: User, UserStatus, PreferenceSection
    - views.py: Views that use these serializers
    - services.py: AuthService, PreferenceService

Security:
    - Password fields are write-only
    - Identity and timestamps are read-only
"""

from rest_framework import serializers

from authentication.models import PreferenceSection, User, UserStatus


class PublicUserSerializer(serializers.ModelSerializer):
    """
    Public identity of a user.

    This is the author shape embedded in every message, whether it is
    returned by the REST API or broadcast over the realtime hub.
    """

    _id = serializers.IntegerField(source="id", read_only=True)

    class Meta:
        model = User
        fields = ["_id", "username", "avatar", "status"]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for the authenticated user (read operations).

    Includes merged preference sections, linked account flags and
    a summary of the communities the user belongs to.
    """

    _id = serializers.IntegerField(source="id", read_only=True)
    preferences = serializers.SerializerMethodField()
    linkedAccounts = serializers.SerializerMethodField()
    communities = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = [
            "_id",
            "username",
            "email",
            "avatar",
            "status",
            "preferences",
            "linkedAccounts",
            "communities",
            "createdAt",
        ]
        read_only_fields = fields

    def get_preferences(self, obj):
        """Return every preference section with defaults filled in."""
        return {
            section: obj.get_preference_section(section)
            for section in PreferenceSection.values
            if section != PreferenceSection.ACCOUNTS
        }

    def get_linkedAccounts(self, obj):
        return obj.get_preference_section(PreferenceSection.ACCOUNTS)

    def get_communities(self, obj):
        """Return {_id, name, icon} for each community the user belongs to."""
        return [
            {"_id": row["id"], "name": row["name"], "icon": row["icon"]}
            for row in obj.communities.order_by("-created_at").values(
                "id", "name", "icon"
            )
        ]


class RegisterSerializer(serializers.Serializer):
    """
    Serializer for user registration.

    Uniqueness of email and username is checked by AuthService.register()
    so that duplicates are reported as a conflict rather than a
    validation failure.
    """

    username = serializers.CharField(
        min_length=3,
        max_length=30,
        trim_whitespace=True,
        help_text="Unique public name (3-30 characters)",
    )
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=6,
        style={"input_type": "password"},
        help_text="Password must be at least 6 characters.",
    )

    def validate_email(self, value):
        return value.lower().strip()


class LoginSerializer(serializers.Serializer):
    """Serializer for email/password login."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})

    def validate_email(self, value):
        return value.lower().strip()


class LogoutSerializer(serializers.Serializer):
    """Optional refresh token to blacklist on logout."""

    refresh = serializers.CharField(required=False, allow_blank=True)


class ProfileUpdateSerializer(serializers.Serializer):
    """
    Serializer for updating the public profile.

    All fields are optional; only supplied fields are changed.
    """

    avatar = serializers.CharField(required=False, max_length=500)
    username = serializers.CharField(
        required=False,
        min_length=3,
        max_length=30,
        trim_whitespace=True,
    )
    status = serializers.ChoiceField(choices=UserStatus.choices, required=False)


class TokenPairResponseSerializer(serializers.Serializer):
    """Response shape of register and login (documentation only)."""

    message = serializers.CharField()
    token = serializers.CharField(help_text="JWT access token")
    refresh = serializers.CharField(help_text="JWT refresh token")
    user = UserSerializer()


# =============================================================================
# Preference sections
# =============================================================================


class PreferenceSectionSerializer(serializers.Serializer):
    """
    Base serializer for one preference section.

    A section is replaced as a whole: missing keys take their defaults
    and keys that do not belong to the section are rejected.
    """

    def validate(self, attrs):
        unknown = sorted(set(self.initial_data) - set(self.fields))
        if unknown:
            raise serializers.ValidationError(
                {key: ["Unknown preference key."] for key in unknown}
            )
        return attrs


class AppearancePreferencesSerializer(PreferenceSectionSerializer):
    darkMode = serializers.BooleanField(default=True)
    compactLayout = serializers.BooleanField(default=False)
    autoUpdates = serializers.BooleanField(default=True)


class GeneralPreferencesSerializer(PreferenceSectionSerializer):
    autoJoin = serializers.BooleanField(default=False)
    language = serializers.CharField(default="English (US)", max_length=50)
    timezone = serializers.CharField(default="GMT+05:30", max_length=50)


class NotificationPreferencesSerializer(PreferenceSectionSerializer):
    messages = serializers.BooleanField(default=True)
    mentions = serializers.BooleanField(default=True)
    sound = serializers.BooleanField(default=True)
    emailDigest = serializers.BooleanField(default=False)


class PrivacyPreferencesSerializer(PreferenceSectionSerializer):
    showStatus = serializers.BooleanField(default=True)
    readReceipts = serializers.BooleanField(default=True)
    shareActivity = serializers.BooleanField(default=False)


class LinkedAccountsSerializer(PreferenceSectionSerializer):
    google = serializers.BooleanField(default=False)
    microsoft = serializers.BooleanField(default=False)
    github = serializers.BooleanField(default=False)


PREFERENCE_SERIALIZERS = {
    PreferenceSection.APPEARANCE.value: AppearancePreferencesSerializer,
    PreferenceSection.GENERAL.value: GeneralPreferencesSerializer,
    PreferenceSection.NOTIFICATIONS.value: NotificationPreferencesSerializer,
    PreferenceSection.PRIVACY.value: PrivacyPreferencesSerializer,
    PreferenceSection.ACCOUNTS.value: LinkedAccountsSerializer,
}

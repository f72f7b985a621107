"""
Constants and configuration for the message store and realtime hub.

Limits read their value from Django settings when present so deployments
can tune them through the environment (see config/settings.py).

Import example:
    from chat.constants import MESSAGE_CONFIG, PRESENCE_CONFIG, REALTIME_EVENTS
"""

from typing import Final

from django.conf import settings


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    MAX_CONTENT_LENGTH: Final[int] = getattr(settings, "CHAT_MESSAGE_MAX_LENGTH", 2000)
    MIN_CONTENT_LENGTH: Final[int] = 1

    # listMessages paging
    DEFAULT_LIMIT: Final[int] = getattr(settings, "CHAT_MESSAGES_DEFAULT_LIMIT", 50)
    MAX_LIMIT: Final[int] = getattr(settings, "CHAT_MESSAGES_MAX_LIMIT", 100)


# =============================================================================
# Presence Configuration
# =============================================================================


class PRESENCE_CONFIG:
    """Configuration for presence tracking."""

    # Stale entries expire even if a disconnect was never observed
    PRESENCE_TTL_SECONDS: Final[int] = getattr(settings, "CHAT_PRESENCE_TTL_SECONDS", 86400)

    KEY_PREFIX_USER_PRESENCE: Final[str] = "presence:user"


# =============================================================================
# Realtime Event Names
# =============================================================================


class REALTIME_EVENTS:
    """Event names on the realtime wire, in both directions."""

    # client -> hub
    IDENTIFY: Final[str] = "identify"
    SUBSCRIBE_CHANNEL: Final[str] = "subscribe-channel"
    UNSUBSCRIBE_CHANNEL: Final[str] = "unsubscribe-channel"
    SEND_MESSAGE: Final[str] = "send-message"

    # client -> hub -> room (sender excluded)
    TYPING: Final[str] = "typing"
    STOP_TYPING: Final[str] = "stop-typing"

    # hub -> client
    IDENTIFIED: Final[str] = "identified"
    SUBSCRIBED: Final[str] = "subscribed"
    UNSUBSCRIBED: Final[str] = "unsubscribed"
    ERROR: Final[str] = "error"

    # hub -> room
    MESSAGE_CREATED: Final[str] = "message-created"
    MESSAGE_UPDATED: Final[str] = "message-updated"
    MESSAGE_DELETED: Final[str] = "message-deleted"
    MEETING_CREATED: Final[str] = "meeting-created"
    MEETING_UPDATED: Final[str] = "meeting-updated"
    MEETING_DELETED: Final[str] = "meeting-deleted"


class REVOKE_REASONS:
    """Reasons sent with a server-initiated ``unsubscribed``."""

    LEFT_COMMUNITY: Final[str] = "left-community"
    CHANNEL_DELETED: Final[str] = "channel-deleted"
    COMMUNITY_DELETED: Final[str] = "community-deleted"
    IDENTITY_CHANGED: Final[str] = "identity-changed"

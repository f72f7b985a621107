"""
Serializers for the message store API.

Serializer Hierarchy:
    MessageSerializer: Message with its author resolved
    MessageCreateSerializer: Post a new message
    MessageEditSerializer: Replace a message's content
    MessageListQuerySerializer: limit/skip query parameters
    PresenceSerializer: Online flag of a user

Design Decisions:
    - MessageSerializer is the single message shape: REST responses and
      realtime events are both built from it, so the author fields of a
      broadcast always match what listMessages returns
    - Content length is validated here for 400s and again in the service
      for callers that bypass the API (the realtime hub)
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import PublicUserSerializer
from chat.constants import MESSAGE_CONFIG
from chat.models import Message, MessageType


# =============================================================================
# Message Serializers
# =============================================================================


class MessageSerializer(serializers.ModelSerializer):
    """
    Message with the author identity resolved.

    Fields:
        _id: Message id
        content: Message text
        author: {_id, username, avatar, status}
        channel: Channel id
        type: text, image or file
        isEdited: Whether the author edited the message
        createdAt / updatedAt: ISO 8601 timestamps
    """

    _id = serializers.IntegerField(source="id", read_only=True)
    author = PublicUserSerializer(read_only=True)
    channel = serializers.IntegerField(source="channel_id", read_only=True)
    isEdited = serializers.BooleanField(source="is_edited", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Message
        fields = [
            "_id",
            "content",
            "author",
            "channel",
            "type",
            "isEdited",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """
    Input for posting a message.

    Validates:
        - content: non-empty after trimming, at most 2000 characters
        - type: text, image or file (default text)
    """

    content = serializers.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        error_messages={"blank": "Message content cannot be empty"},
    )
    channelId = serializers.IntegerField(help_text="Channel to post to")
    type = serializers.ChoiceField(choices=MessageType.choices, default=MessageType.TEXT)


class MessageEditSerializer(serializers.Serializer):
    """Input for editing a message."""

    content = serializers.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        error_messages={"blank": "Message content cannot be empty"},
    )


class MessageListQuerySerializer(serializers.Serializer):
    """
    Query parameters of the channel message list.

    Invalid values are not rejected; MessageService.list_messages
    normalises them to the defaults.
    """

    limit = serializers.CharField(required=False, allow_blank=True)
    skip = serializers.CharField(required=False, allow_blank=True)


# =============================================================================
# Presence Serializers
# =============================================================================


class PresenceSerializer(serializers.Serializer):
    """Presence of a single user."""

    userId = serializers.IntegerField()
    online = serializers.BooleanField()

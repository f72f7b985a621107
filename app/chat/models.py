"""
Message store models.

Models:
    Message: A single message posted to a channel

Design Decisions:
    - Channel.messages is the reverse side of Message.channel, so the
      channel's ordered message list and each message's channel can never
      disagree
    - Author and channel are immutable after creation
    - Deletion is a hard delete; per-viewer hiding is a client concern
      (see chat_client.hidden_store) and never touches these rows
    - Deleting a channel deletes its messages (CASCADE)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel


class MessageType(models.TextChoices):
    """
    Kind of message payload.

    TEXT: Plain text content
    IMAGE: Content is an image reference
    FILE: Content is a file reference
    """

    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    FILE = "file", "File"


class Message(BaseModel):
    """
    A message posted to a channel.

    Fields:
        content: Message text, 1-2000 characters after trimming
        author: User who posted the message
        channel: Channel the message belongs to
        type: MessageType value
        is_edited: Set once the author edits the content

    Ordering:
        Oldest first (created_at, id), which is the display order.
    """

    content = models.TextField(
        max_length=2000,
        help_text="Message text (1-2000 characters)",
    )

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="User who posted this message",
    )

    channel = models.ForeignKey(
        "communities.Channel",
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Channel this message belongs to",
    )

    type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
        help_text="Type of message (text, image or file)",
    )

    is_edited = models.BooleanField(
        default=False,
        help_text="Whether the author has edited this message",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["channel", "-created_at", "-id"],
                name="chat_msg_channel_recent_idx",
            ),
            models.Index(
                fields=["author", "-created_at"],
                name="chat_msg_author_idx",
            ),
        ]

    def __str__(self) -> str:
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"User {self.author_id}: {preview}"

    def is_author(self, user) -> bool:
        """Check whether the given user wrote this message."""
        return user is not None and self.author_id == user.pk

"""
Message store and presence service layer.

Services:
    MessageService: Message lifecycle (create, edit, delete, list)
    PresenceService: userId -> realtime connection mapping in the cache

Authorization rules:
    - Posting and reading require membership of the channel's community
    - Editing and deleting are author-only

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return a ServiceResult carrying the error kind
    - Unexpected failures raise exceptions
    - Presence is advisory: cache failures are logged, never raised

Usage:
    from chat.services import MessageService, PresenceService

    result = MessageService.create_message(
        author=user, channel_id=channel.id, content="Hello everyone!"
    )
    if result.success:
        message = result.data

    result = MessageService.list_messages(user, channel.id, limit=50, skip=0)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.core.cache import cache

from chat.constants import MESSAGE_CONFIG, PRESENCE_CONFIG
from chat.models import Message, MessageType
from communities.services import ChannelService
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from authentication.models import User

logger = logging.getLogger(__name__)


def _message_not_found() -> ServiceResult:
    return ServiceResult.from_exception(
        NotFoundError("Message not found", error_code="MESSAGE_NOT_FOUND")
    )


def _clean_content(content) -> tuple[str, ServiceResult | None]:
    """
    Trim and validate message content.

    Returns:
        (trimmed content, None) when valid, else ("", failed ServiceResult)
    """
    content = content.strip() if isinstance(content, str) else ""
    if not content:
        return "", ServiceResult.from_exception(
            ValidationError("Message content cannot be empty", error_code="EMPTY_CONTENT")
        )
    if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
        return "", ServiceResult.from_exception(
            ValidationError(
                f"Message content cannot exceed {MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
                error_code="CONTENT_TOO_LONG",
            )
        )
    return content, None


def _to_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        create_message: Post a message to a channel
        edit_message: Replace the content of own message
        delete_message: Permanently delete own message
        list_messages: Page of a channel's messages, oldest first
    """

    @classmethod
    def create_message(
        cls,
        author: User,
        channel_id: int,
        content: str,
        type: str = MessageType.TEXT,
    ) -> ServiceResult[Message]:
        """
        Post a message to a channel.

        Args:
            author: User posting the message
            channel_id: Target channel
            content: Message text (trimmed before storing)
            type: MessageType value

        Returns:
            ServiceResult with the new Message (author loaded)

        Error codes:
            EMPTY_CONTENT / CONTENT_TOO_LONG: Invalid content (400)
            INVALID_MESSAGE_TYPE: Unknown type (400)
            CHANNEL_NOT_FOUND: Channel does not exist (404)
            NOT_MEMBER: Author is not in the channel's community (403)
        """
        content, failure = _clean_content(content)
        if failure:
            return failure

        type = type or MessageType.TEXT
        if type not in MessageType.values:
            return ServiceResult.from_exception(
                ValidationError(f"Invalid message type: {type}", error_code="INVALID_MESSAGE_TYPE")
            )

        channel_result = ChannelService.get_channel(author, channel_id)
        if not channel_result:
            return channel_result

        message = Message.objects.create(
            content=content,
            author=author,
            channel=channel_result.data,
            type=type,
        )

        cls.get_logger().info(
            f"User {author.id} posted message {message.id} to channel {channel_id}"
        )
        return ServiceResult.success(message)

    @classmethod
    def edit_message(
        cls,
        user: User,
        message_id: int,
        new_content: str,
    ) -> ServiceResult[Message]:
        """
        Replace the content of a message.

        Only the author can edit. On success ``is_edited`` is set and the
        update timestamp moves forward. Concurrent edits are last write wins.

        Error codes:
            EMPTY_CONTENT / CONTENT_TOO_LONG: Invalid content (400)
            MESSAGE_NOT_FOUND: Message does not exist (404)
            NOT_AUTHOR: User is not the message author (403)
        """
        new_content, failure = _clean_content(new_content)
        if failure:
            return failure

        message = Message.objects.select_related("author").filter(pk=message_id).first()
        if message is None:
            return _message_not_found()

        if not message.is_author(user):
            cls.get_logger().warning(
                f"User {user.id} tried to edit message {message.id} of user {message.author_id}"
            )
            return ServiceResult.from_exception(
                PermissionDeniedError(
                    "You can only edit your own messages", error_code="NOT_AUTHOR"
                )
            )

        message.content = new_content
        message.is_edited = True
        message.save(update_fields=["content", "is_edited", "updated_at"])

        cls.get_logger().info(f"User {user.id} edited message {message.id}")
        return ServiceResult.success(message)

    @classmethod
    def delete_message(cls, user: User, message_id: int) -> ServiceResult[dict]:
        """
        Permanently delete a message (author only).

        The message disappears from the channel for every viewer.

        Returns:
            ServiceResult with {"message_id", "channel_id"}

        Error codes:
            MESSAGE_NOT_FOUND: Message does not exist (404)
            NOT_AUTHOR: User is not the message author (403)
        """
        message = Message.objects.filter(pk=message_id).first()
        if message is None:
            return _message_not_found()

        if not message.is_author(user):
            cls.get_logger().warning(
                f"User {user.id} tried to delete message {message.id} of user {message.author_id}"
            )
            return ServiceResult.from_exception(
                PermissionDeniedError(
                    "You can only delete your own messages", error_code="NOT_AUTHOR"
                )
            )

        removed = {"message_id": message.id, "channel_id": message.channel_id}
        message.delete()

        cls.get_logger().info(
            f"User {user.id} deleted message {removed['message_id']} "
            f"from channel {removed['channel_id']}"
        )
        return ServiceResult.success(removed)

    @staticmethod
    def normalize_paging(limit=None, skip=None) -> tuple[int, int]:
        """
        Clamp paging parameters.

        Non-numeric or non-positive limits fall back to the default and
        limits above the maximum are capped. Invalid or negative skips
        become 0.
        """
        limit = _to_int(limit, MESSAGE_CONFIG.DEFAULT_LIMIT)
        if limit <= 0:
            limit = MESSAGE_CONFIG.DEFAULT_LIMIT
        limit = min(limit, MESSAGE_CONFIG.MAX_LIMIT)

        skip = max(_to_int(skip, 0), 0)
        return limit, skip

    @classmethod
    def list_messages(
        cls,
        user: User,
        channel_id: int,
        limit=None,
        skip=None,
    ) -> ServiceResult[list[Message]]:
        """
        A page of a channel's messages in ascending chronological order.

        The page is taken from the newest end: ``skip`` messages are
        skipped counting back from the most recent, then up to ``limit``
        messages are returned oldest first.

        Returns:
            ServiceResult with a list of Messages, NotFoundError or
            PermissionDeniedError for non-members
        """
        channel_result = ChannelService.get_channel(user, channel_id)
        if not channel_result:
            return channel_result

        limit, skip = cls.normalize_paging(limit, skip)
        newest_first = (
            Message.objects.filter(channel_id=channel_id)
            .select_related("author")
            .order_by("-created_at", "-id")[skip : skip + limit]
        )
        return ServiceResult.success(list(reversed(newest_first)))


class PresenceService(BaseService):
    """
    Cache-based presence tracking.

    Each identified realtime connection registers ``userId -> channel name``
    under ``presence:user:<id>``. A newer connection of the same user
    overwrites the entry (last write wins), and a disconnect removes the
    entry only while it still points at the disconnecting connection.

    Design Decisions:
        - Cache-only storage: nothing survives a cache flush, clients
          rebuild presence by identifying again on reconnect
        - TTL-based expiry for connections whose disconnect was never seen
        - Cache failures are logged and reported as offline

    Usage:
        from chat.services import PresenceService

        PresenceService.register_connection(user.id, self.channel_name)
        PresenceService.is_online(user.id)
        PresenceService.unregister_connection(user.id, self.channel_name)
    """

    @staticmethod
    def _user_presence_key(user_id) -> str:
        """Build cache key for user presence."""
        return f"{PRESENCE_CONFIG.KEY_PREFIX_USER_PRESENCE}:{user_id}"

    @classmethod
    def register_connection(cls, user_id, connection_name: str) -> ServiceResult[dict]:
        """
        Record ``connection_name`` as the user's current connection.

        Returns:
            ServiceResult with {"user_id", "connection"}
        """
        try:
            cache.set(
                cls._user_presence_key(user_id),
                connection_name,
                timeout=PRESENCE_CONFIG.PRESENCE_TTL_SECONDS,
            )
        except Exception as e:
            return cls.handle_exception(
                e, f"Error setting presence for user {user_id}", error_code="PRESENCE_ERROR"
            )

        return ServiceResult.success({"user_id": user_id, "connection": connection_name})

    @classmethod
    def unregister_connection(cls, user_id, connection_name: str) -> ServiceResult[bool]:
        """
        Remove the user's mapping if it still points at ``connection_name``.

        The comparison and the delete are two cache calls, not one atomic
        step. A newer connection registering in between can lose its
        mapping; it is restored on that connection's next identify.
        Presence is advisory (it only picks which live connection is
        "current"), so the window is accepted.

        Returns:
            ServiceResult with True when the mapping was removed
        """
        key = cls._user_presence_key(user_id)
        try:
            if cache.get(key) != connection_name:
                return ServiceResult.success(False)
            cache.delete(key)
        except Exception as e:
            return cls.handle_exception(
                e, f"Error clearing presence for user {user_id}", error_code="PRESENCE_ERROR"
            )

        return ServiceResult.success(True)

    @classmethod
    def get_connection(cls, user_id) -> str | None:
        """Channel name of the user's most recent connection, if any."""
        try:
            return cache.get(cls._user_presence_key(user_id))
        except Exception as e:
            logger.exception(f"Error getting presence for user {user_id}: {e}")
            return None

    @classmethod
    def is_online(cls, user_id) -> bool:
        return cls.get_connection(user_id) is not None

    @classmethod
    def get_presence(cls, user_id) -> ServiceResult[dict]:
        """
        Presence of a user.

        Returns:
            ServiceResult with {"userId", "online"}
        """
        return ServiceResult.success({"userId": user_id, "online": cls.is_online(user_id)})

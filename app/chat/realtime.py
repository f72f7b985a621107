"""
Server-side broadcaster for the realtime hub.

Synchronous code (REST views, services called from views) publishes
domain events to a channel room through the channel layer. Every
connection subscribed to the room receives the event as
``{"event": <name>, "data": <payload>}`` (see ChatConsumer.room_event).

Delivery is best effort: a failing channel layer is logged at WARNING
and reported as False, never raised to the caller. Clients recover
missed events by re-fetching persisted state.

Access changes (leaving a community, deleting a channel or community)
are published as ``room.revoke`` control messages: the consumer leaves
the room and tells its client ``unsubscribed`` instead of forwarding.

Usage:
    from chat.realtime import RealtimeBroadcaster

    RealtimeBroadcaster.message_created(message)
    RealtimeBroadcaster.message_deleted(channel_id=5, message_id=42)
    RealtimeBroadcaster.revoke_access([5, 6], reason="left-community", user_id=7)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from chat.constants import REALTIME_EVENTS

if TYPE_CHECKING:
    from chat.models import Message

logger = logging.getLogger(__name__)

# Channel layer message types handled by ChatConsumer.room_event / room_revoke
ROOM_EVENT_TYPE = "room.event"
ROOM_REVOKE_TYPE = "room.revoke"


def channel_group_name(channel_id) -> str:
    """Channel layer group backing the room of a channel."""
    return f"channel_{channel_id}"


def build_room_event(event: str, data: dict[str, Any], sender: str | None = None) -> dict:
    """
    Channel layer message for a room event.

    ``sender`` is the channel name of the originating connection; the
    consumer uses it to skip the sender for typing indicators.
    """
    return {
        "type": ROOM_EVENT_TYPE,
        "event": event,
        "data": data,
        "sender": sender,
    }


def build_room_revoke(channel_id, reason: str, user_id=None) -> dict:
    """
    Channel layer message removing connections from a room.

    With ``user_id`` only that user's connections leave the room;
    without it every connection does.
    """
    return {
        "type": ROOM_REVOKE_TYPE,
        "channelId": channel_id,
        "reason": reason,
        "userId": user_id,
    }


def serialize_message(message: Message) -> dict:
    """Resolved message shape shared by REST responses and room events."""
    from chat.serializers import MessageSerializer

    return dict(MessageSerializer(message).data)


class RealtimeBroadcaster:
    """
    Publishes domain events to channel rooms.

    Methods:
        emit: Publish any event to a channel room
        message_created / message_updated / message_deleted: Message events
        meeting_event: Meeting events for meetings attached to a channel
        revoke_access: Remove connections from rooms they may no longer read
    """

    @classmethod
    def _group_send(cls, channel_id, message: dict, label: str) -> bool:
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.warning(f"No channel layer configured; dropped {label} for channel {channel_id}")
            return False

        try:
            async_to_sync(channel_layer.group_send)(channel_group_name(channel_id), message)
        except Exception as e:
            logger.warning(f"Failed to broadcast {label} to channel {channel_id}: {e}")
            return False

        logger.debug(f"Broadcast {label} to channel {channel_id}")
        return True

    @classmethod
    def emit(cls, channel_id, event: str, data: dict[str, Any]) -> bool:
        """
        Publish an event to the room of ``channel_id``.

        Returns:
            True if the channel layer accepted the event
        """
        return cls._group_send(channel_id, build_room_event(event, data), event)

    @classmethod
    def revoke_access(cls, channel_ids, reason: str, user_id=None) -> int:
        """
        Make subscribed connections leave the rooms of ``channel_ids``.

        Args:
            channel_ids: Rooms to leave
            reason: Sent to the client with ``unsubscribed``
            user_id: Only this user's connections leave; None for everyone

        Returns:
            Number of rooms the channel layer accepted the revoke for
        """
        return sum(
            cls._group_send(
                channel_id,
                build_room_revoke(channel_id, reason, user_id=user_id),
                f"revoke ({reason})",
            )
            for channel_id in channel_ids
        )

    @classmethod
    def message_created(cls, message: Message, payload: dict | None = None) -> bool:
        payload = payload or serialize_message(message)
        return cls.emit(
            message.channel_id,
            REALTIME_EVENTS.MESSAGE_CREATED,
            {"channelId": message.channel_id, "message": payload},
        )

    @classmethod
    def message_updated(cls, message: Message, payload: dict | None = None) -> bool:
        payload = payload or serialize_message(message)
        return cls.emit(
            message.channel_id,
            REALTIME_EVENTS.MESSAGE_UPDATED,
            {"channelId": message.channel_id, "message": payload},
        )

    @classmethod
    def message_deleted(cls, channel_id, message_id) -> bool:
        return cls.emit(
            channel_id,
            REALTIME_EVENTS.MESSAGE_DELETED,
            {"channelId": channel_id, "messageId": message_id},
        )

    @classmethod
    def meeting_event(cls, event: str, channel_id, data: dict[str, Any]) -> bool:
        """
        Publish a meeting event to the room of the meeting's channel.

        Meetings without a channel have no room; nothing is sent.
        """
        if channel_id is None:
            return False
        return cls.emit(channel_id, event, {"channelId": channel_id, **data})

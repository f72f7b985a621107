"""
WebSocket consumer for the realtime hub.

This module implements the hub that relays message, typing and meeting
events to the clients subscribed to a channel room.

Consumers:
    ChatConsumer: One connection per client, subscribed to any number of rooms

Connection states:
    connected (anonymous) -> identified(userId) -> subscribed to 0..n rooms
    -> disconnected (presence entry removed)

Authentication:
    JWTAuthMiddleware verifies the handshake token and puts the user in
    self.scope["user"]. The connection only becomes identified when the
    client sends ``identify`` with a userId matching a verified credential
    (the handshake token or a token inside the identify payload).

Channel Groups:
    Each channel has a group named "channel_{channel_id}" (see
    chat.realtime.channel_group_name). Server-side code publishes to it
    through RealtimeBroadcaster.

Frames (both directions):
    {"event": "<name>", "data": <payload>}

Events (from client):
    - identify: userId or {userId, token}
    - subscribe-channel / unsubscribe-channel: channelId or {channelId}
    - typing: {channelId, username}
    - stop-typing: {channelId}
    - send-message: {channelId, content, type}

Events (to client):
    - identified: {userId}
    - subscribed / unsubscribed: {channelId}; server-initiated unsubscribed
      (left community, channel or community deleted, identity changed) also
      carries {reason}
    - message-created / message-updated: {channelId, message}
    - message-deleted: {channelId, messageId}
    - typing / stop-typing: {channelId, username} (never echoed to the sender)
    - meeting-created / meeting-updated / meeting-deleted
    - error: {message, code}
"""

from __future__ import annotations

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from chat.constants import REALTIME_EVENTS, REVOKE_REASONS
from chat.realtime import build_room_event, channel_group_name, serialize_message
from chat.services import MessageService, PresenceService
from communities.services import ChannelService

logger = logging.getLogger(__name__)

# Events relayed to every subscriber except the connection that sent them
SENDER_EXCLUDED_EVENTS = frozenset({REALTIME_EVENTS.TYPING, REALTIME_EVENTS.STOP_TYPING})


def _channel_id_from(payload) -> int | None:
    """Accept ``5``, ``"5"`` or ``{"channelId": 5}``."""
    if isinstance(payload, dict):
        payload = payload.get("channelId")
    if isinstance(payload, bool):
        return None
    try:
        return int(payload)
    except (TypeError, ValueError):
        return None


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for the realtime hub.

    Handles:
        - Identity announcement, verified against the credential
        - Joining/leaving channel rooms (idempotent)
        - Typing indicators relayed to the rest of the room
        - Posting messages through MessageService
        - Presence registration and cleanup

    Attributes:
        user: Identified user (None while anonymous)
        subscribed_channels: Ids of the rooms this connection joined
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = None
        self.subscribed_channels: set[int] = set()

    @property
    def is_identified(self) -> bool:
        return self.user is not None

    async def connect(self):
        """
        Accept every connection as anonymous.

        When the token came as a subprotocol, "jwt" is echoed back as the
        selected subprotocol.
        """
        subprotocols = self.scope.get("subprotocols") or []
        if subprotocols and subprotocols[0] == "jwt":
            await self.accept(subprotocol="jwt")
        else:
            await self.accept()
        logger.debug(f"Connection {self.channel_name} opened")

    async def disconnect(self, close_code):
        """Leave every room and drop the presence entry of this connection."""
        await self._leave_all_rooms()

        if self.user is not None:
            await database_sync_to_async(PresenceService.unregister_connection)(
                self.user.id, self.channel_name
            )
            logger.info(f"User {self.user.id} disconnected ({close_code})")

    @classmethod
    async def decode_json(cls, text_data):
        try:
            return json.loads(text_data)
        except ValueError:
            return None

    async def receive_json(self, content, **kwargs):
        """
        Dispatch an incoming frame by its event name.

        Args:
            content: Parsed JSON frame from client
        """
        if not isinstance(content, dict) or not isinstance(content.get("event"), str):
            await self.send_error("Malformed frame", "INVALID_FRAME")
            return

        event = content["event"]
        data = content.get("data")
        handlers = {
            REALTIME_EVENTS.IDENTIFY: self._handle_identify,
            REALTIME_EVENTS.SUBSCRIBE_CHANNEL: self._handle_subscribe,
            REALTIME_EVENTS.UNSUBSCRIBE_CHANNEL: self._handle_unsubscribe,
            REALTIME_EVENTS.TYPING: self._handle_typing,
            REALTIME_EVENTS.STOP_TYPING: self._handle_typing,
            REALTIME_EVENTS.SEND_MESSAGE: self._handle_send_message,
        }
        handler = handlers.get(event)
        if handler is None:
            await self.send_error(f"Unknown event: {event}", "UNKNOWN_EVENT")
            return

        if event != REALTIME_EVENTS.IDENTIFY and not self.is_identified:
            await self.send_error("Identify before sending events", "NOT_IDENTIFIED")
            return

        await handler(event, data)

    # -------------------------------------------------------------------------
    # Client events
    # -------------------------------------------------------------------------

    async def _handle_identify(self, event, data):
        """
        Bind the connection to a verified user.

        The announced userId must equal the id behind the credential;
        anything else leaves the connection anonymous.
        """
        token = None
        announced = data
        if isinstance(data, dict):
            announced = data.get("userId")
            token = data.get("token")

        if token:
            result = await database_sync_to_async(self._verify_token)(token)
            if not result:
                logger.warning(f"Identify rejected on {self.channel_name}: {result.error_code}")
                await self.send_error(result.error, result.error_code)
                return
            verified = result.data
        else:
            verified = self.scope.get("user")
            if verified is None or not verified.is_authenticated:
                logger.warning(f"Identify without credential on {self.channel_name}")
                await self.send_error("Authentication required", "UNAUTHENTICATED")
                return

        if announced is None or str(announced) != str(verified.id):
            logger.warning(
                f"Identify mismatch on {self.channel_name}: announced {announced}, "
                f"credential belongs to user {verified.id}"
            )
            await self.send_error("Identity does not match credential", "IDENTITY_MISMATCH")
            return

        if self.user is not None and self.user.id != verified.id:
            # Rooms were authorized for the previous user
            for channel_id in await self._leave_all_rooms():
                await self.send_event(
                    REALTIME_EVENTS.UNSUBSCRIBED,
                    {"channelId": channel_id, "reason": REVOKE_REASONS.IDENTITY_CHANGED},
                )
            await database_sync_to_async(PresenceService.unregister_connection)(
                self.user.id, self.channel_name
            )

        self.user = verified
        await database_sync_to_async(PresenceService.register_connection)(
            verified.id, self.channel_name
        )
        logger.info(f"User {verified.id} identified on {self.channel_name}")
        await self.send_event(REALTIME_EVENTS.IDENTIFIED, {"userId": verified.id})

    async def _handle_subscribe(self, event, data):
        channel_id = _channel_id_from(data)
        if channel_id is None:
            await self.send_error("channelId is required", "INVALID_CHANNEL_ID")
            return

        result = await database_sync_to_async(ChannelService.get_channel)(self.user, channel_id)
        if not result:
            logger.warning(
                f"User {self.user.id} denied subscription to channel {channel_id}: "
                f"{result.error_code}"
            )
            await self.send_error(result.error, result.error_code)
            return

        if channel_id not in self.subscribed_channels:
            await self.channel_layer.group_add(
                channel_group_name(channel_id),
                self.channel_name,
            )
            self.subscribed_channels.add(channel_id)
        await self.send_event(REALTIME_EVENTS.SUBSCRIBED, {"channelId": channel_id})

    async def _handle_unsubscribe(self, event, data):
        channel_id = _channel_id_from(data)
        if channel_id is None:
            await self.send_error("channelId is required", "INVALID_CHANNEL_ID")
            return

        await self._leave_room(channel_id)
        await self.send_event(REALTIME_EVENTS.UNSUBSCRIBED, {"channelId": channel_id})

    async def _handle_typing(self, event, data):
        """
        Relay typing / stop-typing to the rest of the room.

        The hub does not time typing out; clients send stop-typing.
        """
        channel_id = _channel_id_from(data)
        if channel_id not in self.subscribed_channels:
            await self.send_error("Subscribe to the channel first", "NOT_SUBSCRIBED")
            return

        payload = {"channelId": channel_id, "username": self.user.username}
        await self._relay(channel_id, build_room_event(event, payload, sender=self.channel_name))

    async def _handle_send_message(self, event, data):
        """
        Persist a message and broadcast message-created to its room.

        The sender's own connections receive the event as well. If the room
        cannot be reached the sender still gets its message-created.
        """
        data = data if isinstance(data, dict) else {}
        channel_id = _channel_id_from(data)
        if channel_id is None:
            await self.send_error("channelId is required", "INVALID_CHANNEL_ID")
            return

        result = await self._create_message(
            channel_id=channel_id,
            content=data.get("content"),
            type=data.get("type"),
        )
        if not result["success"]:
            await self.send_error(result["error"], result["error_code"])
            return

        payload = {"channelId": channel_id, "message": result["data"]}
        relayed = await self._relay(
            channel_id, build_room_event(REALTIME_EVENTS.MESSAGE_CREATED, payload)
        )
        if not relayed:
            await self.send_event(REALTIME_EVENTS.MESSAGE_CREATED, payload)

    # -------------------------------------------------------------------------
    # Channel layer events
    # -------------------------------------------------------------------------

    async def room_event(self, event):
        """
        Handle room.event messages from the channel layer.

        Forwards the event to the client, except typing indicators
        which are not echoed to the connection that sent them.
        """
        if event["event"] in SENDER_EXCLUDED_EVENTS and event.get("sender") == self.channel_name:
            return
        await self.send_event(event["event"], event["data"])

    async def room_revoke(self, event):
        """
        Handle room.revoke messages from the channel layer.

        Leaves the room and tells the client why, when the revoke targets
        every connection or the identified user of this one.
        """
        user_id = event.get("userId")
        if user_id is not None and (self.user is None or self.user.id != user_id):
            return

        channel_id = event["channelId"]
        if not await self._leave_room(channel_id):
            return
        logger.info(
            f"Connection {self.channel_name} removed from channel {channel_id}: {event['reason']}"
        )
        await self.send_event(
            REALTIME_EVENTS.UNSUBSCRIBED,
            {"channelId": channel_id, "reason": event["reason"]},
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _relay(self, channel_id: int, message: dict) -> bool:
        """Send to a room; delivery failures are logged, never raised."""
        try:
            await self.channel_layer.group_send(channel_group_name(channel_id), message)
        except Exception as e:
            logger.warning(f"Failed to relay {message['event']} to channel {channel_id}: {e}")
            return False
        return True

    async def _leave_room(self, channel_id: int) -> bool:
        if channel_id not in self.subscribed_channels:
            return False
        self.subscribed_channels.discard(channel_id)
        await self.channel_layer.group_discard(channel_group_name(channel_id), self.channel_name)
        return True

    async def _leave_all_rooms(self) -> list[int]:
        left = sorted(self.subscribed_channels)
        for channel_id in left:
            await self._leave_room(channel_id)
        return left

    async def send_event(self, event: str, data):
        await self.send_json({"event": event, "data": data})

    async def send_error(self, message: str, code: str | None):
        """Report protocol misuse to this connection only."""
        await self.send_event(REALTIME_EVENTS.ERROR, {"message": message, "code": code})

    @staticmethod
    def _verify_token(token):
        from authentication.services import IdentityService

        return IdentityService.verify_token(token)

    @database_sync_to_async
    def _create_message(self, channel_id: int, content, type) -> dict:
        """
        Create a message using MessageService.

        Returns dict with success status and either data or error.
        """
        result = MessageService.create_message(
            author=self.user,
            channel_id=channel_id,
            content=content,
            type=type,
        )
        if result.success:
            return {"success": True, "data": serialize_message(result.data)}
        return {
            "success": False,
            "error": result.error,
            "error_code": result.error_code,
        }

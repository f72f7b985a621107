"""
Websocket client for the realtime hub.

Connection policy:
    - Connecting retries with a fixed delay (RECONNECT_DELAY_SECONDS)
      up to MAX_CONNECT_ATTEMPTS attempts; after that the client is
      OFFLINE until reconnect() is called
    - A dropped connection is re-established with the same policy
    - Every (re)connection re-sends identify and re-subscribes to every
      channel subscribed so far, since the hub keeps no state across
      connections
    - Typing sends "typing" and, unless typing continues, "stop-typing"
      after TYPING_IDLE_SECONDS
    - A channel the hub unsubscribes the client from (with a reason) is
      dropped from the subscriptions
    - A failing listener is logged; the other listeners and the
      connection keep running

Events are fire-and-forget: anything missed while disconnected is
recovered by re-fetching the channel snapshot.

Usage:
    client = RealtimeClient("wss://chat.example.com/ws/chat/", token, user_id)
    client.add_listener(timeline.apply)
    await client.connect()
    await client.subscribe(channel_id)
"""

from __future__ import annotations

import asyncio
import enum
import json
import logging
from typing import Any, Callable
from urllib.parse import urlencode

import websockets
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)
from websockets.exceptions import ConnectionClosed, WebSocketException

from chat_client import events

logger = logging.getLogger(__name__)

Listener = Callable[[str, Any], Any]


class ConnectionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    OFFLINE = "offline"


class RealtimeClient:
    """
    Client side of the realtime hub protocol.

    Args:
        url: Hub endpoint, e.g. "wss://chat.example.com/ws/chat/"
        token: Access token; sent on the handshake and with identify
        user_id: Id of the signed-in user announced with identify
        reconnect_delay: Seconds between connection attempts
        max_attempts: Connection attempts before going offline
        connect: Coroutine function opening the socket (websockets.connect)
    """

    RECONNECT_DELAY_SECONDS = 1.0
    MAX_CONNECT_ATTEMPTS = 5
    TYPING_IDLE_SECONDS = 2.0

    def __init__(
        self,
        url: str,
        token: str,
        user_id: int,
        reconnect_delay: float = RECONNECT_DELAY_SECONDS,
        max_attempts: int = MAX_CONNECT_ATTEMPTS,
        typing_idle: float = TYPING_IDLE_SECONDS,
        connect=websockets.connect,
    ) -> None:
        self.url = url
        self.token = token
        self.user_id = user_id
        self.reconnect_delay = reconnect_delay
        self.max_attempts = max_attempts
        self.typing_idle = typing_idle
        self.state = ConnectionState.DISCONNECTED
        self.subscriptions: set[int] = set()
        self._connect = connect
        self._ws = None
        self._reader: asyncio.Task | None = None
        self._typing_timers: dict[int, asyncio.Task] = {}
        self._listeners: list[Listener] = []

    @property
    def connection_url(self) -> str:
        return f"{self.url}?{urlencode({'token': self.token})}"

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def add_listener(self, listener: Listener) -> None:
        """Register a callable receiving (event, data) for every hub frame."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -------------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------------

    async def connect(self) -> bool:
        """
        Open the connection, identify and restore subscriptions.

        Returns:
            True when connected; False when every attempt failed and the
            client is now OFFLINE
        """
        self.state = ConnectionState.CONNECTING
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.reconnect_delay),
            retry=retry_if_exception_type((OSError, WebSocketException, asyncio.TimeoutError)),
        )

        try:
            async for attempt in retrying:
                with attempt:
                    self._ws = await self._connect(self.connection_url)
        except RetryError as e:
            self.state = ConnectionState.OFFLINE
            logger.warning(
                f"Realtime hub unreachable after {self.max_attempts} attempts: "
                f"{e.last_attempt.exception()}"
            )
            return False

        self.state = ConnectionState.CONNECTED
        logger.info(f"Connected to realtime hub as user {self.user_id}")

        await self._send(events.IDENTIFY, {"userId": self.user_id, "token": self.token})
        for channel_id in sorted(self.subscriptions):
            await self._send(events.SUBSCRIBE_CHANNEL, channel_id)

        self._reader = asyncio.create_task(self._read_loop(self._ws))
        return True

    async def reconnect(self) -> bool:
        """Manual reconnect, the way out of the OFFLINE state."""
        await self._close_socket()
        return await self.connect()

    async def close(self) -> None:
        """Close the connection for good; no reconnect is attempted."""
        self.state = ConnectionState.DISCONNECTED
        for timer in self._typing_timers.values():
            timer.cancel()
        self._typing_timers.clear()
        if self._reader is not None and self._reader is not asyncio.current_task():
            self._reader.cancel()
        self._reader = None
        await self._close_socket()

    async def _close_socket(self) -> None:
        ws, self._ws = self._ws, None
        if ws is not None:
            try:
                await ws.close()
            except WebSocketException as e:
                logger.debug(f"Error closing realtime socket: {e}")

    async def _read_loop(self, ws) -> None:
        try:
            async for raw in ws:
                self._dispatch(raw)
        except ConnectionClosed as e:
            logger.debug(f"Realtime socket closed: {e}")

        if ws is self._ws and self.state is ConnectionState.CONNECTED:
            logger.info("Realtime connection lost; reconnecting")
            self._ws = None
            await self.connect()

    def _dispatch(self, raw) -> None:
        try:
            frame = json.loads(raw)
            event, data = frame["event"], frame.get("data")
        except (ValueError, TypeError, KeyError, AttributeError):
            logger.warning(f"Ignoring malformed realtime frame: {raw!r}")
            return

        if event == events.ERROR:
            logger.warning(f"Realtime hub error: {data}")
        elif event == events.UNSUBSCRIBED and isinstance(data, dict) and data.get("reason"):
            # Removed by the hub; do not restore the room on reconnect
            logger.info(f"Removed from channel {data.get('channelId')}: {data['reason']}")
            self.subscriptions.discard(data.get("channelId"))
            self._cancel_typing_timer(data.get("channelId"))

        for listener in list(self._listeners):
            try:
                listener(event, data)
            except Exception:
                logger.exception(f"Realtime listener {listener!r} failed on {event}")

    async def _send(self, event: str, data: Any) -> bool:
        if self._ws is None or not self.is_connected:
            logger.debug(f"Not connected; dropped {event}")
            return False
        try:
            await self._ws.send(json.dumps({"event": event, "data": data}))
        except ConnectionClosed as e:
            logger.warning(f"Failed to send {event}: {e}")
            return False
        return True

    # -------------------------------------------------------------------------
    # Protocol
    # -------------------------------------------------------------------------

    async def subscribe(self, channel_id: int) -> bool:
        self.subscriptions.add(channel_id)
        return await self._send(events.SUBSCRIBE_CHANNEL, channel_id)

    async def unsubscribe(self, channel_id: int) -> bool:
        self.subscriptions.discard(channel_id)
        self._cancel_typing_timer(channel_id)
        return await self._send(events.UNSUBSCRIBE_CHANNEL, channel_id)

    async def send_message(self, channel_id: int, content: str, type: str = "text") -> bool:
        return await self._send(
            events.SEND_MESSAGE, {"channelId": channel_id, "content": content, "type": type}
        )

    async def typing(self, channel_id: int) -> bool:
        """Announce typing and restart the idle timer that sends stop-typing."""
        self._cancel_typing_timer(channel_id)
        sent = await self._send(events.TYPING, {"channelId": channel_id})
        self._typing_timers[channel_id] = asyncio.create_task(self._stop_after_idle(channel_id))
        return sent

    async def stop_typing(self, channel_id: int) -> bool:
        self._cancel_typing_timer(channel_id)
        return await self._send(events.STOP_TYPING, {"channelId": channel_id})

    async def _stop_after_idle(self, channel_id: int) -> None:
        await asyncio.sleep(self.typing_idle)
        self._typing_timers.pop(channel_id, None)
        await self._send(events.STOP_TYPING, {"channelId": channel_id})

    def _cancel_typing_timer(self, channel_id: int) -> None:
        timer = self._typing_timers.pop(channel_id, None)
        if timer is not None and timer is not asyncio.current_task():
            timer.cancel()

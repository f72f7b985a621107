"""
In-memory view of one channel.

ChannelTimeline merges the fetched snapshot with realtime events:

    message-created  appended unless the id is already present or hidden
    message-updated  replaced in place, keeping its position
    message-deleted  removed (the hidden set is left untouched)
    typing           username shown as typing for TYPING_TIMEOUT_SECONDS
    stop-typing      username removed from the typing list

Events for other channels, and events missing their message or id, are
ignored.
"""

from __future__ import annotations

import time
from typing import Any

from chat_client import events

TYPING_TIMEOUT_SECONDS = 2.0


def message_id(message: dict[str, Any]):
    return message.get("_id")


class ChannelTimeline:
    """
    Ordered, de-duplicated messages of a channel.

    Args:
        channel_id: Channel this timeline renders
        clock: Monotonic time source (seconds)
    """

    def __init__(self, channel_id: int, clock=time.monotonic) -> None:
        self.channel_id = channel_id
        self.messages: list[dict[str, Any]] = []
        self.hidden_ids: set = set()
        self._clock = clock
        self._typing: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self.messages)

    def __contains__(self, msg_id) -> bool:
        return self._index_of(msg_id) is not None

    def _index_of(self, msg_id) -> int | None:
        for index, message in enumerate(self.messages):
            if message_id(message) == msg_id:
                return index
        return None

    @property
    def ids(self) -> list:
        return [message_id(message) for message in self.messages]

    def load(self, snapshot: list[dict[str, Any]], hidden_ids=()) -> None:
        """Replace the view with a fetched snapshot minus hidden ids."""
        self.hidden_ids = set(hidden_ids)
        self.messages = []
        for message in snapshot:
            if message_id(message) not in self.hidden_ids and message_id(message) not in self:
                self.messages.append(message)

    def add(self, message: dict[str, Any]) -> bool:
        """Append a message unless it is already shown or hidden."""
        msg_id = message_id(message)
        if msg_id in self.hidden_ids or msg_id in self:
            return False
        self.messages.append(message)
        return True

    def replace(self, message: dict[str, Any]) -> bool:
        index = self._index_of(message_id(message))
        if index is None:
            return False
        self.messages[index] = message
        return True

    def remove(self, msg_id) -> bool:
        index = self._index_of(msg_id)
        if index is None:
            return False
        del self.messages[index]
        return True

    def hide(self, msg_id) -> None:
        self.hidden_ids.add(msg_id)
        self.remove(msg_id)

    def get(self, msg_id) -> dict[str, Any] | None:
        index = self._index_of(msg_id)
        return None if index is None else self.messages[index]

    def apply(self, event: str, data: dict[str, Any]) -> bool:
        """
        Apply a realtime event.

        Returns:
            True if the rendered state changed
        """
        if not isinstance(data, dict) or data.get("channelId") != self.channel_id:
            return False

        if event in (events.MESSAGE_CREATED, events.MESSAGE_UPDATED):
            message = data.get("message")
            if not isinstance(message, dict) or message_id(message) is None:
                return False
            if event == events.MESSAGE_CREATED:
                return self.add(message)
            return self.replace(message)
        if event == events.MESSAGE_DELETED:
            return self.remove(data.get("messageId"))
        if event == events.TYPING:
            username = data.get("username")
            if not username:
                return False
            self._typing[username] = self._clock() + TYPING_TIMEOUT_SECONDS
            return True
        if event == events.STOP_TYPING:
            return self._typing.pop(data.get("username"), None) is not None
        return False

    def typing_users(self) -> list[str]:
        """Usernames that typed within the last TYPING_TIMEOUT_SECONDS."""
        now = self._clock()
        self._typing = {name: expires for name, expires in self._typing.items() if expires > now}
        return sorted(self._typing)

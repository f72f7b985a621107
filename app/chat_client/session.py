"""
One user's view of one channel.

ChannelSession combines the REST client, the local hidden store and a
ChannelTimeline:

    open()                 fetch the snapshot, drop locally hidden ids
    handle_event()         apply realtime events (listener for RealtimeClient)
    send() / edit()        authoritative writes, reflected immediately
    delete_for_me()        local hide only; the server is never told
    delete_for_everyone()  authoritative delete of the user's own messages

Server-side deletes and local hides are independent: a message is
rendered only if it still exists on the server and is not hidden.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from chat_client.timeline import ChannelTimeline
from core.exceptions import BaseApplicationError, NotFoundError

if TYPE_CHECKING:
    from chat_client.api import ChatApiClient
    from chat_client.hidden_store import HiddenMessageStore
    from chat_client.realtime import RealtimeClient

logger = logging.getLogger(__name__)


@dataclass
class BulkDeleteResult:
    """
    Outcome of delete_for_everyone.

    Attributes:
        deleted: Ids gone from the server, including ones already deleted
        failed: Ids the server did not delete, with the error it reported
    """

    deleted: list[int] = field(default_factory=list)
    failed: dict[int, BaseApplicationError] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return not self.failed


class ChannelSession:
    """
    Client-side state of a channel for the signed-in user.

    Args:
        api: REST client authenticated as ``user_id``
        store: Hidden message store on this device
        user_id: Signed-in user
        channel_id: Channel being viewed
    """

    def __init__(
        self,
        api: ChatApiClient,
        store: HiddenMessageStore,
        user_id: int,
        channel_id: int,
    ) -> None:
        self.api = api
        self.store = store
        self.user_id = user_id
        self.channel_id = channel_id
        self.timeline = ChannelTimeline(channel_id)

    @property
    def messages(self) -> list[dict[str, Any]]:
        return self.timeline.messages

    def open(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Fetch the latest messages and render them minus hidden ids."""
        snapshot = self.api.list_messages(self.channel_id, limit=limit)
        self.timeline.load(snapshot, self.store.get(self.user_id, self.channel_id))
        return self.messages

    async def attach(self, realtime: RealtimeClient) -> bool:
        """Receive live events for this channel from ``realtime``."""
        realtime.add_listener(self.handle_event)
        return await realtime.subscribe(self.channel_id)

    async def detach(self, realtime: RealtimeClient) -> bool:
        realtime.remove_listener(self.handle_event)
        return await realtime.unsubscribe(self.channel_id)

    def handle_event(self, event: str, data: Any) -> bool:
        return self.timeline.apply(event, data)

    def send(self, content: str, type: str = "text") -> dict[str, Any]:
        message = self.api.send_message(self.channel_id, content, type=type)
        # The server also relays message-created; the timeline drops the echo.
        self.timeline.add(message)
        return message

    def edit(self, message_id: int, content: str) -> dict[str, Any]:
        message = self.api.edit_message(message_id, content)
        self.timeline.replace(message)
        return message

    def delete_for_me(self, message_id: int) -> None:
        """
        Hide a message for the signed-in user on this device.

        Raises:
            ValidationError: IDENTITY_REQUIRED when no user is signed in
        """
        self.store.hide(self.user_id, self.channel_id, message_id)
        self.timeline.hide(message_id)

    def is_own(self, message_id: int) -> bool:
        message = self.timeline.get(message_id)
        if message is None:
            return False
        author = message.get("author") or {}
        return author.get("_id") == self.user_id

    def delete_for_everyone(self, message_ids: Iterable[int]) -> BulkDeleteResult:
        """
        Delete the user's own messages among ``message_ids`` on the server.

        Messages by other authors are skipped before any request is sent.
        A message the server no longer has counts as deleted. Any other
        failure is recorded and the remaining ids are still attempted.
        The server relays message-deleted to the channel room.

        Returns:
            BulkDeleteResult with the deleted and the failed ids
        """
        result = BulkDeleteResult()
        for message_id in message_ids:
            if not self.is_own(message_id):
                logger.debug(f"Skipping delete of message {message_id}: not the author")
                continue
            try:
                self.api.delete_message(message_id)
            except NotFoundError:
                logger.info(f"Message {message_id} was already deleted")
            except BaseApplicationError as e:
                logger.warning(f"Failed to delete message {message_id}: {e}")
                result.failed[message_id] = e
                continue
            self.timeline.remove(message_id)
            result.deleted.append(message_id)
        return result

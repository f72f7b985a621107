"""
Client sync layer for ConverseX.

Reconciles the message snapshot fetched over HTTP with the live event
stream of the realtime hub into one ordered, de-duplicated view per
channel, and keeps the per-user "delete for me" state on the client.

Modules:
    api: ChatApiClient, HTTP client for the REST API
    realtime: RealtimeClient, websocket client with bounded reconnect
    timeline: ChannelTimeline, in-memory ordered view of a channel
    hidden_store: HiddenMessageStore, locally hidden message ids
    session: ChannelSession, ties the pieces together for one channel
"""

from chat_client.api import ChatApiClient
from chat_client.hidden_store import HiddenMessageStore
from chat_client.realtime import ConnectionState, RealtimeClient
from chat_client.session import BulkDeleteResult, ChannelSession
from chat_client.timeline import ChannelTimeline

__all__ = [
    "BulkDeleteResult",
    "ChannelSession",
    "ChannelTimeline",
    "ChatApiClient",
    "ConnectionState",
    "HiddenMessageStore",
    "RealtimeClient",
]

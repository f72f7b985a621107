"""
Chat app for channel messaging and realtime fan-out.

This app handles:
- Messages posted to community channels
- WebSocket realtime updates (message, typing and meeting events)
- User presence

Related apps:
    - communities: Channels and membership checks
    - authentication: Identity verification for websocket connections
    - meetings: Meeting events relayed to channel rooms

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for the hub and routing.py for its URL.

Usage:
    from chat.services import MessageService

    result = MessageService.create_message(
        author=user,
        channel_id=channel.id,
        content="Hello!",
    )
"""

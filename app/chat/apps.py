"""
Chat application configuration.

This app provides:
- The message store (post, edit, delete, list messages in a channel)
- The realtime hub (websocket consumer, channel rooms, typing relay)
- Presence tracking in the cache
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"

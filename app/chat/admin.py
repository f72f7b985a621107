"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Message moderation
"""

from django.contrib import admin

from chat.models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin for channel messages."""

    list_display = ["id", "author", "channel", "type", "is_edited", "created_at"]
    list_filter = ["type", "is_edited", "created_at"]
    search_fields = ["content", "author__username", "author__email"]
    raw_id_fields = ["author", "channel"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["-created_at"]

"""Meetings application configuration."""

from django.apps import AppConfig


class MeetingsConfig(AppConfig):
    """Configuration for the meetings application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "meetings"
    verbose_name = "Meetings"

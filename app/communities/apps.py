"""
Communities application configuration.

This app provides the channel/community directory:
- Communities with an owner and members
- Channels within a community
- Integrity audit of directory references
"""

from django.apps import AppConfig


class CommunitiesConfig(AppConfig):
    """Configuration for the communities application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "communities"
    verbose_name = "Communities"

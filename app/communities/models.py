"""
Channel/community directory models.

Models:
    Community: Top-level group container owning channels and members
    Membership: A user's membership of a community (through model)
    Channel: Sub-room of a community holding an ordered message stream

Design Decisions:
    - Each cross-entity reference has a single backing row:
        Community.members  <-> User.communities   (Membership rows)
        Community.channels <-> Channel.community  (Channel.community FK)
      so the two sides can never disagree.
    - The owner is always a member; CommunityService adds the owner's
      membership in the same transaction that creates the community and
      DirectoryAuditService repairs communities where it went missing.
    - Owner and community of a channel are immutable after creation.
    - Deleting a community cascades to its channels (and through them to
      messages) and to its memberships.
"""

from django.conf import settings
from django.db import models

from core.models import BaseModel

DEFAULT_COMMUNITY_ICON = "🌐"
DEFAULT_CHANNEL_NAME = "general"
DEFAULT_CHANNEL_DESCRIPTION = "General discussion"


class ChannelType(models.TextChoices):
    """
    Kind of channel.

    TEXT: Ordered text message stream
    VOICE: Voice room
    VIDEO: Video room
    """

    TEXT = "text", "Text"
    VOICE = "voice", "Voice"
    VIDEO = "video", "Video"


class Community(BaseModel):
    """
    A community of users containing channels.

    Fields:
        name: Display name (3-50 characters)
        description: Optional description (up to 500 characters)
        icon: Emoji or image path shown in the sidebar
        owner: The single owning user, always a member
        is_public: Whether anyone may join without an invitation

    Relationships:
        members: Users belonging to the community (through Membership)
        channels: Channels of the community, in creation order
        meetings: Meetings scheduled in the community
    """

    name = models.CharField(
        max_length=50,
        help_text="Community name (3-50 characters)",
    )

    description = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Optional community description",
    )

    icon = models.CharField(
        max_length=100,
        default=DEFAULT_COMMUNITY_ICON,
        help_text="Emoji or image path used as the community icon",
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="owned_communities",
        help_text="User who owns this community",
    )

    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="Membership",
        related_name="communities",
        help_text="Users who belong to this community",
    )

    is_public = models.BooleanField(
        default=True,
        help_text="Whether users can join without an invitation",
    )

    class Meta:
        db_table = "communities_community"
        ordering = ["-created_at"]
        verbose_name_plural = "communities"
        indexes = [
            models.Index(fields=["owner", "-created_at"], name="comm_owner_created_idx"),
        ]

    def __str__(self) -> str:
        return self.name

    def is_owner(self, user) -> bool:
        """Check whether the given user owns this community."""
        return user is not None and self.owner_id == user.pk

    def has_member(self, user) -> bool:
        """Check whether the given user is a member (the owner always is)."""
        if user is None or not user.is_authenticated:
            return False
        return self.memberships.filter(user_id=user.pk).exists()


class Membership(BaseModel):
    """
    A user's membership of a community.

    Constraints:
        - UniqueConstraint(user, community): a member appears once
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="memberships",
        help_text="Member",
    )

    community = models.ForeignKey(
        Community,
        on_delete=models.CASCADE,
        related_name="memberships",
        help_text="Community the user belongs to",
    )

    class Meta:
        db_table = "communities_membership"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "community"],
                name="unique_community_membership",
            ),
        ]

    def __str__(self) -> str:
        return f"Membership: {self.user_id} in {self.community_id}"


class Channel(BaseModel):
    """
    A channel within a community.

    Fields:
        name: Channel name (1-50 characters)
        description: Optional description (up to 200 characters)
        type: ChannelType value
        community: Owning community (immutable)

    Relationships:
        messages: Messages posted in the channel, oldest first
    """

    name = models.CharField(
        max_length=50,
        help_text="Channel name",
    )

    description = models.CharField(
        max_length=200,
        blank=True,
        default="",
        help_text="Optional channel description",
    )

    type = models.CharField(
        max_length=10,
        choices=ChannelType.choices,
        default=ChannelType.TEXT,
        help_text="Kind of channel (text, voice or video)",
    )

    community = models.ForeignKey(
        Community,
        on_delete=models.CASCADE,
        related_name="channels",
        help_text="Community this channel belongs to",
    )

    class Meta:
        db_table = "communities_channel"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["community", "created_at"], name="chan_comm_created_idx"),
        ]

    def __str__(self) -> str:
        return f"#{self.name}"

"""
Channel/community directory service layer.

Services:
    CommunityService: Community lifecycle and membership
    ChannelService: Channel lifecycle and access checks
    DirectoryAuditService: Integrity audit and repair of directory references

Authorization rules:
    - Structure changes (create/delete channel, delete community) are owner-only,
      except channel creation which any member may do
    - Reads require membership
    - The owner can never leave their community

Usage:
    from communities.services import CommunityService, ChannelService

    result = CommunityService.create_community(owner=user, name="Test")
    if result.success:
        community = result.data

    result = ChannelService.list_channels(user, community.id)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.db.models import Count, Exists, F, OuterRef

from chat.constants import REVOKE_REASONS
from chat.realtime import RealtimeBroadcaster
from communities.models import (
    DEFAULT_CHANNEL_DESCRIPTION,
    DEFAULT_CHANNEL_NAME,
    DEFAULT_COMMUNITY_ICON,
    Channel,
    ChannelType,
    Community,
    Membership,
)
from core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


def _community_not_found() -> ServiceResult:
    return ServiceResult.from_exception(
        NotFoundError("Community not found", error_code="COMMUNITY_NOT_FOUND")
    )


def _channel_not_found() -> ServiceResult:
    return ServiceResult.from_exception(
        NotFoundError("Channel not found", error_code="CHANNEL_NOT_FOUND")
    )


def _not_a_member() -> ServiceResult:
    return ServiceResult.from_exception(
        PermissionDeniedError(
            "You are not a member of this community", error_code="NOT_MEMBER"
        )
    )


class CommunityService(BaseService):
    """
    Service for community lifecycle and membership.

    Methods:
        create_community: Create a community with its default channel
        get_community: Fetch a community the user belongs to
        list_user_communities: Communities the user belongs to
        join_community: Join a public community
        leave_community: Leave a community (not allowed for the owner)
        delete_community: Owner-only cascading delete
    """

    @classmethod
    def create_community(
        cls,
        owner: User,
        name: str,
        description: str = "",
        icon: str | None = None,
        is_public: bool = True,
    ) -> ServiceResult[Community]:
        """
        Create a community owned by ``owner``.

        The owner membership and the default "general" text channel are
        created in the same transaction, so a community never exists
        without both. If any write fails nothing is stored and the
        exception propagates to the caller.

        Returns:
            ServiceResult with the new Community
        """
        with cls.atomic():
            community = Community.objects.create(
                name=name.strip(),
                description=(description or "").strip(),
                icon=icon or DEFAULT_COMMUNITY_ICON,
                owner=owner,
                is_public=is_public,
            )
            Membership.objects.create(user=owner, community=community)
            Channel.objects.create(
                community=community,
                name=DEFAULT_CHANNEL_NAME,
                description=DEFAULT_CHANNEL_DESCRIPTION,
                type=ChannelType.TEXT,
            )

        cls.get_logger().info(
            f"User {owner.id} created community {community.id} with default channel"
        )
        return ServiceResult.success(community)

    @classmethod
    def get_community(cls, user: User, community_id: int) -> ServiceResult[Community]:
        """
        Fetch a community for a member.

        Returns:
            ServiceResult with the Community, NotFoundError, or
            PermissionDeniedError for non-members
        """
        community = (
            Community.objects.select_related("owner")
            .filter(pk=community_id)
            .first()
        )
        if community is None:
            return _community_not_found()
        if not community.has_member(user):
            return _not_a_member()
        return ServiceResult.success(community)

    @staticmethod
    def list_user_communities(user: User) -> QuerySet[Community]:
        """Communities the user belongs to, newest first."""
        return (
            Community.objects.filter(memberships__user=user)
            .select_related("owner")
            .prefetch_related("channels")
            .order_by("-created_at")
        )

    @classmethod
    def join_community(cls, user: User, community_id: int) -> ServiceResult[Community]:
        """
        Join a public community.

        Returns:
            ServiceResult with the Community, NotFoundError,
            PermissionDeniedError for private communities, or ConflictError
            when the user is already a member
        """
        community = Community.objects.filter(pk=community_id).first()
        if community is None:
            return _community_not_found()

        if not community.is_public:
            return ServiceResult.from_exception(
                PermissionDeniedError(
                    "This community is private", error_code="COMMUNITY_PRIVATE"
                )
            )

        with cls.atomic():
            _, created = Membership.objects.get_or_create(user=user, community=community)

        if not created:
            return ServiceResult.from_exception(
                ConflictError("You are already a member", error_code="ALREADY_MEMBER")
            )

        cls.get_logger().info(f"User {user.id} joined community {community.id}")
        return ServiceResult.success(community)

    @classmethod
    def leave_community(cls, user: User, community_id: int) -> ServiceResult[Community]:
        """
        Leave a community.

        Leaving a community the user does not belong to is a no-op. The
        user's realtime connections are removed from the community's rooms.

        Returns:
            ServiceResult with the Community, NotFoundError, or
            PermissionDeniedError when the user is the owner
        """
        community = Community.objects.filter(pk=community_id).first()
        if community is None:
            return _community_not_found()

        if community.is_owner(user):
            return ServiceResult.from_exception(
                PermissionDeniedError(
                    "Owner cannot leave the community", error_code="OWNER_CANNOT_LEAVE"
                )
            )

        deleted, _ = Membership.objects.filter(user=user, community=community).delete()

        if deleted:
            cls.get_logger().info(f"User {user.id} left community {community.id}")
            RealtimeBroadcaster.revoke_access(
                list(community.channels.values_list("id", flat=True)),
                REVOKE_REASONS.LEFT_COMMUNITY,
                user_id=user.id,
            )
        return ServiceResult.success(community)

    @classmethod
    def delete_community(cls, user: User, community_id: int) -> ServiceResult[dict]:
        """
        Delete a community (owner only).

        Cascades to every channel (and the channels' messages), every
        membership and every meeting of the community. Connections
        subscribed to its channels are removed from the rooms.

        Returns:
            ServiceResult with {"community_id", "channel_ids", "member_ids"}
            describing what was removed
        """
        community = Community.objects.filter(pk=community_id).first()
        if community is None:
            return _community_not_found()

        if not community.is_owner(user):
            return ServiceResult.from_exception(
                PermissionDeniedError(
                    "Only the owner can delete this community", error_code="NOT_OWNER"
                )
            )

        removed = {
            "community_id": community.id,
            "channel_ids": list(community.channels.values_list("id", flat=True)),
            "member_ids": list(community.memberships.values_list("user_id", flat=True)),
        }

        with cls.atomic():
            community.delete()

        cls.get_logger().info(
            f"User {user.id} deleted community {removed['community_id']} "
            f"({len(removed['channel_ids'])} channels, {len(removed['member_ids'])} members)"
        )
        RealtimeBroadcaster.revoke_access(removed["channel_ids"], REVOKE_REASONS.COMMUNITY_DELETED)
        return ServiceResult.success(removed)


class ChannelService(BaseService):
    """
    Service for channel lifecycle and access checks.

    Methods:
        create_channel: Create a channel in a community (members)
        delete_channel: Delete a channel and its messages (owner only)
        list_channels: Channels of a community, oldest first (members)
        get_channel: Fetch a channel whose community the user belongs to
    """

    @classmethod
    def create_channel(
        cls,
        user: User,
        community_id: int,
        name: str,
        description: str = "",
        type: str = ChannelType.TEXT,
    ) -> ServiceResult[Channel]:
        """
        Create a channel in a community.

        Returns:
            ServiceResult with the Channel, NotFoundError, or
            PermissionDeniedError when the user is neither owner nor member
        """
        community = Community.objects.filter(pk=community_id).first()
        if community is None:
            return _community_not_found()

        if not (community.is_owner(user) or community.has_member(user)):
            return ServiceResult.from_exception(
                PermissionDeniedError(
                    "You do not have permission to create channels",
                    error_code="NOT_MEMBER",
                )
            )

        channel = Channel.objects.create(
            community=community,
            name=name.strip(),
            description=(description or "").strip(),
            type=type or ChannelType.TEXT,
        )

        cls.get_logger().info(
            f"User {user.id} created channel {channel.id} in community {community.id}"
        )
        return ServiceResult.success(channel)

    @classmethod
    def delete_channel(cls, user: User, channel_id: int) -> ServiceResult[dict]:
        """
        Delete a channel (community owner only).

        The channel's messages are deleted with it and its room is emptied.

        Returns:
            ServiceResult with {"channel_id", "community_id"}
        """
        channel = Channel.objects.select_related("community").filter(pk=channel_id).first()
        if channel is None:
            return _channel_not_found()

        if not channel.community.is_owner(user):
            return ServiceResult.from_exception(
                PermissionDeniedError(
                    "Only the community owner can delete channels",
                    error_code="NOT_OWNER",
                )
            )

        removed = {"channel_id": channel.id, "community_id": channel.community_id}
        with cls.atomic():
            channel.delete()

        cls.get_logger().info(
            f"User {user.id} deleted channel {removed['channel_id']} "
            f"from community {removed['community_id']}"
        )
        RealtimeBroadcaster.revoke_access([removed["channel_id"]], REVOKE_REASONS.CHANNEL_DELETED)
        return ServiceResult.success(removed)

    @classmethod
    def list_channels(cls, user: User, community_id: int) -> ServiceResult[QuerySet[Channel]]:
        """
        Channels of a community in creation order.

        Returns:
            ServiceResult with a Channel queryset, NotFoundError, or
            PermissionDeniedError for non-members
        """
        community = Community.objects.filter(pk=community_id).first()
        if community is None:
            return _community_not_found()
        if not community.has_member(user):
            return _not_a_member()
        return ServiceResult.success(community.channels.order_by("created_at", "id"))

    @classmethod
    def get_channel(cls, user: User, channel_id: int) -> ServiceResult[Channel]:
        """
        Fetch a channel whose community the user belongs to.

        This is the read-access check shared by the message store and the
        realtime hub.

        Returns:
            ServiceResult with the Channel, NotFoundError, or
            PermissionDeniedError for non-members
        """
        channel = Channel.objects.select_related("community").filter(pk=channel_id).first()
        if channel is None:
            return _channel_not_found()
        if not channel.community.has_member(user):
            return _not_a_member()
        return ServiceResult.success(channel)


@dataclass
class AuditReport:
    """
    Result of a directory integrity audit.

    Attributes:
        owners_missing: Community ids whose owner is not a member
        communities_without_channels: Community ids with no channel at all
        misplaced_meeting_channels: Meeting ids whose channel belongs to
            another community
        repaired: Number of issues fixed (when run with repair=True)
    """

    owners_missing: list[int] = field(default_factory=list)
    communities_without_channels: list[int] = field(default_factory=list)
    misplaced_meeting_channels: list[int] = field(default_factory=list)
    repaired: int = 0

    @property
    def issue_count(self) -> int:
        return (
            len(self.owners_missing)
            + len(self.communities_without_channels)
            + len(self.misplaced_meeting_channels)
        )

    def to_dict(self) -> dict:
        return {
            "owners_missing": self.owners_missing,
            "communities_without_channels": self.communities_without_channels,
            "misplaced_meeting_channels": self.misplaced_meeting_channels,
            "issue_count": self.issue_count,
            "repaired": self.repaired,
        }


class DirectoryAuditService(BaseService):
    """
    Reconciliation of directory references.

    Checks:
        - Every community's owner is one of its members (repairable)
        - Every community has at least one channel (reported only; the
          default "general" channel is missing)
        - A meeting's channel belongs to the meeting's community
          (repairable by detaching the channel)
    """

    @classmethod
    def audit(cls, repair: bool = False) -> ServiceResult[AuditReport]:
        """
        Run the integrity audit.

        Args:
            repair: Fix repairable issues in place

        Returns:
            ServiceResult with an AuditReport
        """
        from meetings.models import Meeting

        report = AuditReport()
        logger = cls.get_logger()

        owner_membership = Membership.objects.filter(
            community_id=OuterRef("pk"), user_id=OuterRef("owner_id")
        )
        owners_missing = Community.objects.filter(~Exists(owner_membership)).values_list(
            "id", "owner_id"
        )
        for community_id, owner_id in owners_missing:
            report.owners_missing.append(community_id)
            logger.warning(f"Community {community_id}: owner {owner_id} is not a member")
            if repair:
                Membership.objects.get_or_create(user_id=owner_id, community_id=community_id)
                report.repaired += 1

        report.communities_without_channels = list(
            Community.objects.annotate(channel_count=Count("channels"))
            .filter(channel_count=0)
            .values_list("id", flat=True)
        )
        for community_id in report.communities_without_channels:
            logger.warning(f"Community {community_id}: no channels (missing default channel)")

        misplaced = Meeting.objects.filter(channel__isnull=False).exclude(
            channel__community_id=F("community_id")
        )
        report.misplaced_meeting_channels = list(misplaced.values_list("id", flat=True))
        for meeting_id in report.misplaced_meeting_channels:
            logger.warning(f"Meeting {meeting_id}: channel belongs to another community")
        if repair and report.misplaced_meeting_channels:
            report.repaired += Meeting.objects.filter(
                id__in=report.misplaced_meeting_channels
            ).update(channel=None)

        logger.info(
            f"Directory audit finished: {report.issue_count} issues, {report.repaired} repaired"
        )
        return ServiceResult.success(report)


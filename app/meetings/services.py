"""
Meeting service layer.

Services:
    MeetingService: Schedule, list, join, change status, delete

Authorization rules:
    - Scheduling, listing and joining require community membership
    - Status changes and deletion are organizer-only

Usage:
    from meetings.services import MeetingService

    result = MeetingService.create_meeting(
        organizer=user,
        community_id=community.id,
        title="Standup",
        start_time=timezone.now(),
    )
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from django.conf import settings
from django.utils import timezone

from authentication.models import UserStatus
from authentication.services import AuthService
from communities.models import Channel, Community
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.services import BaseService, ServiceResult
from meetings.models import ACTIVE_STATUSES, Meeting, MeetingReminder, MeetingStatus

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


def _meeting_not_found() -> ServiceResult:
    return ServiceResult.from_exception(
        NotFoundError("Meeting not found", error_code="MEETING_NOT_FOUND")
    )


def _not_organizer() -> ServiceResult:
    return ServiceResult.from_exception(
        PermissionDeniedError("Not authorized", error_code="NOT_ORGANIZER")
    )


def build_meeting_link(now: datetime | None = None) -> str:
    """Join link of the form ``<MEETING_LINK_BASE_URL>/<epoch milliseconds>``."""
    now = now or timezone.now()
    base_url = settings.MEETING_LINK_BASE_URL.rstrip("/")
    return f"{base_url}/{int(now.timestamp() * 1000)}"


class MeetingService(BaseService):
    """
    Service for meeting operations.

    Methods:
        create_meeting: Schedule a meeting in a community
        list_community_meetings: Scheduled and ongoing meetings by start time
        join_meeting: Add the user as participant and start the meeting
        update_status: Organizer-only status change
        delete_meeting: Organizer-only delete
    """

    @classmethod
    def create_meeting(
        cls,
        organizer: User,
        community_id: int,
        title: str,
        start_time: datetime,
        description: str = "",
        channel_id: int | None = None,
        end_time: datetime | None = None,
        reminder: str = MeetingReminder.NONE,
    ) -> ServiceResult[Meeting]:
        """
        Schedule a meeting.

        Error codes:
            COMMUNITY_NOT_FOUND / CHANNEL_NOT_FOUND: Dangling reference (404)
            NOT_MEMBER: Organizer is not in the community (403)
            CHANNEL_NOT_IN_COMMUNITY: Channel belongs elsewhere (400)
            INVALID_TIME_RANGE: end_time before start_time (400)
        """
        community = Community.objects.filter(pk=community_id).first()
        if community is None:
            return ServiceResult.from_exception(
                NotFoundError("Community not found", error_code="COMMUNITY_NOT_FOUND")
            )
        if not community.has_member(organizer):
            return ServiceResult.from_exception(
                PermissionDeniedError(
                    "You are not a member of this community", error_code="NOT_MEMBER"
                )
            )

        channel = None
        if channel_id is not None:
            channel = Channel.objects.filter(pk=channel_id).first()
            if channel is None:
                return ServiceResult.from_exception(
                    NotFoundError("Channel not found", error_code="CHANNEL_NOT_FOUND")
                )
            if channel.community_id != community.id:
                return ServiceResult.from_exception(
                    ValidationError(
                        "Channel does not belong to this community",
                        error_code="CHANNEL_NOT_IN_COMMUNITY",
                    )
                )

        if end_time is not None and end_time < start_time:
            return ServiceResult.from_exception(
                ValidationError(
                    "End time must be after start time", error_code="INVALID_TIME_RANGE"
                )
            )

        meeting = Meeting.objects.create(
            title=title.strip(),
            description=description or "",
            community=community,
            channel=channel,
            organizer=organizer,
            start_time=start_time,
            end_time=end_time,
            reminder=reminder or MeetingReminder.NONE,
            meeting_link=build_meeting_link(),
        )

        cls.get_logger().info(
            f"User {organizer.id} scheduled meeting {meeting.id} in community {community.id}"
        )
        return ServiceResult.success(meeting)

    @classmethod
    def list_community_meetings(
        cls, user: User, community_id: int
    ) -> ServiceResult[QuerySet[Meeting]]:
        """Scheduled and ongoing meetings of a community, earliest first."""
        community = Community.objects.filter(pk=community_id).first()
        if community is None:
            return ServiceResult.from_exception(
                NotFoundError("Community not found", error_code="COMMUNITY_NOT_FOUND")
            )
        if not community.has_member(user):
            return ServiceResult.from_exception(
                PermissionDeniedError(
                    "You are not a member of this community", error_code="NOT_MEMBER"
                )
            )

        meetings = (
            Meeting.objects.filter(community=community, status__in=ACTIVE_STATUSES)
            .select_related("organizer", "channel")
            .prefetch_related("participants")
            .order_by("start_time", "id")
        )
        return ServiceResult.success(meetings)

    @classmethod
    def join_meeting(cls, user: User, meeting_id: int) -> ServiceResult[Meeting]:
        """
        Join a meeting.

        The user is added to the participants once; a scheduled meeting
        becomes ongoing and the user's status becomes "meeting".
        """
        meeting = Meeting.objects.select_related("community").filter(pk=meeting_id).first()
        if meeting is None:
            return _meeting_not_found()
        if not meeting.community.has_member(user):
            return ServiceResult.from_exception(
                PermissionDeniedError(
                    "You are not a member of this community", error_code="NOT_MEMBER"
                )
            )

        with cls.atomic():
            if not meeting.participants.filter(pk=user.pk).exists():
                meeting.participants.add(user)
                if meeting.status == MeetingStatus.SCHEDULED:
                    meeting.status = MeetingStatus.ONGOING
                    meeting.save(update_fields=["status", "updated_at"])
            AuthService.set_status(user, UserStatus.MEETING)

        cls.get_logger().info(f"User {user.id} joined meeting {meeting.id}")
        return ServiceResult.success(meeting)

    @classmethod
    def update_status(cls, user: User, meeting_id: int, status: str) -> ServiceResult[Meeting]:
        """
        Change a meeting's status (organizer only).

        Error codes:
            MEETING_NOT_FOUND (404), NOT_ORGANIZER (403),
            INVALID_MEETING_STATUS (400)
        """
        if status not in MeetingStatus.values:
            return ServiceResult.from_exception(
                ValidationError(
                    f"Invalid meeting status: {status}", error_code="INVALID_MEETING_STATUS"
                )
            )

        meeting = Meeting.objects.filter(pk=meeting_id).first()
        if meeting is None:
            return _meeting_not_found()
        if not meeting.is_organizer(user):
            return _not_organizer()

        meeting.status = status
        meeting.save(update_fields=["status", "updated_at"])

        cls.get_logger().info(f"User {user.id} set meeting {meeting.id} to {status}")
        return ServiceResult.success(meeting)

    @classmethod
    def delete_meeting(cls, user: User, meeting_id: int) -> ServiceResult[dict]:
        """
        Delete a meeting (organizer only).

        Returns:
            ServiceResult with {"meeting_id", "channel_id"}
        """
        meeting = Meeting.objects.filter(pk=meeting_id).first()
        if meeting is None:
            return _meeting_not_found()
        if not meeting.is_organizer(user):
            return _not_organizer()

        removed = {"meeting_id": meeting.id, "channel_id": meeting.channel_id}
        meeting.delete()

        cls.get_logger().info(f"User {user.id} deleted meeting {removed['meeting_id']}")
        return ServiceResult.success(removed)

"""
Tests for MeetingService.

Covers scheduling rules, the active listing, joining and the
organizer-only operations.
"""

from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from freezegun import freeze_time

from authentication.models import UserStatus
from communities.tests.factories import ChannelFactory, CommunityFactory
from meetings.models import Meeting, MeetingStatus
from meetings.services import MeetingService, build_meeting_link
from meetings.tests.factories import MeetingFactory

START = datetime(2026, 3, 2, 9, 0, tzinfo=dt_timezone.utc)


@pytest.mark.django_db
class TestCreateMeeting:
    @freeze_time("2026-03-01 12:00:00")
    def test_member_schedules_meeting_with_generated_link(
        self, attendee, community, channel, settings
    ):
        settings.MEETING_LINK_BASE_URL = "https://meet.example.com/"

        result = MeetingService.create_meeting(
            organizer=attendee,
            community_id=community.id,
            channel_id=channel.id,
            title="  Planning ",
            start_time=START,
            end_time=START + timedelta(hours=1),
        )

        assert result.success
        meeting = result.data
        assert meeting.title == "Planning"
        assert meeting.organizer == attendee
        assert meeting.status == MeetingStatus.SCHEDULED
        assert meeting.meeting_link == "https://meet.example.com/1772366400000"

    def test_outsider_cannot_schedule(self, outsider, community):
        result = MeetingService.create_meeting(
            organizer=outsider, community_id=community.id, title="x", start_time=START
        )

        assert result.status_code == 403
        assert result.error_code == "NOT_MEMBER"
        assert not Meeting.objects.exists()

    def test_unknown_community_is_not_found(self, organizer):
        result = MeetingService.create_meeting(
            organizer=organizer, community_id=999999, title="x", start_time=START
        )

        assert result.status_code == 404
        assert result.error_code == "COMMUNITY_NOT_FOUND"

    def test_channel_from_other_community_is_rejected(self, organizer, community):
        foreign = ChannelFactory(community=CommunityFactory())

        result = MeetingService.create_meeting(
            organizer=organizer,
            community_id=community.id,
            channel_id=foreign.id,
            title="x",
            start_time=START,
        )

        assert result.status_code == 400
        assert result.error_code == "CHANNEL_NOT_IN_COMMUNITY"

    def test_end_before_start_is_rejected(self, organizer, community):
        result = MeetingService.create_meeting(
            organizer=organizer,
            community_id=community.id,
            title="x",
            start_time=START,
            end_time=START - timedelta(minutes=1),
        )

        assert result.error_code == "INVALID_TIME_RANGE"


@pytest.mark.django_db
class TestListCommunityMeetings:
    def test_lists_active_meetings_by_start_time(self, attendee, community, organizer):
        later = MeetingFactory(
            community=community, organizer=organizer, start_time=START + timedelta(hours=2)
        )
        earlier = MeetingFactory(community=community, organizer=organizer, start_time=START)
        ongoing = MeetingFactory(
            community=community,
            organizer=organizer,
            start_time=START + timedelta(hours=1),
            status=MeetingStatus.ONGOING,
        )
        MeetingFactory(community=community, organizer=organizer, status=MeetingStatus.COMPLETED)
        MeetingFactory(community=community, organizer=organizer, status=MeetingStatus.CANCELLED)

        result = MeetingService.list_community_meetings(attendee, community.id)

        assert result.success
        assert list(result.data) == [earlier, ongoing, later]

    def test_outsider_cannot_list(self, outsider, community):
        result = MeetingService.list_community_meetings(outsider, community.id)

        assert result.error_code == "NOT_MEMBER"


@pytest.mark.django_db
class TestJoinMeeting:
    def test_join_starts_meeting_and_sets_user_status(self, attendee, meeting):
        result = MeetingService.join_meeting(attendee, meeting.id)

        assert result.success
        meeting.refresh_from_db()
        attendee.refresh_from_db()
        assert meeting.status == MeetingStatus.ONGOING
        assert list(meeting.participants.all()) == [attendee]
        assert attendee.status == UserStatus.MEETING

    def test_joining_twice_keeps_one_participant(self, attendee, meeting):
        MeetingService.join_meeting(attendee, meeting.id)
        MeetingService.join_meeting(attendee, meeting.id)

        assert meeting.participants.count() == 1

    def test_completed_meeting_keeps_its_status(self, attendee, meeting):
        meeting.status = MeetingStatus.COMPLETED
        meeting.save()

        MeetingService.join_meeting(attendee, meeting.id)

        meeting.refresh_from_db()
        assert meeting.status == MeetingStatus.COMPLETED

    def test_outsider_cannot_join(self, outsider, meeting):
        result = MeetingService.join_meeting(outsider, meeting.id)

        assert result.status_code == 403
        assert meeting.participants.count() == 0

    def test_missing_meeting(self, attendee, db):
        result = MeetingService.join_meeting(attendee, 999999)

        assert result.error_code == "MEETING_NOT_FOUND"


@pytest.mark.django_db
class TestOrganizerOperations:
    """
    Status changes and deletion.

    Why it matters:
        Only the organizer may end or remove a meeting; other members
        would otherwise be able to cancel meetings they merely attend.
    """

    def test_organizer_updates_status(self, organizer, meeting):
        result = MeetingService.update_status(organizer, meeting.id, MeetingStatus.COMPLETED)

        assert result.success
        meeting.refresh_from_db()
        assert meeting.status == MeetingStatus.COMPLETED

    def test_member_cannot_update_status(self, attendee, meeting):
        result = MeetingService.update_status(attendee, meeting.id, MeetingStatus.CANCELLED)

        assert result.status_code == 403
        assert result.error_code == "NOT_ORGANIZER"

    def test_invalid_status_is_rejected(self, organizer, meeting):
        result = MeetingService.update_status(organizer, meeting.id, "paused")

        assert result.error_code == "INVALID_MEETING_STATUS"

    def test_organizer_deletes_meeting(self, organizer, meeting, channel):
        result = MeetingService.delete_meeting(organizer, meeting.id)

        assert result.data == {"meeting_id": meeting.id, "channel_id": channel.id}
        assert not Meeting.objects.filter(pk=meeting.id).exists()

    def test_member_cannot_delete(self, attendee, meeting):
        result = MeetingService.delete_meeting(attendee, meeting.id)

        assert result.error_code == "NOT_ORGANIZER"
        assert Meeting.objects.filter(pk=meeting.id).exists()


class TestBuildMeetingLink:
    def test_link_uses_epoch_milliseconds(self, settings):
        settings.MEETING_LINK_BASE_URL = "https://meet.example.com"
        now = datetime(2026, 1, 1, tzinfo=dt_timezone.utc)

        assert build_meeting_link(now) == "https://meet.example.com/1767225600000"

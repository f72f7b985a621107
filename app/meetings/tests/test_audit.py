"""
Tests for the meeting checks of DirectoryAuditService.
"""

import pytest

from communities.services import DirectoryAuditService
from communities.tests.factories import ChannelFactory, CommunityFactory
from meetings.tests.factories import MeetingFactory


@pytest.mark.django_db
class TestMisplacedMeetingChannel:
    def test_reports_and_detaches_foreign_channel(self, meeting, organizer):
        other = CommunityFactory()
        ChannelFactory(community=other)
        misplaced = MeetingFactory(
            community=meeting.community,
            organizer=organizer,
            channel=ChannelFactory(community=other),
        )

        report = DirectoryAuditService.audit().data
        assert report.misplaced_meeting_channels == [misplaced.id]

        repaired = DirectoryAuditService.audit(repair=True).data
        misplaced.refresh_from_db()
        meeting.refresh_from_db()
        assert repaired.repaired == 1
        assert misplaced.channel is None
        assert meeting.channel is not None

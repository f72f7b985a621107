"""
Tests for community directory Celery tasks.

Tasks are called synchronously (``task(...)``) so no broker is needed.
"""

from communities.models import Membership
from communities.tasks import audit_directory_integrity
from communities.tests.factories import ChannelFactory, CommunityFactory


class TestAuditDirectoryIntegrityTask:
    """Tests for audit_directory_integrity."""

    def test_is_shared_task(self):
        assert hasattr(audit_directory_integrity, "delay")
        assert audit_directory_integrity.name == (
            "communities.tasks.audit_directory_integrity"
        )

    def test_returns_report_dict(self, community):
        report = audit_directory_integrity()

        assert report == {
            "owners_missing": [],
            "communities_without_channels": [],
            "misplaced_meeting_channels": [],
            "issue_count": 0,
            "repaired": 0,
        }

    def test_repair_flag_is_passed_through(self, db):
        community = CommunityFactory(owner_membership=False)
        ChannelFactory(community=community)

        report = audit_directory_integrity(repair=True)

        assert report["owners_missing"] == [community.id]
        assert report["repaired"] == 1
        assert Membership.objects.filter(
            community=community, user=community.owner
        ).exists()

"""
Test configuration and fixtures for meetings tests.
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from communities.models import Membership
from communities.services import CommunityService
from meetings.tests.factories import MeetingFactory


@pytest.fixture
def organizer(db):
    return UserFactory(username="organizer")


@pytest.fixture
def attendee(db):
    return UserFactory(username="attendee")


@pytest.fixture
def outsider(db):
    return UserFactory(username="outsider")


@pytest.fixture
def community(organizer, attendee):
    """Community owned by ``organizer`` with ``attendee`` as member."""
    result = CommunityService.create_community(owner=organizer, name="Team")
    Membership.objects.create(user=attendee, community=result.data)
    return result.data


@pytest.fixture
def channel(community):
    return community.channels.get(name="general")


@pytest.fixture
def meeting(community, channel, organizer):
    """Scheduled meeting attached to the general channel."""
    return MeetingFactory(community=community, channel=channel, organizer=organizer)


@pytest.fixture
def authenticated_client_factory(db):
    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def organizer_client(authenticated_client_factory, organizer):
    return authenticated_client_factory(organizer)


@pytest.fixture
def attendee_client(authenticated_client_factory, attendee):
    return authenticated_client_factory(attendee)


@pytest.fixture
def outsider_client(authenticated_client_factory, outsider):
    return authenticated_client_factory(outsider)


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()

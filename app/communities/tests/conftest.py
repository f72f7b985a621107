"""
Test configuration and fixtures for community directory tests.

This module provides:
- Owner, member and outsider users
- A community built through the service (with its default channel)
- API client helpers for authenticated requests
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from communities.models import Membership
from communities.services import CommunityService


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def owner(db):
    """User who owns the community fixture."""
    return UserFactory(username="owner")


@pytest.fixture
def member(db):
    """Regular member of the community fixture."""
    return UserFactory(username="member")


@pytest.fixture
def outsider(db):
    """Authenticated user who belongs to no community."""
    return UserFactory(username="outsider")


# =============================================================================
# Directory Fixtures
# =============================================================================


@pytest.fixture
def community(owner, member):
    """
    Public community created through CommunityService.

    Has the owner and ``member`` as members and the default "general"
    channel.
    """
    result = CommunityService.create_community(owner=owner, name="Test")
    Membership.objects.create(user=member, community=result.data)
    return result.data


@pytest.fixture
def general_channel(community):
    """The default channel of the community fixture."""
    return community.channels.get(name="general")


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client_factory(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(authenticated_client_factory, owner):
            client = authenticated_client_factory(owner)
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def owner_client(authenticated_client_factory, owner):
    return authenticated_client_factory(owner)


@pytest.fixture
def member_client(authenticated_client_factory, member):
    return authenticated_client_factory(member)


@pytest.fixture
def outsider_client(authenticated_client_factory, outsider):
    return authenticated_client_factory(outsider)

"""
Test configuration and fixtures for chat tests.

This module provides:
- Two members of a community (alice posts, bob reads) and an outsider
- The community's "general" channel and a message in it
- API client helpers for authenticated requests
- Access tokens for websocket connections

Usage:
    def test_example(channel, alice_client):
        response = alice_client.get(f"/api/v1/messages/channel/{channel.id}/")
        assert response.status_code == 200
"""

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from authentication.tests.factories import UserFactory
from chat.tests.factories import MessageFactory
from communities.services import CommunityService


@pytest.fixture(autouse=True)
def clear_presence_cache():
    """Presence lives in the cache; start every test without entries."""
    cache.clear()
    yield
    cache.clear()


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    """Community owner who posts the messages."""
    return UserFactory(username="alice")


@pytest.fixture
def bob(db):
    """Second member of the community."""
    return UserFactory(username="bob")


@pytest.fixture
def outsider(db):
    """User who is not a member of the community."""
    return UserFactory(username="mallory")


# =============================================================================
# Directory Fixtures
# =============================================================================


@pytest.fixture
def community(alice, bob):
    """Community owned by alice with bob as member."""
    community = CommunityService.create_community(owner=alice, name="Test").data
    CommunityService.join_community(bob, community.id)
    return community


@pytest.fixture
def channel(community):
    """The community's default "general" channel."""
    return community.channels.get(name="general")


@pytest.fixture
def message(alice, channel):
    """A message alice posted in #general."""
    return MessageFactory(author=alice, channel=channel, content="hello")


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
        def test_example(authenticated_client_factory, alice):
            client = authenticated_client_factory(alice)
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def alice_client(authenticated_client_factory, alice):
    return authenticated_client_factory(alice)


@pytest.fixture
def bob_client(authenticated_client_factory, bob):
    return authenticated_client_factory(bob)


@pytest.fixture
def outsider_client(authenticated_client_factory, outsider):
    return authenticated_client_factory(outsider)


# =============================================================================
# Websocket Fixtures
# =============================================================================


@pytest.fixture
def access_token_for():
    """Return a function producing an access token string for a user."""

    def _token(user):
        return str(AccessToken.for_user(user))

    return _token

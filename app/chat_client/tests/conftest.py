"""
Fixtures for client sync layer tests.

Unit tests use httpx.MockTransport with canned responses; the end-to-end
tests route the client's requests into the Django test client through
``django_transport``.
"""

import httpx
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from authentication.tests.factories import UserFactory
from chat_client.api import ChatApiClient
from chat_client.hidden_store import HiddenMessageStore
from chat_client.tests.helpers import API_BASE_URL
from communities.services import CommunityService


@pytest.fixture
def hidden_store(tmp_path):
    return HiddenMessageStore(tmp_path / "hidden.json")


@pytest.fixture
def django_transport():
    """
    httpx transport that serves requests with the Django test client.

    Usage:
        api = ChatApiClient(API_BASE_URL, token=..., transport=django_transport)
    """
    client = APIClient()

    def handler(request: httpx.Request) -> httpx.Response:
        extra = {}
        if "authorization" in request.headers:
            extra["HTTP_AUTHORIZATION"] = request.headers["authorization"]

        path = request.url.raw_path.decode()
        method = getattr(client, request.method.lower())
        if request.content:
            response = method(
                path, data=request.content, content_type="application/json", **extra
            )
        else:
            response = method(path, **extra)

        return httpx.Response(
            response.status_code,
            content=response.content,
            headers={"Content-Type": response.get("Content-Type", "application/json")},
        )

    return httpx.MockTransport(handler)


@pytest.fixture
def alice(db):
    return UserFactory(username="alice")


@pytest.fixture
def bob(db):
    return UserFactory(username="bob")


@pytest.fixture
def channel(alice, bob):
    community = CommunityService.create_community(owner=alice, name="Test").data
    CommunityService.join_community(bob, community.id)
    return community.channels.get(name="general")


@pytest.fixture
def api_for(django_transport):
    """Return a function building a ChatApiClient authenticated as a user."""
    clients = []

    def _api(user):
        api = ChatApiClient(
            API_BASE_URL, token=str(AccessToken.for_user(user)), transport=django_transport
        )
        clients.append(api)
        return api

    yield _api
    for api in clients:
        api.close()

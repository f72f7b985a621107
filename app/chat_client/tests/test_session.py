"""
Tests for ChannelSession.

TestChannelSession uses an in-memory stand-in for the REST client.
TestChannelSessionEndToEnd drives the real API through the Django test
client, covering "delete for me" versus "delete for everyone" across two
users of the same channel.
"""

import pytest

from chat.models import Message
from chat_client.session import ChannelSession
from chat_client.tests.helpers import make_message
from core.exceptions import ExternalServiceError, NotFoundError, ValidationError


class StubApi:
    def __init__(self, messages):
        self.messages = list(messages)
        self.deleted = []
        self.failures = {}
        self.next_id = 100

    def list_messages(self, channel_id, limit=None, skip=None):
        return [m for m in self.messages if m["_id"] not in self.deleted]

    def send_message(self, channel_id, content, type="text"):
        self.next_id += 1
        message = make_message(self.next_id, content=content)
        self.messages.append(message)
        return message

    def edit_message(self, message_id, content):
        return dict(make_message(message_id, content=content), isEdited=True)

    def delete_message(self, message_id):
        error = self.failures.get(message_id)
        if error is not None:
            raise error
        self.deleted.append(message_id)


def own_and_foreign():
    return [
        make_message(1, author_id=1, username="alice"),
        make_message(2, author_id=2, username="bob"),
    ]


class TestChannelSession:
    def test_open_filters_hidden_messages(self, hidden_store):
        hidden_store.hide(1, 7, 2)
        session = ChannelSession(StubApi(own_and_foreign()), hidden_store, 1, 7)

        assert [m["_id"] for m in session.open()] == [1]

    def test_send_then_echo_renders_once(self, hidden_store):
        session = ChannelSession(StubApi([]), hidden_store, 1, 7)
        session.open()

        message = session.send("hi")
        session.handle_event("message-created", {"channelId": 7, "message": message})

        assert [m["content"] for m in session.messages] == ["hi"]

    def test_edit_replaces_message(self, hidden_store):
        session = ChannelSession(StubApi(own_and_foreign()), hidden_store, 1, 7)
        session.open()

        session.edit(1, "changed")

        assert session.timeline.get(1)["content"] == "changed"
        assert session.timeline.ids == [1, 2]

    def test_delete_for_me_never_calls_the_api(self, hidden_store):
        api = StubApi(own_and_foreign())
        session = ChannelSession(api, hidden_store, 1, 7)
        session.open()

        session.delete_for_me(2)

        assert api.deleted == []
        assert session.timeline.ids == [1]
        assert hidden_store.get(1, 7) == {2}

    def test_delete_for_me_requires_identity(self, hidden_store):
        session = ChannelSession(StubApi(own_and_foreign()), hidden_store, None, 7)
        session.open()

        with pytest.raises(ValidationError):
            session.delete_for_me(1)

        assert session.timeline.ids == [1, 2]

    def test_delete_for_everyone_skips_foreign_messages(self, hidden_store):
        api = StubApi(own_and_foreign())
        session = ChannelSession(api, hidden_store, 1, 7)
        session.open()

        result = session.delete_for_everyone([1, 2])

        assert result.deleted == [1]
        assert result.failed == {}
        assert api.deleted == [1]
        assert session.timeline.ids == [2]

    def test_delete_for_everyone_continues_past_failures(self, hidden_store):
        """
        Three own messages: 1 is already gone on the server, 2 fails with a
        network error, 3 succeeds.

        Why it matters: One failed request must not leave the rest of the
        selection undeleted or hide which ids actually went.
        """
        api = StubApi([make_message(i, author_id=1) for i in (1, 2, 3)])
        api.failures = {
            1: NotFoundError("Message not found", error_code="MESSAGE_NOT_FOUND"),
            2: ExternalServiceError("Request failed", error_code="NETWORK_ERROR"),
        }
        session = ChannelSession(api, hidden_store, 1, 7)
        session.open()

        result = session.delete_for_everyone([1, 2, 3])

        assert not result
        assert result.deleted == [1, 3]
        assert list(result.failed) == [2]
        assert result.failed[2].error_code == "NETWORK_ERROR"
        assert session.timeline.ids == [2]
        assert api.deleted == [3]

    def test_remote_delete_and_local_hide_are_independent(self, hidden_store):
        hidden_store.hide(1, 7, 2)
        session = ChannelSession(StubApi(own_and_foreign()), hidden_store, 1, 7)
        session.open()

        session.handle_event("message-deleted", {"channelId": 7, "messageId": 1})

        assert session.messages == []
        assert hidden_store.get(1, 7) == {2}

    def test_client_tests_are_marked_unit(self, request):
        """Stub-backed client tests run with the unit suite."""
        markers = {m.name for m in request.node.iter_markers()}

        assert "unit" in markers
        assert not markers & {"integration", "e2e"}


@pytest.mark.e2e
@pytest.mark.django_db
class TestChannelSessionEndToEnd:
    def test_delete_for_me_hides_only_for_that_user(self, api_for, hidden_store, alice, bob, channel):
        alice_session = ChannelSession(api_for(alice), hidden_store, alice.id, channel.id)
        bob_session = ChannelSession(api_for(bob), hidden_store, bob.id, channel.id)
        message = alice_session.send("hello")

        alice_session.delete_for_me(message["_id"])

        assert message["_id"] not in [m["_id"] for m in alice_session.open()]
        assert message["_id"] in [m["_id"] for m in bob_session.open()]
        assert Message.objects.filter(pk=message["_id"]).exists()

    def test_delete_for_everyone_removes_own_messages_for_all(
        self, api_for, hidden_store, alice, bob, channel
    ):
        alice_session = ChannelSession(api_for(alice), hidden_store, alice.id, channel.id)
        bob_session = ChannelSession(api_for(bob), hidden_store, bob.id, channel.id)
        own = alice_session.send("mine")
        foreign = bob_session.send("theirs")
        alice_session.open()

        result = alice_session.delete_for_everyone([own["_id"], foreign["_id"]])

        assert result.deleted == [own["_id"]]
        assert [m["_id"] for m in bob_session.open()] == [foreign["_id"]]
        assert not Message.objects.filter(pk=own["_id"]).exists()

    def test_message_deleted_elsewhere_counts_as_deleted(
        self, api_for, hidden_store, alice, channel
    ):
        session = ChannelSession(api_for(alice), hidden_store, alice.id, channel.id)
        first = session.send("one")
        second = session.send("two")
        api_for(alice).delete_message(first["_id"])

        result = session.delete_for_everyone([first["_id"], second["_id"]])

        assert result
        assert result.deleted == [first["_id"], second["_id"]]
        assert session.messages == []
        assert not Message.objects.filter(pk__in=result.deleted).exists()

    def test_sent_message_has_resolved_author(self, api_for, hidden_store, alice, channel):
        session = ChannelSession(api_for(alice), hidden_store, alice.id, channel.id)

        message = session.send("hello")

        assert message["author"]["username"] == "alice"
        assert session.open()[-1]["_id"] == message["_id"]

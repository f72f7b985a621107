"""
Tests for ChannelTimeline event reconciliation.
"""

import pytest

from chat_client.tests.helpers import make_message
from chat_client.timeline import ChannelTimeline


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def loaded_timeline(*ids, hidden=()):
    timeline = ChannelTimeline(7)
    timeline.load([make_message(i) for i in ids], hidden)
    return timeline


class TestSnapshot:
    def test_load_drops_hidden_ids(self):
        timeline = loaded_timeline(1, 2, 3, hidden={2})

        assert timeline.ids == [1, 3]

    def test_load_drops_duplicates(self):
        timeline = ChannelTimeline(7)
        timeline.load([make_message(1), make_message(1)])

        assert timeline.ids == [1]


class TestMessageEvents:
    def test_created_is_appended(self):
        timeline = loaded_timeline(1)

        changed = timeline.apply("message-created", {"channelId": 7, "message": make_message(2)})

        assert changed
        assert timeline.ids == [1, 2]

    def test_created_echo_of_local_copy_is_ignored(self):
        """
        Why it matters:
            The sender appends the server response and then receives the
            same message from the room; it must render once.
        """
        timeline = loaded_timeline(1)
        timeline.add(make_message(2))

        changed = timeline.apply("message-created", {"channelId": 7, "message": make_message(2)})

        assert not changed
        assert timeline.ids == [1, 2]

    def test_created_for_hidden_id_stays_hidden(self):
        timeline = loaded_timeline(1, hidden={2})

        timeline.apply("message-created", {"channelId": 7, "message": make_message(2)})

        assert timeline.ids == [1]

    def test_updated_replaces_in_place(self):
        timeline = loaded_timeline(1, 2, 3)
        edited = dict(make_message(2, content="hi"), isEdited=True)

        timeline.apply("message-updated", {"channelId": 7, "message": edited})

        assert timeline.ids == [1, 2, 3]
        assert timeline.get(2)["content"] == "hi"
        assert timeline.get(2)["isEdited"] is True

    def test_updated_for_unknown_id_is_ignored(self):
        timeline = loaded_timeline(1)

        assert not timeline.apply("message-updated", {"channelId": 7, "message": make_message(9)})
        assert timeline.ids == [1]

    def test_deleted_removes_without_touching_hidden_set(self):
        timeline = loaded_timeline(1, 2, hidden={5})

        timeline.apply("message-deleted", {"channelId": 7, "messageId": 2})

        assert timeline.ids == [1]
        assert timeline.hidden_ids == {5}

    def test_events_for_other_channels_are_ignored(self):
        timeline = loaded_timeline(1)

        changed = timeline.apply("message-created", {"channelId": 8, "message": make_message(2)})

        assert not changed
        assert timeline.ids == [1]

    def test_unknown_event_is_ignored(self):
        timeline = loaded_timeline(1)

        assert not timeline.apply("meeting-created", {"channelId": 7, "meeting": {}})

    @pytest.mark.parametrize(
        "event,data",
        [
            ("message-created", {"channelId": 7}),
            ("message-created", {"channelId": 7, "message": None}),
            ("message-updated", {"channelId": 7, "message": {"content": "no id"}}),
            ("message-deleted", {"channelId": 7}),
        ],
    )
    def test_incomplete_events_are_ignored(self, event, data):
        timeline = loaded_timeline(1)

        assert not timeline.apply(event, data)
        assert timeline.ids == [1]


class TestTyping:
    def test_typing_expires_after_two_seconds(self):
        clock = FakeClock()
        timeline = ChannelTimeline(7, clock=clock)

        timeline.apply("typing", {"channelId": 7, "username": "bob"})
        assert timeline.typing_users() == ["bob"]

        clock.now += 2.5
        assert timeline.typing_users() == []

    def test_stop_typing_removes_user(self):
        timeline = ChannelTimeline(7, clock=FakeClock())
        timeline.apply("typing", {"channelId": 7, "username": "bob"})
        timeline.apply("typing", {"channelId": 7, "username": "carol"})

        timeline.apply("stop-typing", {"channelId": 7, "username": "bob"})

        assert timeline.typing_users() == ["carol"]

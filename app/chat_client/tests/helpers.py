"""Shared test data for client sync layer tests."""

API_BASE_URL = "http://testserver/api/v1/"


def make_message(message_id, content="hello", author_id=1, channel_id=7, username="alice"):
    """Message in the shape returned by the API."""
    return {
        "_id": message_id,
        "content": content,
        "author": {"_id": author_id, "username": username, "avatar": "/a.png", "status": "online"},
        "channel": channel_id,
        "type": "text",
        "isEdited": False,
        "createdAt": "2026-01-01T00:00:00Z",
        "updatedAt": "2026-01-01T00:00:00Z",
    }

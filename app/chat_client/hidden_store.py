"""
Locally hidden ("delete for me") message ids.

The store is a JSON object persisted in a file on the client device:

    {"hiddenMessages_<userId>_<channelId>": [12, 15], ...}

Ids hidden by one account are never visible to another account on the
same device; hiding without a user id is refused.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from core.exceptions import ValidationError

logger = logging.getLogger(__name__)

KEY_PREFIX = "hiddenMessages"


def hidden_key(user_id, channel_id) -> str:
    if not user_id:
        raise ValidationError(
            "Hiding messages requires a signed-in user", error_code="IDENTITY_REQUIRED"
        )
    return f"{KEY_PREFIX}_{user_id}_{channel_id}"


class HiddenMessageStore:
    """
    Per-user, per-channel sets of hidden message ids backed by a JSON file.

    Args:
        path: File holding the hidden sets; created on first write
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, list[int]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable hidden message store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, list[int]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, sort_keys=True), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def get(self, user_id, channel_id) -> set[int]:
        """Hidden ids for the user in the channel; empty for anonymous users."""
        if not user_id:
            return set()
        return set(self._read().get(hidden_key(user_id, channel_id), []))

    def hide(self, user_id, channel_id, message_id: int) -> set[int]:
        """
        Add a message id to the user's hidden set for the channel.

        Raises:
            ValidationError: IDENTITY_REQUIRED when no user id is given
        """
        key = hidden_key(user_id, channel_id)
        data = self._read()
        hidden = set(data.get(key, []))
        hidden.add(message_id)
        data[key] = sorted(hidden)
        self._write(data)
        return hidden

    def clear(self, user_id, channel_id) -> None:
        key = hidden_key(user_id, channel_id)
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

# tests/conftest.py
from typing import Dict, List, Optional, Tuple

import pytest

from notifications.errors import PushDeliveryError
from notifications.models import User


class FakeUserDirectory:
    """In-memory users table: user id -> device token (None = no token)."""

    def __init__(self, tokens: Optional[Dict[str, Optional[str]]] = None):
        self.tokens: Dict[str, Optional[str]] = dict(tokens or {})
        self.lookups: List[str] = []

    async def get(self, user_id: str) -> Optional[User]:
        self.lookups.append(user_id)
        if user_id not in self.tokens:
            return None
        return User(id=user_id, fcm_token=self.tokens[user_id])

    async def set_token(self, user_id: str, device_token: str) -> None:
        self.tokens[user_id] = device_token

    async def clear_token(self, user_id: str) -> None:
        if user_id in self.tokens:
            self.tokens[user_id] = None


class FakePushSender:
    """Records every send; set `fail` to simulate a gateway rejection."""

    def __init__(self):
        self.sent: List[Tuple[str, str, str]] = []
        self.fail = False

    async def send(self, token: str, title: str, body: str) -> Optional[str]:
        if self.fail:
            raise PushDeliveryError("FCM rejected message (400)", status_code=400)
        self.sent.append((token, title, body))
        return f"projects/test/messages/{len(self.sent)}"


@pytest.fixture
def users() -> FakeUserDirectory:
    return FakeUserDirectory(
        {
            "alice": "alice-token-1234567890",
            "bob": "bob-token-1234567890",
            "carol": None,
        }
    )


@pytest.fixture
def push() -> FakePushSender:
    return FakePushSender()

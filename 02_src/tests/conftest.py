"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from responder.config import MetadataEntry, Settings  # noqa: E402
from responder.gateway import GatewayError  # noqa: E402
from responder.models import InboundMessage  # noqa: E402

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
DEVICE_ID = "d" * 24
MEMBER_A = "a" * 24
MEMBER_B = "b" * 24


class FakeGateway:
    """In-memory gateway double recording every write."""

    def __init__(self):
        self.devices = [
            {
                "id": DEVICE_ID,
                "phone": "+15550001111",
                "alias": "Support",
                "status": "operative",
                "session": {"status": "online"},
                "billing": {"subscription": {"product": "io"}},
            }
        ]
        self.team = [
            {
                "id": MEMBER_A,
                "status": "active",
                "role": "agent",
                "availability": {"mode": "auto"},
                "lastSeenAt": (NOW - timedelta(minutes=5)).isoformat(),
                "displayName": "Alice",
                "email": "alice@example.com",
            },
        ]
        self.labels = [{"name": "bot"}, {"name": "from-bot"}]
        self.webhooks: list[dict] = []
        self.sent: list[dict] = []
        self.label_updates: list[tuple[str, list[str]]] = []
        self.owners: dict[str, str | None] = {}
        self.metadata_updates: list[tuple[str, list[dict]]] = []
        self.created_labels: list[str] = []
        self.deleted_webhooks: list[str] = []
        self.created_webhooks: list[dict] = []
        self.send_failures = 0
        self.team_calls = 0
        self.fail_owner = False
        self.closed = False

    async def list_devices(self):
        return self.devices

    async def get_team(self, device_id):
        self.team_calls += 1
        return self.team

    async def get_labels(self, device_id):
        return self.labels

    async def create_label(self, device_id, name, color, description):
        self.created_labels.append(name)
        self.labels.append({"name": name, "color": color})
        return {"name": name}

    async def update_chat_labels(self, device_id, chat_id, labels):
        self.label_updates.append((chat_id, list(labels)))

    async def set_owner(self, device_id, chat_id, agent_id):
        if self.fail_owner:
            raise GatewayError("owner update failed", status=500)
        self.owners[chat_id] = agent_id

    async def update_contact_metadata(self, device_id, chat_id, entries):
        self.metadata_updates.append((chat_id, list(entries)))

    async def send_message(self, body):
        if self.send_failures > 0:
            self.send_failures -= 1
            raise GatewayError("send failed", status=503, detail={"message": "unavailable"})
        self.sent.append(body)
        return {"id": f"msg-{len(self.sent)}", "status": "queued"}

    async def list_webhooks(self):
        return self.webhooks

    async def create_webhook(self, body):
        webhook = {"id": f"wh-{len(self.created_webhooks) + 1}", "status": "active", **body}
        self.created_webhooks.append(webhook)
        return webhook

    async def delete_webhook(self, webhook_id):
        self.deleted_webhooks.append(webhook_id)

    async def close(self):
        self.closed = True


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    """Settings with a valid API key and fixed metadata values."""
    return Settings(
        api_key="k" * 64,
        bot_chat_metadata=(MetadataEntry("bot_start", "2024-05-01T12:00:00Z"),),
        assignment_metadata=(MetadataEntry("bot_stop", "2024-05-01T12:00:00Z"),),
    )


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def make_message():
    """Factory for inbound messages in gateway JSON shape."""

    def _make(body="hello", chat_id="chat-1", msg_type="text", selected_id=None, **chat_fields):
        chat = {
            "id": chat_id,
            "type": "chat",
            "fromNumber": "+15551234567",
            "labels": [],
            "status": "active",
            "waStatus": "active",
            "contact": {"phone": "+15551234567", "metadata": []},
            "lastOutboundMessageAt": "2024-04-30T10:00:00Z",
        }
        chat.update(chat_fields)
        data = {
            "id": "wamid-1",
            "body": body,
            "type": msg_type,
            "fromNumber": chat["fromNumber"],
            "chat": chat,
            "meta": {"isFirstMessage": False},
        }
        if selected_id is not None:
            data["quoted"] = {"selectedId": selected_id}
        return InboundMessage.from_dict(data)

    return _make


@pytest_asyncio.fixture
async def memory_store():
    """Create in-memory conversation store."""
    from responder.storage import InMemoryConversationStore

    st = InMemoryConversationStore()
    await st.init()
    yield st
    await st.close()


@pytest_asyncio.fixture
async def sqlite_store():
    """Create SQLite conversation store on an in-memory database."""
    from responder.storage import SqliteConversationStore

    st = SqliteConversationStore(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def event_bus():
    from responder.event_bus import EventBus

    return EventBus()


@pytest.fixture
def mock_dispatcher():
    """Create mock outbound dispatcher."""
    dispatcher = Mock()
    dispatcher.send = AsyncMock(return_value={"id": "msg-1", "status": "queued"})
    dispatcher.send_raw = AsyncMock(return_value={"id": "msg-1", "status": "queued"})
    return dispatcher

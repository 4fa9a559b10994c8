"""Tests for the gateway client, directory cache and chat sync."""

import json

import httpx
import pytest

from responder.config import MetadataEntry
from responder.gateway import (
    ChatSync,
    GatewayClient,
    GatewayDirectory,
    GatewayError,
    TTLCache,
    merge_labels,
)

DEVICE_ID = "d" * 24
MEMBER_A = "a" * 24


def mock_client(handler):
    return GatewayClient(
        api_key="k" * 64,
        api_url="https://api.example.test/v1/",
        transport=httpx.MockTransport(handler),
    )


class FakeClock:
    def __init__(self):
        self.value = 0.0

    def __call__(self):
        return self.value


class TestGatewayClient:
    """Tests for HTTP calls against a mock transport."""

    async def test_requests_are_authenticated(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[{"id": DEVICE_ID}])

        client = mock_client(handler)
        devices = await client.list_devices()
        await client.close()

        assert devices == [{"id": DEVICE_ID}]
        assert seen[0].headers["Authorization"] == "k" * 64
        assert seen[0].url.path == "/v1/devices"

    @pytest.mark.parametrize(
        "call,method,path",
        [
            (lambda c: c.get_team("dev"), "GET", "/v1/devices/dev/team"),
            (lambda c: c.get_labels("dev"), "GET", "/v1/devices/dev/labels"),
            (lambda c: c.update_chat_labels("dev", "c1", ["bot"]), "PATCH", "/v1/chat/dev/chats/c1/labels"),
            (lambda c: c.set_owner("dev", "c1", MEMBER_A), "PATCH", "/v1/chat/dev/chats/c1/owner"),
            (lambda c: c.update_contact_metadata("dev", "c1", []), "PATCH", "/v1/chat/dev/contacts/c1/metadata"),
            (lambda c: c.send_message({"phone": "+1"}), "POST", "/v1/messages"),
            (lambda c: c.list_webhooks(), "GET", "/v1/webhooks"),
            (lambda c: c.delete_webhook("wh1"), "DELETE", "/v1/webhooks/wh1"),
        ],
    )
    async def test_endpoints(self, call, method, path):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        client = mock_client(handler)
        await call(client)
        await client.close()

        assert seen[0].method == method
        assert seen[0].url.path == path

    async def test_json_body(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"id": "msg-1"})

        client = mock_client(handler)
        result = await client.set_owner("dev", "c1", MEMBER_A)
        await client.close()

        assert bodies == [{"agent": MEMBER_A}]
        assert result == {"id": "msg-1"}

    async def test_error_status_raises(self):
        def handler(request):
            return httpx.Response(401, json={"message": "Invalid API key"})

        client = mock_client(handler)
        with pytest.raises(GatewayError) as exc_info:
            await client.list_devices()
        await client.close()

        assert exc_info.value.status == 401
        assert exc_info.value.detail == {"message": "Invalid API key"}

    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = mock_client(handler)
        with pytest.raises(GatewayError) as exc_info:
            await client.get_team("dev")
        await client.close()

        assert exc_info.value.status is None

    async def test_empty_body(self):
        client = mock_client(lambda request: httpx.Response(204))
        assert await client.list_webhooks() == []
        await client.close()


class TestTTLCache:
    def test_entries_expire(self):
        clock = FakeClock()
        cache = TTLCache(ttl=10, clock=clock)
        cache.set("members", [1])

        clock.value = 9.9
        assert cache.get("members") == [1]

        clock.value = 10
        assert cache.get("members") is None

    def test_invalidate(self):
        cache = TTLCache()
        cache.set("labels", [])
        cache.invalidate("labels")
        assert cache.get("labels") is None


class TestGatewayDirectory:
    """Tests for cached roster and label reads."""

    async def test_members_are_cached(self, fake_gateway):
        directory = GatewayDirectory(fake_gateway, DEVICE_ID)

        first = await directory.get_members()
        second = await directory.get_members()

        assert fake_gateway.team_calls == 1
        assert first[0].id == MEMBER_A
        assert second is first

    async def test_force_refresh(self, fake_gateway):
        directory = GatewayDirectory(fake_gateway, DEVICE_ID)
        await directory.get_members()
        await directory.get_members(force=True)

        assert fake_gateway.team_calls == 2

    async def test_refetch_after_ttl(self, fake_gateway):
        clock = FakeClock()
        directory = GatewayDirectory(fake_gateway, DEVICE_ID, TTLCache(ttl=600, clock=clock))
        await directory.get_members()

        clock.value = 601
        await directory.get_members()

        assert fake_gateway.team_calls == 2

    async def test_ensure_labels_creates_missing_only(self, fake_gateway):
        directory = GatewayDirectory(fake_gateway, DEVICE_ID)

        created = await directory.ensure_labels(["bot", "assigned", "assigned"])

        assert created == ["assigned"]
        assert fake_gateway.created_labels == ["assigned"]
        names = [label["name"] for label in await directory.get_labels()]
        assert "assigned" in names

    async def test_ensure_labels_logs_failures(self, fake_gateway):
        async def failing(*args, **kwargs):
            raise GatewayError("boom", status=400)

        fake_gateway.create_label = failing
        directory = GatewayDirectory(fake_gateway, DEVICE_ID)

        assert await directory.ensure_labels(["new"]) == []


class TestMergeLabels:
    def test_add_and_remove(self):
        assert merge_labels(["a", "bot"], add=("c", "a"), remove=("bot",)) == ["a", "c"]

    def test_no_change(self):
        assert merge_labels(["a"]) == ["a"]


class TestChatSync:
    """Tests for label and metadata writes."""

    async def test_update_labels_patches_on_change(self, fake_gateway, make_message):
        chat = make_message(labels=["vip"]).chat
        sync = ChatSync(fake_gateway, DEVICE_ID)

        assert await sync.update_labels(chat, add=("bot",)) is True
        assert fake_gateway.label_updates == [("chat-1", ["vip", "bot"])]
        assert chat.labels == ["vip", "bot"]

    async def test_update_labels_skips_when_unchanged(self, fake_gateway, make_message):
        chat = make_message(labels=["bot"]).chat
        sync = ChatSync(fake_gateway, DEVICE_ID)

        assert await sync.update_labels(chat, add=("bot",)) is False
        assert fake_gateway.label_updates == []

    async def test_update_metadata(self, fake_gateway, make_message):
        chat = make_message(
            contact={"phone": "+1", "metadata": [{"key": "bot_start", "value": "old"}]}
        ).chat
        sync = ChatSync(fake_gateway, DEVICE_ID)
        entries = (
            MetadataEntry("bot_start", "old"),
            MetadataEntry("k" * 40, "v" * 1200),
            MetadataEntry("empty", lambda: ""),
            MetadataEntry("", "skip"),
        )

        pending = await sync.update_metadata(chat, entries)

        assert pending == [{"key": "k" * 30, "value": "v" * 1000}]
        assert fake_gateway.metadata_updates == [("chat-1", pending)]
        assert chat.contact.has_metadata("k" * 30, "v" * 1000)

    async def test_update_metadata_noop(self, fake_gateway, make_message):
        sync = ChatSync(fake_gateway, DEVICE_ID)
        assert await sync.update_metadata(make_message().chat, ()) == []
        assert fake_gateway.metadata_updates == []

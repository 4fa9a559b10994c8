"""Tests for data models."""

from datetime import datetime, timezone

import pytest

from responder.models import (
    Buttons,
    ContactCard,
    Contacts,
    Device,
    InboundMessage,
    InteractiveList,
    ListRow,
    ListSection,
    Location,
    Media,
    Reaction,
    TaskDescriptor,
    TaskKind,
    TeamMember,
    Text,
    parse_timestamp,
)


class TestInboundMessage:
    """Tests for parsing webhook message data."""

    def test_from_dict_full(self):
        data = {
            "id": "wamid-9",
            "body": "  hi  ",
            "type": "list_response",
            "fromNumber": "+34600000000",
            "quoted": {"selectedId": "2"},
            "meta": {"isFirstMessage": True},
            "chat": {
                "id": "chat-9",
                "type": "chat",
                "owner": {"agent": "a" * 24},
                "labels": ["bot"],
                "status": "active",
                "waStatus": "archived",
                "fromNumber": "+34600000000",
                "contact": {
                    "phone": "+34600000000",
                    "metadata": [{"key": "bot_start", "value": "x"}],
                },
                "lastOutboundMessageAt": "2024-01-01T10:00:00Z",
            },
        }

        message = InboundMessage.from_dict(data)

        assert message.id == "wamid-9"
        assert message.body == "  hi  "
        assert message.selected_id == "2"
        assert message.is_first_message is True
        assert message.chat.owner_agent == "a" * 24
        assert message.chat.labels == ["bot"]
        assert message.chat.wa_status == "archived"
        assert message.chat.contact.has_metadata("bot_start", "x")
        assert message.chat.last_outbound_message_at == datetime(
            2024, 1, 1, 10, 0, tzinfo=timezone.utc
        )

    def test_from_dict_minimal(self):
        message = InboundMessage.from_dict({"id": "m1", "chat": {"id": "c1"}})

        assert message.body == ""
        assert message.type == "text"
        assert message.selected_id is None
        assert message.chat.owner_agent is None
        assert message.chat.last_outbound_message_at is None

    def test_from_number_falls_back_to_message(self):
        message = InboundMessage.from_dict(
            {"id": "m1", "fromNumber": "+1555", "chat": {"id": "c1"}}
        )
        assert message.chat.from_number == "+1555"
        assert message.chat.contact.phone == "+1555"

    def test_missing_chat_raises(self):
        with pytest.raises(ValueError):
            InboundMessage.from_dict({"id": "m1"})

    def test_missing_id_raises(self):
        with pytest.raises(KeyError):
            InboundMessage.from_dict({"chat": {"id": "c1"}})


class TestTeamMemberAndDevice:
    def test_team_member_from_dict(self):
        member = TeamMember.from_dict(
            {
                "id": "a" * 24,
                "status": "active",
                "role": "supervisor",
                "availability": {"mode": "auto"},
                "lastSeenAt": "2024-05-01T11:00:00.000Z",
            }
        )
        assert member.availability_mode == "auto"
        assert member.last_seen_at == datetime(2024, 5, 1, 11, 0, tzinfo=timezone.utc)

    def test_device_from_dict(self):
        device = Device.from_dict(
            {
                "id": "d" * 24,
                "phone": "+1",
                "session": {"status": "online"},
                "billing": {"subscription": {"product": "io"}},
            }
        )
        assert device.session_status == "online"
        assert device.billing_product == "io"

    def test_parse_timestamp_empty(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None


class TestTaskDescriptor:
    def test_constructors(self):
        assert TaskDescriptor.reminder_create() == TaskDescriptor(TaskKind.REMINDER_CREATE, 1)
        assert TaskDescriptor.reminder_create(2, "24h").duration == "24h"
        assert TaskDescriptor.reminder_delete().kind is TaskKind.REMINDER_DELETE
        assert TaskDescriptor.demo_button().kind is TaskKind.DEMO_BUTTON


class TestPayloadFields:
    """Each payload variant renders its own gateway fields."""

    def test_text_with_deliver_at(self):
        fields = Text(
            "Hi", deliver_at=datetime(2024, 5, 2, 12, 0, tzinfo=timezone.utc)
        ).to_fields()
        assert fields == {"message": "Hi", "deliverAt": "2024-05-02T12:00:00Z"}

    def test_text_with_quote(self):
        assert Text("Hi", quote="m1").to_fields() == {"message": "Hi", "quote": "m1"}

    def test_media(self):
        assert Media(url="u", format="ptt").to_fields() == {"media": {"url": "u", "format": "ptt"}}
        assert Media(url="u", message="caption").to_fields() == {
            "media": {"url": "u"},
            "message": "caption",
        }

    def test_location_contacts_reaction(self):
        assert Location("Main St").to_fields() == {"location": {"address": "Main St"}}
        assert Contacts((ContactCard("Neo", "+1"),)).to_fields() == {
            "contacts": [{"name": "Neo", "phone": "+1"}]
        }
        assert Reaction("👍", "m1").to_fields() == {"reaction": "👍", "reactionMessage": "m1"}

    def test_buttons(self):
        fields = Buttons("Pick", ("A", "B"), header="H", footer="F").to_fields()
        assert fields["buttons"] == [{"text": "A"}, {"text": "B"}]
        assert fields["header"] == "H"
        assert fields["footer"] == "F"

    def test_interactive_list(self):
        payload = InteractiveList(
            description="Choose",
            button="Open",
            sections=(ListSection("S", (ListRow("1", "One", "first"),)),),
        )
        fields = payload.to_fields()
        assert fields["list"]["sections"][0]["rows"] == [
            {"id": "1", "title": "One", "description": "first"}
        ]
        assert "title" not in fields["list"]

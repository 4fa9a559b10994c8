"""Inbound message, chat and team models parsed from gateway JSON."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 gateway timestamp (``...Z`` accepted)."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass
class MetadataItem:
    """A key/value pair stored on a contact."""

    key: str
    value: str


@dataclass
class Contact:
    """The end-user behind a chat."""

    phone: str
    metadata: list[MetadataItem] = field(default_factory=list)

    def has_metadata(self, key: str, value: str) -> bool:
        return any(item.key == key and item.value == value for item in self.metadata)


@dataclass
class Chat:
    """A WhatsApp conversation as reported by the gateway."""

    id: str
    type: str  # "chat" or "group"
    contact: Contact
    owner_agent: str | None = None
    labels: list[str] = field(default_factory=list)
    status: str | None = None
    wa_status: str | None = None
    from_number: str | None = None
    last_outbound_message_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Chat":
        contact = data.get("contact") or {}
        owner = data.get("owner") or {}
        return cls(
            id=data["id"],
            type=data.get("type", "chat"),
            contact=Contact(
                phone=contact.get("phone") or data.get("fromNumber") or "",
                metadata=[
                    MetadataItem(key=item["key"], value=item.get("value", ""))
                    for item in contact.get("metadata") or []
                    if isinstance(item, dict) and item.get("key")
                ],
            ),
            owner_agent=owner.get("agent") or None,
            labels=list(data.get("labels") or []),
            status=data.get("status"),
            wa_status=data.get("waStatus"),
            from_number=data.get("fromNumber"),
            last_outbound_message_at=parse_timestamp(data.get("lastOutboundMessageAt")),
        )


@dataclass
class InboundMessage:
    """A message received through the ``message:in:new`` webhook."""

    id: str
    chat: Chat
    body: str = ""
    type: str = "text"
    selected_id: str | None = None  # quoted.selectedId on list responses
    is_first_message: bool = False
    from_number: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "InboundMessage":
        """Build from webhook ``data``. Raises KeyError/TypeError/ValueError on bad input."""
        if not isinstance(data, dict):
            raise TypeError("message data must be an object")
        if not isinstance(data.get("chat"), dict):
            raise ValueError("message data requires a chat object")
        chat = Chat.from_dict(data["chat"])
        if not chat.from_number:
            chat.from_number = data.get("fromNumber")
        if not chat.contact.phone:
            chat.contact.phone = data.get("fromNumber") or ""
        quoted = data.get("quoted") or {}
        meta = data.get("meta") or {}
        return cls(
            id=data["id"],
            chat=chat,
            body=data.get("body") or "",
            type=data.get("type") or "text",
            selected_id=quoted.get("selectedId") if isinstance(quoted, dict) else None,
            is_first_message=bool(meta.get("isFirstMessage")),
            from_number=data.get("fromNumber"),
        )


@dataclass
class TeamMember:
    """A human agent that can own conversations."""

    id: str
    status: str  # "active" | "inactive"
    role: str
    availability_mode: str | None = None
    last_seen_at: datetime | None = None
    display_name: str | None = None
    email: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "TeamMember":
        availability = data.get("availability") or {}
        return cls(
            id=data["id"],
            status=data.get("status", "inactive"),
            role=data.get("role", "agent"),
            availability_mode=availability.get("mode"),
            last_seen_at=parse_timestamp(data.get("lastSeenAt")),
            display_name=data.get("displayName"),
            email=data.get("email"),
        )


@dataclass
class Device:
    """A WhatsApp number connected to the gateway."""

    id: str
    phone: str
    alias: str | None = None
    status: str | None = None
    session_status: str | None = None
    billing_product: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Device":
        session = data.get("session") or {}
        billing = (data.get("billing") or {}).get("subscription") or {}
        return cls(
            id=data["id"],
            phone=data.get("phone", ""),
            alias=data.get("alias"),
            status=data.get("status"),
            session_status=session.get("status"),
            billing_product=billing.get("product"),
        )

"""Outbound payload variants.

Every variant renders its own gateway fields through ``to_fields()`` so the
dispatcher never has to inspect the payload type.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Union


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class Text:
    """Plain text, optionally quoting a message or scheduled for later."""

    message: str
    quote: str | None = None
    deliver_at: datetime | None = None

    def to_fields(self) -> dict:
        fields: dict = {"message": self.message}
        if self.quote:
            fields["quote"] = self.quote
        if self.deliver_at:
            fields["deliverAt"] = _iso(self.deliver_at)
        return fields


@dataclass(frozen=True)
class Media:
    """A media file by URL with an optional caption."""

    url: str
    message: str | None = None
    format: str | None = None  # "ptt" sends audio as a voice note

    def to_fields(self) -> dict:
        media = {"url": self.url}
        if self.format:
            media["format"] = self.format
        fields: dict = {"media": media}
        if self.message:
            fields["message"] = self.message
        return fields


@dataclass(frozen=True)
class Location:
    address: str

    def to_fields(self) -> dict:
        return {"location": {"address": self.address}}


@dataclass(frozen=True)
class ContactCard:
    name: str
    phone: str


@dataclass(frozen=True)
class Contacts:
    contacts: tuple[ContactCard, ...]

    def to_fields(self) -> dict:
        return {"contacts": [{"name": c.name, "phone": c.phone} for c in self.contacts]}


@dataclass(frozen=True)
class Reaction:
    """An emoji reaction to a previously received message."""

    emoji: str
    message_id: str

    def to_fields(self) -> dict:
        return {"reaction": self.emoji, "reactionMessage": self.message_id}


@dataclass(frozen=True)
class Buttons:
    message: str
    buttons: tuple[str, ...]
    header: str | None = None
    footer: str | None = None

    def to_fields(self) -> dict:
        fields: dict = {
            "message": self.message,
            "buttons": [{"text": text} for text in self.buttons],
        }
        if self.header:
            fields["header"] = self.header
        if self.footer:
            fields["footer"] = self.footer
        return fields


@dataclass(frozen=True)
class ListRow:
    id: str
    title: str
    description: str = ""


@dataclass(frozen=True)
class ListSection:
    title: str
    rows: tuple[ListRow, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class InteractiveList:
    description: str
    button: str
    sections: tuple[ListSection, ...]
    title: str | None = None
    footer: str | None = None

    def to_fields(self) -> dict:
        body: dict = {
            "description": self.description,
            "button": self.button,
            "sections": [
                {
                    "title": section.title,
                    "rows": [
                        {"id": row.id, "title": row.title, "description": row.description}
                        for row in section.rows
                    ],
                }
                for section in self.sections
            ],
        }
        if self.title:
            body["title"] = self.title
        if self.footer:
            body["footer"] = self.footer
        return {"list": body}


OutboundPayload = Union[Text, Media, Location, Contacts, Reaction, Buttons, InteractiveList]


def describe(payload: OutboundPayload) -> str:
    """Short human-readable summary for logs."""
    fields = payload.to_fields()
    if "message" in fields:
        return fields["message"][:100]
    if "list" in fields:
        return fields["list"]["description"][:100]
    return type(payload).__name__.lower()

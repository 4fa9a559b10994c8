"""Core data models for the responder."""

from .agents import BusMessage, Topic
from .conversation import Reminder, TaskDescriptor, TaskKind
from .messages import (
    Chat,
    Contact,
    Device,
    InboundMessage,
    MetadataItem,
    TeamMember,
    parse_timestamp,
)
from .payloads import (
    Buttons,
    ContactCard,
    Contacts,
    InteractiveList,
    ListRow,
    ListSection,
    Location,
    Media,
    OutboundPayload,
    Reaction,
    Text,
)

__all__ = [
    # Messages
    "Chat",
    "Contact",
    "Device",
    "InboundMessage",
    "MetadataItem",
    "TeamMember",
    "parse_timestamp",
    # Conversation
    "Reminder",
    "TaskDescriptor",
    "TaskKind",
    # Payloads
    "Buttons",
    "ContactCard",
    "Contacts",
    "InteractiveList",
    "ListRow",
    "ListSection",
    "Location",
    "Media",
    "OutboundPayload",
    "Reaction",
    "Text",
    # Agents
    "BusMessage",
    "Topic",
]

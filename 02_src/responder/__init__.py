"""Webhook responder core module."""

from .app import Application, IApplication
from .assignment import AssignmentService, IAssignmentService, select_member
from .config import ConfigError, Settings, load_settings
from .dispatch import IOutboundDispatcher, OutboundDispatcher
from .eligibility import can_reply
from .event_bus import EventBus, IEventBus
from .gateway import GatewayClient, GatewayDirectory, GatewayError, IGateway
from .models import (
    BusMessage,
    Chat,
    InboundMessage,
    OutboundPayload,
    Reminder,
    TaskDescriptor,
    TaskKind,
    TeamMember,
    Topic,
)
from .processing import IMessageProcessor, MessageProcessor
from .router import Decision, IIntentRouter, IntentRouter
from .storage import IConversationStore, InMemoryConversationStore, SqliteConversationStore

__all__ = [
    # Application
    "Application",
    "IApplication",
    "ConfigError",
    "Settings",
    "load_settings",
    # Models
    "BusMessage",
    "Chat",
    "InboundMessage",
    "OutboundPayload",
    "Reminder",
    "TaskDescriptor",
    "TaskKind",
    "TeamMember",
    "Topic",
    # Components
    "can_reply",
    "IConversationStore",
    "InMemoryConversationStore",
    "SqliteConversationStore",
    "IIntentRouter",
    "IntentRouter",
    "Decision",
    "IAssignmentService",
    "AssignmentService",
    "select_member",
    "IOutboundDispatcher",
    "OutboundDispatcher",
    "IEventBus",
    "EventBus",
    "IGateway",
    "GatewayClient",
    "GatewayDirectory",
    "GatewayError",
    "IMessageProcessor",
    "MessageProcessor",
]

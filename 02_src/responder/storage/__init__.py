"""Conversation state storage."""

from .sqlite_store import SqliteConversationStore
from .store import MAX_REMINDERS, IConversationStore, InMemoryConversationStore, KeyedLocks

__all__ = [
    "IConversationStore",
    "InMemoryConversationStore",
    "KeyedLocks",
    "MAX_REMINDERS",
    "SqliteConversationStore",
]

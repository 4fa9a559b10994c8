"""Conversation state models: task descriptors and reminders."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TaskKind(str, Enum):
    """Multi-step tasks a conversation can be in the middle of."""

    REMINDER_CREATE = "reminder-create"
    REMINDER_DELETE = "reminder-delete"
    DEMO_BUTTON = "demo-button"


@dataclass(frozen=True)
class TaskDescriptor:
    """Active task of a conversation. ``None`` stands for no task."""

    kind: TaskKind
    step: int = 1
    duration: str | None = None  # reminder-create step 2 only

    @classmethod
    def reminder_create(cls, step: int = 1, duration: str | None = None) -> "TaskDescriptor":
        return cls(kind=TaskKind.REMINDER_CREATE, step=step, duration=duration)

    @classmethod
    def reminder_delete(cls) -> "TaskDescriptor":
        return cls(kind=TaskKind.REMINDER_DELETE, step=1)

    @classmethod
    def demo_button(cls) -> "TaskDescriptor":
        return cls(kind=TaskKind.DEMO_BUTTON, step=1)


@dataclass(frozen=True)
class Reminder:
    """A reminder requested by the user of a conversation."""

    duration_code: str  # e.g. "24h", "2d"
    fire_at: datetime
    description: str

"""Conversation state store interface and in-memory implementation."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Protocol

from ..models import Reminder, TaskDescriptor

MAX_REMINDERS = 10


class IConversationStore(Protocol):
    """Per-conversation task descriptor and reminder sequence."""

    async def init(self) -> None:
        """Prepare the backend."""
        ...

    async def close(self) -> None:
        """Release the backend."""
        ...

    def lock(self, conversation_id: str):
        """Async context manager serializing mutations of one conversation."""
        ...

    # Task descriptors
    async def get_task(self, conversation_id: str) -> TaskDescriptor | None:
        """Get the active task, None when idle."""
        ...

    async def set_task(self, conversation_id: str, task: TaskDescriptor | None) -> None:
        """Replace the active task. None clears it."""
        ...

    # Reminders
    async def get_reminders(self, conversation_id: str) -> list[Reminder]:
        """Get reminders in creation order."""
        ...

    async def set_reminders(self, conversation_id: str, reminders: list[Reminder]) -> None:
        """Replace the reminder sequence."""
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


class KeyedLocks:
    """One asyncio.Lock per conversation id, dropped once nobody holds or awaits it."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}  # holders + waiters per key

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def __call__(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


class InMemoryConversationStore:
    """Process-wide store. State is lost on restart."""

    def __init__(self) -> None:
        self._tasks: dict[str, TaskDescriptor] = {}
        self._reminders: dict[str, list[Reminder]] = {}
        self.lock = KeyedLocks()

    async def init(self) -> None:
        return

    async def close(self) -> None:
        return

    async def get_task(self, conversation_id: str) -> TaskDescriptor | None:
        return self._tasks.get(conversation_id)

    async def set_task(self, conversation_id: str, task: TaskDescriptor | None) -> None:
        if task is None:
            self._tasks.pop(conversation_id, None)
        else:
            self._tasks[conversation_id] = task

    async def get_reminders(self, conversation_id: str) -> list[Reminder]:
        return list(self._reminders.get(conversation_id, []))

    async def set_reminders(self, conversation_id: str, reminders: list[Reminder]) -> None:
        if len(reminders) > MAX_REMINDERS:
            raise ValueError(f"at most {MAX_REMINDERS} reminders per conversation")
        if reminders:
            self._reminders[conversation_id] = list(reminders)
        else:
            self._reminders.pop(conversation_id, None)

    async def clear(self) -> None:
        self._tasks.clear()
        self._reminders.clear()

"""SQLite conversation store."""

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from ..models import Reminder, TaskDescriptor, TaskKind
from .store import MAX_REMINDERS, KeyedLocks

SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
    conversation_id TEXT PRIMARY KEY,
    kind TEXT NOT NULL,
    step INTEGER NOT NULL DEFAULT 1,
    duration TEXT,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS reminders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    conversation_id TEXT NOT NULL,
    duration_code TEXT NOT NULL,
    fire_at TEXT NOT NULL,
    description TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_reminders_conversation
    ON reminders (conversation_id, id);
"""


class SqliteConversationStore:
    """SQLite storage implementation. Locks are per process."""

    def __init__(self, db_path: str | Path = ":memory:"):
        self._db_path = db_path
        self._conn: aiosqlite.Connection | None = None
        self.lock = KeyedLocks()

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)
        await self._conn.executescript(SCHEMA)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _require_conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Storage not initialized")
        return self._conn

    # Task descriptors
    async def get_task(self, conversation_id: str) -> TaskDescriptor | None:
        conn = self._require_conn()
        cursor = await conn.execute(
            "SELECT kind, step, duration FROM tasks WHERE conversation_id = ?",
            (conversation_id,),
        )
        row = await cursor.fetchone()
        if not row:
            return None
        return TaskDescriptor(kind=TaskKind(row[0]), step=row[1], duration=row[2])

    async def set_task(self, conversation_id: str, task: TaskDescriptor | None) -> None:
        conn = self._require_conn()
        if task is None:
            await conn.execute(
                "DELETE FROM tasks WHERE conversation_id = ?", (conversation_id,)
            )
        else:
            await conn.execute(
                """
                INSERT OR REPLACE INTO tasks
                (conversation_id, kind, step, duration, updated_at)
                VALUES (?, ?, ?, ?, CURRENT_TIMESTAMP)
                """,
                (conversation_id, task.kind.value, task.step, task.duration),
            )
        await conn.commit()

    # Reminders
    async def get_reminders(self, conversation_id: str) -> list[Reminder]:
        conn = self._require_conn()
        cursor = await conn.execute(
            """
            SELECT duration_code, fire_at, description
            FROM reminders
            WHERE conversation_id = ?
            ORDER BY id ASC
            """,
            (conversation_id,),
        )
        rows = await cursor.fetchall()
        return [
            Reminder(
                duration_code=row[0],
                fire_at=datetime.fromisoformat(row[1]).astimezone(timezone.utc),
                description=row[2],
            )
            for row in rows
        ]

    async def set_reminders(self, conversation_id: str, reminders: list[Reminder]) -> None:
        if len(reminders) > MAX_REMINDERS:
            raise ValueError(f"at most {MAX_REMINDERS} reminders per conversation")
        conn = self._require_conn()
        await conn.execute(
            "DELETE FROM reminders WHERE conversation_id = ?", (conversation_id,)
        )
        await conn.executemany(
            """
            INSERT INTO reminders (conversation_id, duration_code, fire_at, description)
            VALUES (?, ?, ?, ?)
            """,
            [
                (conversation_id, r.duration_code, r.fire_at.isoformat(), r.description)
                for r in reminders
            ],
        )
        await conn.commit()

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        conn = self._require_conn()
        for table in ["tasks", "reminders"]:
            await conn.execute(f"DELETE FROM {table}")
        await conn.commit()

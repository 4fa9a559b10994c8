"""Cached roster and label reads."""

import random
import time
from dataclasses import dataclass
from typing import Any, Callable

from ..logging_config import get_logger
from ..models import TeamMember
from .client import GatewayError, IGateway

logger = get_logger(__name__)

CACHE_TTL_SECONDS = 10 * 60

LABEL_COLORS = [
    "tomato", "orange", "sunflower", "bubble",
    "rose", "poppy", "rouge", "raspberry",
    "purple", "lavender", "violet", "pool",
    "emerald", "kelly", "apple", "turquoise",
    "aqua", "gold", "latte", "cocoa",
]


@dataclass
class CacheEntry:
    data: Any
    fetched_at: float


class TTLCache:
    """Key/value cache with a fixed time-to-live."""

    def __init__(self, ttl: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None or self._clock() - entry.fetched_at >= self._ttl:
            return None
        return entry.data

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, fetched_at=self._clock())

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)


class GatewayDirectory:
    """Team roster and labels of one device, behind a TTL cache."""

    def __init__(self, gateway: IGateway, device_id: str, cache: TTLCache | None = None):
        self._gateway = gateway
        self._device_id = device_id
        self._cache = cache or TTLCache()

    async def get_members(self, force: bool = False) -> list[TeamMember]:
        if not force:
            cached = self._cache.get("members")
            if cached is not None:
                return cached
        raw = await self._gateway.get_team(self._device_id)
        members = [TeamMember.from_dict(item) for item in raw]
        self._cache.set("members", members)
        return members

    async def get_labels(self, force: bool = False) -> list[dict]:
        if not force:
            cached = self._cache.get("labels")
            if cached is not None:
                return cached
        labels = await self._gateway.get_labels(self._device_id)
        self._cache.set("labels", labels)
        return labels

    async def ensure_labels(self, names: list[str]) -> list[str]:
        """Create the labels missing on the device. Returns the names created."""
        existing = {label.get("name") for label in await self.get_labels()}
        missing = [name for name in dict.fromkeys(names) if name not in existing]
        created = []
        for name in missing:
            logger.info("Creating missing label: %s", name)
            try:
                await self._gateway.create_label(
                    self._device_id,
                    name=name[:30].strip(),
                    color=random.choice(LABEL_COLORS),
                    description="Automatically created label for the chatbot",
                )
                created.append(name)
            except GatewayError as e:
                logger.error("Failed to create label %s: %s", name, e)
        if missing:
            await self.get_labels(force=True)
        return created

"""Event bus data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Topic(str, Enum):
    """EventBus topics."""

    INBOUND = "inbound"  # accepted webhook message
    HANDOFF = "handoff"  # conversation should be assigned to a person


@dataclass
class BusMessage:
    """A message exchanged through EventBus."""

    id: str
    topic: Topic
    payload: dict  # varies by topic
    source: str  # component that published
    timestamp: datetime

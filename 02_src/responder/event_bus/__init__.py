"""EventBus module."""

from .event_bus import EventBus, IEventBus, TopicHandler, new_bus_message

__all__ = ["EventBus", "IEventBus", "TopicHandler", "new_bus_message"]

"""Gateway access module."""

from .chat_sync import ChatSync, merge_labels
from .client import GatewayClient, GatewayError, IGateway
from .directory import CACHE_TTL_SECONDS, GatewayDirectory, TTLCache

__all__ = [
    "CACHE_TTL_SECONDS",
    "ChatSync",
    "GatewayClient",
    "GatewayDirectory",
    "GatewayError",
    "IGateway",
    "TTLCache",
    "merge_labels",
]

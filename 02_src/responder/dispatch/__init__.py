"""Outbound dispatch module."""

from .dispatcher import MAX_SEND_ATTEMPTS, IOutboundDispatcher, OutboundDispatcher

__all__ = ["IOutboundDispatcher", "MAX_SEND_ATTEMPTS", "OutboundDispatcher"]

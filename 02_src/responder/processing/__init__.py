"""Processing module."""

from .processor import IMessageProcessor, MessageProcessor

__all__ = ["IMessageProcessor", "MessageProcessor"]

"""Intent router module."""

from .engine import HANDOFF_REPLY, Decision, IIntentRouter, IntentRouter
from .intents import match_menu, parse_number

__all__ = [
    "Decision",
    "HANDOFF_REPLY",
    "IIntentRouter",
    "IntentRouter",
    "match_menu",
    "parse_number",
]

"""Decides whether the bot may auto-reply to a chat."""

from .config import Settings
from .models import Chat


def _number_matches(numbers: tuple[str, ...], from_number: str) -> bool:
    # Configured numbers are E.164 digits, with or without the leading "+"
    return any(number == from_number or from_number[1:] == number for number in numbers)


def can_reply(chat: Chat, settings: Settings) -> bool:
    """Return True if the chat is eligible for an automated reply."""
    # Already assigned to a team member
    if chat.owner_agent:
        return False

    # Group chats are never handled
    if chat.type != "chat":
        return False

    if settings.skip_chat_labels and chat.labels:
        if any(label in chat.labels for label in settings.skip_chat_labels):
            return False

    from_number = chat.from_number or ""

    if settings.numbers_whitelist:
        if not from_number or not _number_matches(settings.numbers_whitelist, from_number):
            return False

    if settings.numbers_blacklist and from_number:
        if _number_matches(settings.numbers_blacklist, from_number):
            return False

    if settings.skip_archived_chats and "archived" in (chat.status, chat.wa_status):
        return False

    if "banned" in (chat.status, chat.wa_status):
        return False

    return True

"""Reminder durations, rendering and reply texts."""

import re
from datetime import datetime, timedelta

from ..models import Buttons, InteractiveList, ListRow, ListSection, Reminder

# (code, button label); option N of the menu is DURATION_OPTIONS[N - 1]
DURATION_OPTIONS: list[tuple[str, str]] = [
    ("1h", "1 hour"),
    ("2h", "2 hours"),
    ("24h", "24 hours"),
    ("2d", "2 days"),
    ("7d", "7 days"),
    ("14d", "14 days"),
]
CANCEL_OPTION = len(DURATION_OPTIONS) + 1

MIN_DESCRIPTION_LENGTH = 4
MAX_DESCRIPTION_LENGTH = 200
DATE_FORMAT = "%d/%m/%Y %H:%M"

# Deletion list rows are "reminder-<n>" so a tap never reads as a menu number
ROW_ID_PREFIX = "reminder-"
_ROW_ID_PATTERN = re.compile(rf"{ROW_ID_PREFIX}(\d+)")

_UNITS = {
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}

DESCRIPTION_PROMPT = "Please reply with a description for the reminder, up to 200 characters."
INVALID_OPTION = "Invalid option, please reply with one of the available option number (1 to 7)"
TOO_SHORT = (
    "The reminder text is too short, please send a larger description with 4 characters or more."
    "\n\nIf you do not want to continue, just reply with *stop*"
)
TOO_LONG = (
    "The reminder text is too long, please send a shorter description up to 200 characters."
    "\n\nIf you do not want to continue, just reply with *stop*"
)
MAX_REACHED = (
    "You have reached the maximum number of reminders, please delete one before creating a new one."
    "\n\nReply with *delete* to delete reminders."
)
CREATED = (
    "All good! I will send you a message when it is time 😀"
    "\n\nLet me know if I can do something else for you!"
)
NO_REMINDERS = (
    "You do not have any reminders yet."
    "\n\nCreate one by replying with *create* or *stop* to return to main menu."
)
NOT_FOUND = (
    "The selected reminder was not found."
    "\n\nPlease select a valid reminder by replying *delete* or *stop* to return to main menu."
)


def compute_fire_at(duration_code: str, now: datetime) -> datetime:
    """Absolute fire time for a code such as "2d": now plus 2 days."""
    value, unit = duration_code[:-1], duration_code[-1:]
    if unit not in _UNITS or not value.isdigit():
        raise ValueError(f"Invalid duration code: {duration_code!r}")
    return now + timedelta(**{_UNITS[unit]: int(value)})


def duration_for_option(option: int) -> str | None:
    if 1 <= option <= len(DURATION_OPTIONS):
        return DURATION_OPTIONS[option - 1][0]
    return None


def format_date(value: datetime) -> str:
    return value.strftime(DATE_FORMAT)


def duration_menu(footer: str | None) -> Buttons:
    return Buttons(
        message="Please select when you want to be reminded",
        header="Task reminder",
        footer=footer,
        buttons=tuple(label for _, label in DURATION_OPTIONS) + ("Cancel",),
    )


def reminder_text(description: str) -> str:
    return f"Hi! This is a reminder for you:\n\n{description}"


def render_listing(reminders: list[Reminder]) -> str:
    lines = [
        f"{index}. {format_date(item.fire_at)} - {item.description}"
        for index, item in enumerate(reminders, start=1)
    ]
    return "Here is a list of your reminders:\n\n" + "\n\n".join(lines)


def row_id(position: int) -> str:
    return f"{ROW_ID_PREFIX}{position}"


def parse_row_id(body: str) -> int | None:
    """1-based position encoded in a deletion list row id, None for anything else."""
    match = _ROW_ID_PATTERN.fullmatch(body.strip())
    return int(match.group(1)) if match else None


def deletion_menu(reminders: list[Reminder], footer: str | None) -> InteractiveList:
    """List of reminders to pick from. Row ids encode the 1-based positions."""
    rows = tuple(
        ListRow(
            id=row_id(index),
            title=f"{index}. {format_date(item.fire_at)}",
            description=item.description[:72],
        )
        for index, item in enumerate(reminders[:10], start=1)
    )
    return InteractiveList(
        description="Please select one reminder to delete or reply with *stop* to cancel",
        title="Task reminder",
        button="Select one option",
        footer=footer,
        sections=(ListSection(title="Active reminders", rows=rows),),
    )


def deleted_text(reminder: Reminder) -> str:
    return (
        "The following reminder was deleted successfully:"
        f"\n\nDate: {format_date(reminder.fire_at)}"
        f"\n\nDescription: {reminder.description}"
        "\n\nReply with *delete* to delete another reminder, *reminders* to list "
        "available reminders, or *stop* to return to main menu."
    )

"""Keyword and numeric intent matching.

All matching is case-insensitive substring search, evaluated in table order.
"""

import re
from typing import Callable

Predicate = Callable[[str, "int | None"], bool]

RESET_PATTERN = re.compile(r"help|cancel|stop|exit", re.IGNORECASE)
CANCEL_PATTERN = re.compile(r"cancel|stop|exit", re.IGNORECASE)
HANDOFF_PATTERN = re.compile(r"human|person|chat|talk", re.IGNORECASE)

# Reset keywords only count in short messages
RESET_MAX_LENGTH = 10

HANDOFF_CODE = 4

_NUMBER_PATTERN = re.compile(r"\d+")


def parse_number(body: str | None) -> int | None:
    """Parse a fully numeric body. "4pm", "", " " and None are non-numeric."""
    if body is None:
        return None
    text = body.strip()
    if not _NUMBER_PATTERN.fullmatch(text):
        return None
    return int(text)


def is_reset(body: str) -> bool:
    return bool(body) and len(body) < RESET_MAX_LENGTH and bool(RESET_PATTERN.search(body))


def is_cancel(body: str) -> bool:
    return bool(CANCEL_PATTERN.search(body))


def is_handoff(body: str, number: int | None) -> bool:
    return number == HANDOFF_CODE or bool(HANDOFF_PATTERN.search(body))


def number_is(value: int) -> Predicate:
    return lambda body, number: number == value


def exact(text: str) -> Predicate:
    return lambda body, number: body == text


def keyword(pattern: str) -> Predicate:
    compiled = re.compile(pattern, re.IGNORECASE)
    return lambda body, number: bool(compiled.search(body))


def any_of(*predicates: Predicate) -> Predicate:
    return lambda body, number: any(p(body, number) for p in predicates)


# Intent names of the main menu, most specific first. "list reminder" must stay
# ahead of the bare "list" demo so that it is reachable.
MENU_RULES: list[tuple[str, Predicate]] = [
    ("reminder-create", any_of(number_is(1), exact("reminder-create"), keyword("create|create reminder"))),
    ("reminder-list", any_of(number_is(2), exact("reminder-list"), keyword("list reminder|reminders"))),
    ("reminder-delete", any_of(number_is(3), exact("reminder-delete"), keyword("delete"))),
    ("button", keyword("button")),
    ("list", keyword("list")),
    ("image", keyword("image")),
    ("video", keyword("video")),
    ("audio", keyword("audio")),
    ("location", keyword("location|address")),
    ("contact", keyword("contact|card")),
    ("document", keyword("document|pdf")),
    ("file", keyword("file|zip")),
    ("excel", keyword("excel|xls")),
    ("format", keyword("format")),
    ("quote", keyword("quote|reply")),
    ("emoji", keyword("emoji")),
    ("react", keyword("react")),
    ("link", keyword("link|youtube")),
    ("text", keyword("text")),
]


def match_menu(body: str) -> str | None:
    """Return the first menu intent satisfied by the body, or None."""
    number = parse_number(body)
    for intent, predicate in MENU_RULES:
        if predicate(body, number):
            return intent
    return None

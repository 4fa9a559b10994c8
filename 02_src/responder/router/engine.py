"""Intent router: the per-conversation state machine."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from ..config import Settings
from ..models import InboundMessage, OutboundPayload, Reminder, TaskDescriptor, TaskKind, Text
from ..storage import MAX_REMINDERS
from . import reminders as rem
from .intents import is_cancel, is_handoff, is_reset, match_menu, parse_number
from .samples import BUTTON_MENU, BUTTON_SAMPLES, build_sample, is_sample

HANDOFF_REPLY = (
    "This chat was assigned to a member of our support team. "
    "You will be contacted shortly."
)


@dataclass
class Decision:
    """Outcome of routing one inbound message."""

    task: TaskDescriptor | None
    actions: list[OutboundPayload] = field(default_factory=list)
    reminders: list[Reminder] | None = None  # None leaves the sequence untouched
    handoff: bool = False


@dataclass
class _Turn:
    message: InboundMessage
    body: str
    task: TaskDescriptor | None
    reminders: list[Reminder]
    now: datetime


class IIntentRouter(Protocol):
    """Maps an inbound message and the conversation state to a Decision."""

    def handle(
        self,
        message: InboundMessage,
        task: TaskDescriptor | None,
        reminders: list[Reminder],
        now: datetime,
    ) -> Decision:
        """Route one message. Pure: the caller persists the Decision."""
        ...


class IntentRouter:
    """Keyword/number driven state machine for reminders, handoff and demos."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def handle(
        self,
        message: InboundMessage,
        task: TaskDescriptor | None,
        reminders: list[Reminder],
        now: datetime,
    ) -> Decision:
        body = message.body.strip()
        if message.type == "list_response" and message.selected_id:
            body = message.selected_id.strip()

        if not message.chat.last_outbound_message_at or message.is_first_message:
            return Decision(task=task, actions=[Text(self._welcome())])

        turn = _Turn(message=message, body=body, task=task, reminders=list(reminders), now=now)

        if is_reset(turn.body):
            turn.body = ""
            turn.task = None

        if is_handoff(turn.body, parse_number(turn.body)):
            return Decision(task=turn.task, actions=[Text(HANDOFF_REPLY)], handoff=True)

        if turn.task is not None:
            handler = {
                TaskKind.REMINDER_CREATE: self._continue_create,
                TaskKind.DEMO_BUTTON: self._continue_button,
                TaskKind.REMINDER_DELETE: self._continue_delete,
            }[turn.task.kind]
            decision = handler(turn)
            if decision is not None:
                return decision

        return self._menu(turn)

    # Active tasks. Each returns a Decision, or None to fall through to the menu.

    def _continue_create(self, turn: _Turn) -> Decision | None:
        task = turn.task
        number = parse_number(turn.body)

        if task.step == 1 and (number == rem.CANCEL_OPTION or turn.body.lower() == "x"):
            turn.task = None
            turn.body = ""
            return None

        if len(turn.reminders) >= MAX_REMINDERS:
            return Decision(task=task, actions=[Text(rem.MAX_REACHED)])

        if task.step == 1 or not task.duration:
            duration = rem.duration_for_option(number) if number is not None else None
            if duration:
                return Decision(
                    task=TaskDescriptor.reminder_create(step=2, duration=duration),
                    actions=[Text(rem.DESCRIPTION_PROMPT)],
                )
            return Decision(
                task=TaskDescriptor.reminder_create(step=1),
                actions=[Text(rem.INVALID_OPTION), rem.duration_menu(self._settings.footer)],
            )

        description = turn.body
        if len(description) < rem.MIN_DESCRIPTION_LENGTH:
            return Decision(task=task, actions=[Text(rem.TOO_SHORT)])
        if len(description) > rem.MAX_DESCRIPTION_LENGTH:
            return Decision(task=task, actions=[Text(rem.TOO_LONG)])

        fire_at = rem.compute_fire_at(task.duration, turn.now)
        reminder = Reminder(duration_code=task.duration, fire_at=fire_at, description=description)
        return Decision(
            task=None,
            reminders=turn.reminders + [reminder],
            actions=[
                Text(rem.CREATED),
                Text(rem.reminder_text(description), deliver_at=fire_at),
            ],
        )

    def _continue_button(self, turn: _Turn) -> Decision | None:
        number = parse_number(turn.body)
        if number == len(BUTTON_SAMPLES) + 1 or is_cancel(turn.body):
            turn.task = None
            turn.body = ""
        elif number is not None and 1 <= number <= len(BUTTON_SAMPLES):
            turn.body = BUTTON_SAMPLES[number - 1]
        else:
            turn.task = None
            turn.body = ""
        return None

    def _continue_delete(self, turn: _Turn) -> Decision | None:
        if is_cancel(turn.body):
            turn.task = None
            turn.body = ""
            return None

        if not turn.reminders:
            return Decision(task=None, actions=[Text(rem.NO_REMINDERS)])

        number = rem.parse_row_id(turn.body)
        if number is None:
            number = parse_number(turn.body)
        if number is None or not 1 <= number <= MAX_REMINDERS:
            return None

        index = number - 1
        if index >= len(turn.reminders):
            return Decision(task=None, actions=[Text(rem.NOT_FOUND)])

        removed = turn.reminders[index]
        remaining = turn.reminders[:index] + turn.reminders[index + 1:]
        return Decision(
            task=None,
            reminders=remaining,
            actions=[Text(rem.deleted_text(removed))],
        )

    # Main menu

    def _menu(self, turn: _Turn) -> Decision:
        intent = match_menu(turn.body)
        footer = self._settings.footer

        if intent == "reminder-create":
            return Decision(
                task=TaskDescriptor.reminder_create(step=1),
                actions=[rem.duration_menu(footer)],
            )

        if intent == "reminder-list":
            if not turn.reminders:
                return Decision(task=turn.task, actions=[Text(rem.NO_REMINDERS)])
            return Decision(task=turn.task, actions=[Text(rem.render_listing(turn.reminders))])

        if intent == "reminder-delete":
            if not turn.reminders:
                return Decision(task=turn.task, actions=[Text(rem.NO_REMINDERS)])
            return Decision(
                task=TaskDescriptor.reminder_delete(),
                actions=[rem.deletion_menu(turn.reminders, footer)],
            )

        if intent == "button":
            return Decision(task=TaskDescriptor.demo_button(), actions=[BUTTON_MENU])

        if intent is not None and is_sample(intent):
            return Decision(task=turn.task, actions=[build_sample(intent, turn.message.id)])

        return Decision(task=turn.task, actions=[Text(self._unknown())])

    def _welcome(self) -> str:
        return f"{self._settings.welcome_message}\n\n{self._settings.default_message}"

    def _unknown(self) -> str:
        return f"{self._settings.unknown_command_message}\n\n{self._settings.default_message}"

"""Handoff of conversations to team members."""

import random
from datetime import datetime, timezone
from typing import Callable, Protocol

from ..config import Settings
from ..event_bus import IEventBus
from ..gateway import ChatSync, GatewayDirectory, GatewayError, IGateway
from ..logging_config import get_logger, log_context
from ..models import BusMessage, InboundMessage, TeamMember, Topic
from .selector import select_member

logger = get_logger(__name__)


class IAssignmentService(Protocol):
    """Assigns a conversation to a human team member."""

    async def start(self) -> None:
        """Subscribe to HANDOFF events."""
        ...

    async def assign(self, message: InboundMessage) -> TeamMember | None:
        """Select a member and hand the chat over. None if nobody was assigned."""
        ...


class AssignmentService:
    """Consumes HANDOFF events and transfers chat ownership."""

    def __init__(
        self,
        settings: Settings,
        gateway: IGateway,
        directory: GatewayDirectory,
        chat_sync: ChatSync,
        device_id: str,
        event_bus: IEventBus | None = None,
        clock: Callable[[], datetime] | None = None,
        choose: Callable | None = None,
    ):
        self._settings = settings
        self._gateway = gateway
        self._directory = directory
        self._chat_sync = chat_sync
        self._device_id = device_id
        self._event_bus = event_bus
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._choose = choose or random.choice

    async def start(self) -> None:
        if self._event_bus is not None:
            self._event_bus.subscribe(Topic.HANDOFF, self._handle_handoff)

    async def _handle_handoff(self, bus_message: BusMessage) -> None:
        await self.assign(bus_message.payload["message"])

    async def assign(self, message: InboundMessage) -> TeamMember | None:
        chat = message.chat
        if not self._settings.enable_member_chat_assignment:
            logger.debug(
                "Unable to assign chat %s: member chat assignment is disabled", chat.id
            )
            return None

        try:
            members = await self._directory.get_members()
            member = select_member(members, self._settings, self._clock(), choose=self._choose)
            if member is None:
                logger.info(
                    "Unable to assign chat %s: no eligible or available team members", chat.id
                )
                return None

            remove = (
                self._settings.bot_chat_labels
                if self._settings.remove_labels_after_assignment
                else ()
            )
            await self._chat_sync.update_labels(
                chat, add=self._settings.assignment_labels, remove=remove
            )

            logger.info(
                "Automatically assign chat %s to %s %s",
                chat.id,
                member.display_name,
                member.email,
                extra=log_context(message, member_id=member.id),
            )
            await self._gateway.set_owner(self._device_id, chat.id, member.id)
            chat.owner_agent = member.id

            if self._settings.assignment_metadata:
                await self._chat_sync.update_metadata(chat, self._settings.assignment_metadata)

            return member
        except GatewayError as e:
            logger.error(
                "Failed to assign chat %s (message %s): %s",
                chat.id,
                message.id,
                e,
                extra=log_context(message),
            )
            return None

"""MessageProcessor: eligibility, routing, state persistence and replies."""

from datetime import datetime, timezone
from typing import Callable, Protocol

from ..config import Settings
from ..dispatch import IOutboundDispatcher
from ..eligibility import can_reply
from ..event_bus import IEventBus, new_bus_message
from ..gateway import ChatSync, GatewayError
from ..logging_config import get_logger, log_context
from ..models import BusMessage, InboundMessage, Topic
from ..router import Decision, IIntentRouter
from ..storage import IConversationStore

logger = get_logger(__name__)


class IMessageProcessor(Protocol):
    """Handles accepted inbound messages."""

    async def start(self) -> None:
        """Subscribe to INBOUND events."""
        ...

    async def process(self, message: InboundMessage) -> Decision | None:
        """Process one message. None when the chat is not eligible."""
        ...


class MessageProcessor:
    """Runs one inbound message through the engine and sends the replies."""

    def __init__(
        self,
        settings: Settings,
        store: IConversationStore,
        router: IIntentRouter,
        dispatcher: IOutboundDispatcher,
        event_bus: IEventBus,
        chat_sync: ChatSync | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._settings = settings
        self._store = store
        self._router = router
        self._dispatcher = dispatcher
        self._event_bus = event_bus
        self._chat_sync = chat_sync
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def start(self) -> None:
        self._event_bus.subscribe(Topic.INBOUND, self._handle_inbound)

    async def _handle_inbound(self, bus_message: BusMessage) -> None:
        await self.process(bus_message.payload["message"])

    async def process(self, message: InboundMessage) -> Decision | None:
        chat = message.chat
        if not can_reply(chat, self._settings):
            logger.info(
                "Skip message due to chat already assigned or not eligible to reply: %s %s",
                chat.id,
                message.from_number,
                extra=log_context(message, phone=message.from_number),
            )
            return None

        logger.info(
            "New inbound message received: %s %s",
            chat.id,
            message.body or "<empty message>",
            extra=log_context(message),
        )

        async with self._store.lock(chat.id):
            task = await self._store.get_task(chat.id)
            reminders = await self._store.get_reminders(chat.id)
            decision = self._router.handle(message, task, reminders, self._clock())
            if decision.task != task:
                await self._store.set_task(chat.id, decision.task)
            if decision.reminders is not None:
                await self._store.set_reminders(chat.id, decision.reminders)

        if decision.handoff:
            self._event_bus.dispatch(
                new_bus_message(Topic.HANDOFF, {"message": message}, source="message_processor")
            )

        delivered = 0
        for action in decision.actions:
            result = await self._dispatcher.send(chat.contact.phone, action)
            if result:
                delivered += 1
            else:
                logger.warning(
                    "Reply not confirmed for chat %s: %s",
                    chat.id,
                    type(action).__name__,
                    extra=log_context(message),
                )

        # A handed-off chat gets the assignment labels instead
        if delivered and not decision.handoff:
            await self._sync_bot_chat(message)

        return decision

    async def _sync_bot_chat(self, message: InboundMessage) -> None:
        """Tag a bot-managed chat with the configured labels and metadata."""
        if self._chat_sync is None:
            return
        chat = message.chat
        try:
            if self._settings.bot_chat_labels:
                await self._chat_sync.update_labels(chat, add=self._settings.bot_chat_labels)
            if self._settings.bot_chat_metadata:
                await self._chat_sync.update_metadata(chat, self._settings.bot_chat_metadata)
        except GatewayError as e:
            logger.error(
                "Failed to update bot chat labels/metadata for %s: %s",
                chat.id,
                e,
                extra=log_context(message),
            )

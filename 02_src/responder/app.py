"""Application bootstrap and lifecycle management."""

from datetime import datetime, timezone
from typing import Callable, Protocol

from .assignment import AssignmentService
from .config import ConfigError, Settings, resolve_db_path, validate_team_members
from .dispatch import OutboundDispatcher
from .event_bus import EventBus, new_bus_message
from .gateway import ChatSync, GatewayClient, GatewayDirectory, IGateway
from .logging_config import get_logger
from .models import Device, InboundMessage, Topic
from .processing import MessageProcessor
from .router import IntentRouter
from .storage import IConversationStore, InMemoryConversationStore, SqliteConversationStore

logger = get_logger(__name__)

WEBHOOK_EVENTS = ["message:in:new"]


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    def submit(self, message: InboundMessage) -> None:
        """Queue an inbound message for background processing."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings,
        gateway: IGateway | None = None,
        store: IConversationStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._settings = settings
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        # Injected or created in start()
        self._gateway: IGateway | None = gateway
        self._store: IConversationStore | None = store

        # Components (will be initialized in start())
        self._device: Device | None = None
        self._event_bus: EventBus | None = None
        self._directory: GatewayDirectory | None = None
        self._dispatcher: OutboundDispatcher | None = None
        self._assignment: AssignmentService | None = None
        self._processor: MessageProcessor | None = None
        self._webhook: dict | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")
        settings = self._settings
        settings.validate()

        # 1. Gateway client and store (no dependencies)
        if self._gateway is None:
            self._gateway = GatewayClient(api_key=settings.api_key, api_url=settings.api_url)
        if self._store is None:
            db_path = resolve_db_path(settings.state_db_path)
            self._store = SqliteConversationStore(db_path) if db_path else InMemoryConversationStore()
        await self._store.init()
        logger.info("Conversation store initialized: %s", type(self._store).__name__)

        # 2. Device
        self._device = await self._load_device()
        logger.info(
            "Using WhatsApp connected number: %s %s (ID = %s)",
            self._device.phone,
            self._device.alias,
            self._device.id,
        )

        # 3. Roster and labels (depends on device)
        self._directory = GatewayDirectory(self._gateway, self._device.id)
        members = await self._directory.get_members()
        await self._directory.get_labels()
        await self._directory.ensure_labels(
            list(settings.assignment_labels) + list(settings.bot_chat_labels)
        )
        validate_team_members(settings, {member.id for member in members})

        # 4. EventBus, dispatcher, router
        self._event_bus = EventBus()
        self._dispatcher = OutboundDispatcher(self._gateway, self._device.id)
        chat_sync = ChatSync(self._gateway, self._device.id)

        # 5. Assignment (depends on EventBus + directory)
        self._assignment = AssignmentService(
            settings=settings,
            gateway=self._gateway,
            directory=self._directory,
            chat_sync=chat_sync,
            device_id=self._device.id,
            event_bus=self._event_bus,
            clock=self._clock,
        )
        await self._assignment.start()

        # 6. Processor (depends on everything above)
        self._processor = MessageProcessor(
            settings=settings,
            store=self._store,
            router=IntentRouter(settings),
            dispatcher=self._dispatcher,
            event_bus=self._event_bus,
            chat_sync=chat_sync,
            clock=self._clock,
        )
        await self._processor.start()

        # 7. Webhook endpoint
        if settings.webhook_url:
            self._webhook = await self._register_webhook(settings.webhook_url)
            logger.info("Using webhook endpoint: %s", self._webhook.get("url"))
        else:
            logger.warning(
                "WEBHOOK_URL is not set: make sure a webhook for %s points to this server",
                WEBHOOK_EVENTS,
            )

        logger.info("Chatbot server ready and waiting for messages")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._event_bus:
            await self._event_bus.drain()
        if self._store:
            await self._store.close()
            logger.info("Conversation store closed")
        if self._gateway:
            await self._gateway.close()

    def submit(self, message: InboundMessage) -> None:
        """Queue an inbound message for background processing."""
        self.event_bus.dispatch(
            new_bus_message(Topic.INBOUND, {"message": message}, source="webhook")
        )

    async def _load_device(self) -> Device:
        """Find the configured device, or the first operative one."""
        devices = [Device.from_dict(item) for item in await self._gateway.list_devices()]
        if self._settings.device:
            device = next((d for d in devices if d.id == self._settings.device), None)
        else:
            device = next((d for d in devices if d.status == "operative"), None)

        if device is None:
            raise ConfigError(
                "No active WhatsApp numbers in your account. "
                "Please connect a WhatsApp number in your Wassenger account"
            )
        if device.session_status != "online":
            raise ConfigError(
                f"WhatsApp number ({device.alias}) is not online. "
                "Please make sure the WhatsApp number is properly connected"
            )
        if device.billing_product != "io":
            raise ConfigError(
                f"WhatsApp number plan ({device.alias}) does not support inbound messages. "
                "Please upgrade the plan"
            )
        return device

    async def _register_webhook(self, base_url: str) -> dict:
        """Reuse a matching active webhook or replace stale tunnel ones."""
        base_url = base_url.rstrip("/")
        webhook_url = f"{base_url}/webhook"
        webhooks = await self._gateway.list_webhooks()

        for webhook in webhooks:
            if (
                webhook.get("url") == webhook_url
                and webhook.get("device") == self._device.id
                and webhook.get("status") == "active"
                and "message:in:new" in (webhook.get("events") or [])
            ):
                return webhook

        for webhook in webhooks:
            url = webhook.get("url") or ""
            if "ngrok-free.app" in url or url.startswith(base_url):
                logger.info("Deleting stale webhook: %s", url)
                await self._gateway.delete_webhook(webhook["id"])

        return await self._gateway.create_webhook(
            {
                "url": webhook_url,
                "name": "Chatbot",
                "events": WEBHOOK_EVENTS,
                "device": self._device.id,
            }
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def device(self) -> Device:
        """Get the connected device."""
        if not self._device:
            raise RuntimeError("Application not started")
        return self._device

    @property
    def event_bus(self) -> EventBus:
        """Get event bus instance."""
        if not self._event_bus:
            raise RuntimeError("Application not started")
        return self._event_bus

    @property
    def dispatcher(self) -> OutboundDispatcher:
        """Get outbound dispatcher instance."""
        if not self._dispatcher:
            raise RuntimeError("Application not started")
        return self._dispatcher

    @property
    def store(self) -> IConversationStore:
        """Get conversation store instance."""
        if not self._store:
            raise RuntimeError("Application not started")
        return self._store

    @property
    def processor(self) -> MessageProcessor:
        """Get message processor instance."""
        if not self._processor:
            raise RuntimeError("Application not started")
        return self._processor

    @property
    def assignment(self) -> AssignmentService:
        """Get assignment service instance."""
        if not self._assignment:
            raise RuntimeError("Application not started")
        return self._assignment

"""Label and metadata synchronization for a chat."""

from ..config import MetadataEntry
from ..logging_config import get_logger
from ..models import Chat, MetadataItem
from .client import IGateway

logger = get_logger(__name__)


def merge_labels(
    current: list[str],
    add: tuple[str, ...] = (),
    remove: tuple[str, ...] = (),
) -> list[str]:
    """Current labels minus ``remove`` plus ``add``, keeping order and no duplicates."""
    labels = [label for label in current if label not in remove]
    for label in add:
        if label not in labels:
            labels.append(label)
    return labels


class ChatSync:
    """Writes label and metadata changes of a chat to the gateway."""

    def __init__(self, gateway: IGateway, device_id: str):
        self._gateway = gateway
        self._device_id = device_id

    async def update_labels(
        self,
        chat: Chat,
        add: tuple[str, ...] = (),
        remove: tuple[str, ...] = (),
    ) -> bool:
        """Patch the chat labels if they change. Returns True when patched."""
        labels = merge_labels(chat.labels, add=add, remove=remove)
        if labels == chat.labels:
            return False
        logger.info("Update chat labels: %s %s", chat.id, labels)
        await self._gateway.update_chat_labels(self._device_id, chat.id, labels)
        chat.labels = labels
        return True

    async def update_metadata(self, chat: Chat, entries: tuple[MetadataEntry, ...]) -> list[dict]:
        """Set metadata pairs not already present on the contact."""
        pending = []
        for entry in entries:
            if not entry.key:
                continue
            value = entry.resolve()
            if not value or not isinstance(value, str):
                continue
            key, value = entry.key[:30].strip(), value[:1000].strip()
            if chat.contact.has_metadata(key, value):
                continue
            pending.append({"key": key, "value": value})

        if pending:
            await self._gateway.update_contact_metadata(self._device_id, chat.id, pending)
            chat.contact.metadata.extend(MetadataItem(**item) for item in pending)
        return pending

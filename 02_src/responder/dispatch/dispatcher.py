"""Outbound message dispatch with bounded retry."""

from typing import Protocol

from ..gateway import GatewayError, IGateway
from ..logging_config import get_logger, log_context
from ..models import OutboundPayload
from ..models.payloads import describe

logger = get_logger(__name__)

MAX_SEND_ATTEMPTS = 3


class IOutboundDispatcher(Protocol):
    """Sends reply payloads through the gateway."""

    async def send(self, phone: str, payload: OutboundPayload) -> dict | None:
        """Send a payload. None when the send could not be confirmed."""
        ...

    async def send_raw(self, fields: dict) -> dict | None:
        """Send caller-supplied gateway fields. None on failure."""
        ...


class OutboundDispatcher:
    """Posts messages to the gateway, retrying up to MAX_SEND_ATTEMPTS times."""

    def __init__(self, gateway: IGateway, device_id: str, attempts: int = MAX_SEND_ATTEMPTS):
        self._gateway = gateway
        self._device_id = device_id
        self._attempts = attempts

    async def send(self, phone: str, payload: OutboundPayload) -> dict | None:
        fields = {"phone": phone, **payload.to_fields()}
        return await self._post(fields, summary=describe(payload))

    async def send_raw(self, fields: dict) -> dict | None:
        summary = str(fields.get("message") or "<no message>")[:100]
        return await self._post(dict(fields), summary=summary)

    async def _post(self, fields: dict, summary: str) -> dict | None:
        body = {"device": self._device_id, **fields, "enqueue": "never"}
        phone = body.get("phone")

        for attempt in range(1, self._attempts + 1):
            try:
                result = await self._gateway.send_message(body)
            except GatewayError as e:
                logger.error(
                    "Failed to send message to %s (attempt %s/%s): %s %s",
                    phone,
                    attempt,
                    self._attempts,
                    summary,
                    e.detail if e.detail is not None else e,
                    extra=log_context(phone=phone, device_id=self._device_id),
                )
                continue

            result = result or {}
            logger.info(
                "Message sent: %s %s %s",
                phone,
                result.get("id"),
                result.get("status"),
                extra=log_context(phone=phone, message_id=result.get("id")),
            )
            return result

        return None

"""Async client for the Wassenger messaging gateway."""

from typing import Any, Protocol

import httpx

from ..config import DEFAULT_API_URL
from ..logging_config import get_logger

logger = get_logger(__name__)


class GatewayError(Exception):
    """A gateway call failed (transport error or non-2xx response)."""

    def __init__(self, message: str, status: int | None = None, detail: Any = None):
        super().__init__(message)
        self.status = status
        self.detail = detail


class IGateway(Protocol):
    """Authenticated reads and writes against the gateway API."""

    async def list_devices(self) -> list[dict]:
        ...

    async def get_team(self, device_id: str) -> list[dict]:
        ...

    async def get_labels(self, device_id: str) -> list[dict]:
        ...

    async def create_label(self, device_id: str, name: str, color: str, description: str) -> dict:
        ...

    async def update_chat_labels(self, device_id: str, chat_id: str, labels: list[str]) -> Any:
        ...

    async def set_owner(self, device_id: str, chat_id: str, agent_id: str) -> Any:
        ...

    async def update_contact_metadata(self, device_id: str, chat_id: str, entries: list[dict]) -> Any:
        ...

    async def send_message(self, body: dict) -> dict:
        ...

    async def list_webhooks(self) -> list[dict]:
        ...

    async def create_webhook(self, body: dict) -> dict:
        ...

    async def delete_webhook(self, webhook_id: str) -> None:
        ...

    async def close(self) -> None:
        ...


class GatewayClient:
    """httpx based gateway client. Every call raises GatewayError on failure."""

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={"Authorization": api_key},
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise GatewayError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            raise GatewayError(
                f"{method} {path} returned {response.status_code}",
                status=response.status_code,
                detail=detail,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    # Devices and team
    async def list_devices(self) -> list[dict]:
        return await self._request("GET", "/devices") or []

    async def get_team(self, device_id: str) -> list[dict]:
        return await self._request("GET", f"/devices/{device_id}/team") or []

    # Labels
    async def get_labels(self, device_id: str) -> list[dict]:
        return await self._request("GET", f"/devices/{device_id}/labels") or []

    async def create_label(self, device_id: str, name: str, color: str, description: str) -> dict:
        body = {"name": name, "color": color, "description": description}
        return await self._request("POST", f"/devices/{device_id}/labels", json=body)

    async def update_chat_labels(self, device_id: str, chat_id: str, labels: list[str]) -> Any:
        return await self._request(
            "PATCH", f"/chat/{device_id}/chats/{chat_id}/labels", json=labels
        )

    # Ownership
    async def set_owner(self, device_id: str, chat_id: str, agent_id: str) -> Any:
        return await self._request(
            "PATCH", f"/chat/{device_id}/chats/{chat_id}/owner", json={"agent": agent_id}
        )

    # Metadata
    async def update_contact_metadata(self, device_id: str, chat_id: str, entries: list[dict]) -> Any:
        return await self._request(
            "PATCH", f"/chat/{device_id}/contacts/{chat_id}/metadata", json=entries
        )

    # Messages
    async def send_message(self, body: dict) -> dict:
        return await self._request("POST", "/messages", json=body)

    # Webhooks
    async def list_webhooks(self) -> list[dict]:
        return await self._request("GET", "/webhooks") or []

    async def create_webhook(self, body: dict) -> dict:
        return await self._request("POST", "/webhooks", json=body)

    async def delete_webhook(self, webhook_id: str) -> None:
        await self._request("DELETE", f"/webhooks/{webhook_id}")

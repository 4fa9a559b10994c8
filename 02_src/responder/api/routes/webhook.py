"""Inbound webhook route."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...app import IApplication
from ...logging_config import get_logger
from ...models import InboundMessage

logger = get_logger(__name__)

INBOUND_MESSAGE_EVENT = "message:in:new"


class WebhookEvent(BaseModel):
    """Webhook event posted by the gateway."""

    event: str
    data: dict[str, Any]


class AcceptedResponse(BaseModel):
    ok: bool


# Shape of ``data`` for message:in:new. Field names follow the gateway JSON;
# unknown fields are kept and ignored.


class _GatewayModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class MetadataData(_GatewayModel):
    key: str
    value: str | None = None


class ContactData(_GatewayModel):
    phone: str | None = None
    metadata: list[MetadataData] | None = None


class OwnerData(_GatewayModel):
    agent: str | None = None


class ChatData(_GatewayModel):
    id: str
    type: str | None = None
    contact: ContactData | None = None
    owner: OwnerData | None = None
    labels: list[str] | None = None
    status: str | None = None
    waStatus: str | None = None
    fromNumber: str | None = None
    lastOutboundMessageAt: datetime | None = None


class QuotedData(_GatewayModel):
    selectedId: str | None = None


class MetaData(_GatewayModel):
    isFirstMessage: bool | None = None


class InboundMessageData(_GatewayModel):
    id: str
    chat: ChatData
    body: str | None = None
    type: str | None = None
    fromNumber: str | None = None
    quoted: QuotedData | None = None
    meta: MetaData | None = None


def invalid_payload(errors: list[dict]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid payload body", "errors": errors},
    )


def create_webhook_router(app: IApplication) -> APIRouter:
    """Create webhook router."""
    router = APIRouter(tags=["webhook"])

    @router.post("/webhook", response_model=AcceptedResponse)
    async def receive_webhook(request: WebhookEvent):
        """Acknowledge immediately; the message is processed in the background."""
        if request.event != INBOUND_MESSAGE_EVENT:
            return JSONResponse(
                status_code=202,
                content={"message": f"Ignore webhook event: only {INBOUND_MESSAGE_EVENT} is accepted"},
            )

        try:
            data = InboundMessageData.model_validate(request.data)
        except ValidationError as e:
            logger.warning("Invalid inbound message payload: %s", e.error_count())
            return invalid_payload(
                [{"loc": list(error["loc"]), "msg": error["msg"]} for error in e.errors()]
            )

        message = InboundMessage.from_dict(data.model_dump(exclude_none=True))
        app.submit(message)
        return {"ok": True}

    return router

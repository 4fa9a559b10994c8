"""Messaging API routes."""

from pydantic import BaseModel, ConfigDict
from fastapi import APIRouter, HTTPException, Query

from ...app import Application

DEFAULT_SAMPLE_MESSAGE = "Hello World from Wassenger!"


class MessageRequest(BaseModel):
    """On-demand send. Extra gateway fields are passed through."""

    model_config = ConfigDict(extra="allow")

    phone: str
    message: str


def create_messaging_router(app: Application) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(tags=["messaging"])

    @router.get("/")
    async def index() -> dict:
        """Describe the service endpoints."""
        return {
            "name": "chatbot",
            "description": "Simple WhatsApp chatbot for Wassenger",
            "endpoints": {
                "webhook": {"path": "/webhook", "method": "POST"},
                "sendMessage": {"path": "/message", "method": "POST"},
                "sample": {"path": "/sample", "method": "GET"},
            },
        }

    @router.post("/message")
    async def send_message(request: MessageRequest) -> dict:
        """Send a message on demand."""
        result = await app.dispatcher.send_raw(request.model_dump())
        if not result:
            raise HTTPException(status_code=502, detail="Failed to send message")
        return result

    @router.get("/sample")
    async def send_sample(
        phone: str | None = Query(None, description="Target phone, defaults to the device number"),
        message: str | None = Query(None, description="Message text"),
    ) -> dict:
        """Send a sample message to the device's own number or a given one."""
        fields = {
            "phone": phone or app.device.phone,
            "message": message or DEFAULT_SAMPLE_MESSAGE,
        }
        result = await app.dispatcher.send_raw(fields)
        if not result:
            raise HTTPException(status_code=502, detail="Failed to send sample message")
        return result

    return router

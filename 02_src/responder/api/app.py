"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..app import Application
from ..config import ConfigError, load_settings
from ..logging_config import get_logger
from .routes import messaging, webhook

logger = get_logger(__name__)

# Global application instance
_app: Application | None = None


def get_app() -> Application:
    """Get the global application instance."""
    global _app
    if not _app:
        _app = Application(load_settings())
    return _app


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    application = application or get_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        try:
            await application.start()
        except ConfigError as e:
            logger.error("Failed to start chatbot server: %s", e)
            raise
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="Chatbot",
        description="Simple WhatsApp chatbot for Wassenger",
        version="0.1.0",
        lifespan=lifespan,
    )

    @fastapi_app.exception_handler(RequestValidationError)
    async def invalid_payload(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid payload body", "errors": jsonable_errors(exc)},
        )

    @fastapi_app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unexpected error on %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": f"Unexpected error: {exc}"})

    fastapi_app.include_router(webhook.create_webhook_router(application))
    fastapi_app.include_router(messaging.create_messaging_router(application))

    return fastapi_app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]

"""Main entry point for the webhook responder."""

import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from responder.api import create_fastapi_app
from responder.app import Application
from responder.config import ConfigError, load_settings
from responder.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    settings = load_settings()
    try:
        settings.validate()
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    # Startup failures inside the lifespan (device, team ids) make uvicorn exit non-zero
    app = create_fastapi_app(Application(settings))
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()

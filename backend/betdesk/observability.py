"""Logfire observability initialization and instrumentation."""

import logging
from typing import Optional

import logfire

from betdesk import __version__
from betdesk.config import Settings

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def initialize_logfire(
    settings: Settings,
    app: Optional[object] = None,
    service_name: str = "betdesk-api",
) -> bool:
    """
    Initialize Logfire and instrument the app.

    Instruments:
    - HTTPX (odds and scores feeds)
    - FastAPI, when an app is passed
    - Python logging (bridged to Logfire)

    Returns True when Logfire is sending data.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name=service_name,
            service_version=__version__,
            environment=settings.environment,
            console=False,
        )

        logfire.instrument_httpx()
        if app is not None:
            logfire.instrument_fastapi(app)

        logging.getLogger().addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire tracking initialized")
        return True

    except Exception as e:
        # Observability is optional
        logger.warning(f"Failed to initialize Logfire: {e}")
        return False

"""
FastAPI application entry point for BetDesk.

- Initializes FastAPI with lifespan management
- Configures CORS for the frontend
- Sets up Logfire observability
- Maps service errors to JSON responses
- Provides health check endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from betdesk import __version__
from betdesk.api.routes import admin_router, balance_router, bets_router, games_router
from betdesk.config import get_settings
from betdesk.database import close_db, get_database, init_db
from betdesk.exceptions import BetDeskError
from betdesk.observability import configure_logging, initialize_logfire

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Requests are only served once the schema exists, so handlers never see a
    half-initialized database.
    """
    configure_logging(settings.log_level)
    initialize_logfire(settings, app=app)

    logger.info(f"Starting BetDesk API ({settings.environment})")

    context = init_db()
    await context.create_all()
    if await context.ping():
        logger.info("Database connection successful")
    else:
        logger.error("Database connection failed")

    logger.info("BetDesk API startup complete")

    yield

    logger.info("Shutting down BetDesk API")
    await close_db()


app = FastAPI(
    title="BetDesk API",
    description="Sports betting demo: odds feed, wagers and settlement",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BetDeskError)
async def betdesk_error_handler(request: Request, exc: BetDeskError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ============================================================================
# Health Check Endpoints
# ============================================================================

@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, str]:
    """Health status of the application and database."""
    try:
        db_connected = await get_database().ping()
    except RuntimeError:
        db_connected = False

    return {
        "status": "healthy" if db_connected else "degraded",
        "service": "betdesk-api",
        "version": __version__,
        "database": "connected" if db_connected else "disconnected",
        "environment": settings.environment,
    }


@app.get("/", tags=["Root"])
async def root() -> Dict[str, str]:
    return {
        "name": "BetDesk API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


# ============================================================================
# API Routers
# ============================================================================

app.include_router(games_router, prefix="/api")
app.include_router(bets_router, prefix="/api")
app.include_router(balance_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "betdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )

"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration. No app is built at import time; serve with
``uvicorn fraudchat.api.app:create_app --factory`` or through fraudchat.main.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fraudchat.api.chat import router as chat_router
from fraudchat.api.claims import router as claims_router
from fraudchat.session import AppSession, create_session

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Sets up the remote assistant on startup and closes its HTTP client
    on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    session: AppSession = app.state.session
    logger.info("Starting Fraud Chat API...")
    await session.start()
    yield
    logger.info("Shutting down Fraud Chat API...")
    await session.close()


def create_app(session: AppSession | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        session: Session to serve. Built from the environment if not provided.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Fraud Chat API",
        description=(
            "Health-insurance claim submission with LLM-assisted fraud screening. "
            "Claims are kept in memory and uploaded to an OpenAI assistant whose "
            "file search tool reviews each new claim; a chat endpoint talks to "
            "the same assistant."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.session = session or create_session()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(claims_router)
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "fraud-chat"}

    return application


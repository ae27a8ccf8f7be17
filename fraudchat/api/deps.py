"""Request dependencies shared by the routers."""

import asyncio
import logging
from collections.abc import AsyncGenerator

from fastapi import Request

from fraudchat.session import AppSession

logger = logging.getLogger(__name__)

# Seconds between client disconnect checks while a reply is pending
DISCONNECT_CHECK_INTERVAL = 0.5


def get_session(request: Request) -> AppSession:
    """Return the session attached to the running app."""
    return request.app.state.session


async def disconnect_signal(request: Request) -> AsyncGenerator[asyncio.Event]:
    """Yield an event that is set when the client goes away.

    Long assistant waits take the event as their cancel signal, so a closed
    browser tab does not leave a polling loop running.
    """
    cancel = asyncio.Event()

    async def watch() -> None:
        while not cancel.is_set():
            if await request.is_disconnected():
                logger.info(f"Client disconnected from {request.url.path}")
                cancel.set()
                return
            await asyncio.sleep(DISCONNECT_CHECK_INTERVAL)

    watcher = asyncio.create_task(watch())
    try:
        yield cancel
    finally:
        watcher.cancel()

"""Chat endpoints backed by the fraud assistant thread."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from fraudchat.agent.errors import PollCancelledError
from fraudchat.api.claims import CLIENT_CLOSED_REQUEST
from fraudchat.api.deps import disconnect_signal, get_session
from fraudchat.models.schemas import (
    AssistantStatus,
    ChatMessage,
    ChatReply,
    ChatRequest,
)
from fraudchat.session import AppSession

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatReply)
async def chat(
    request: ChatRequest,
    session: AppSession = Depends(get_session),
    cancel: asyncio.Event = Depends(disconnect_signal),
) -> ChatReply:
    """Send a message to the assistant and wait for its reply.

    When AI features are disabled the reply carries the disabled notice
    and ``ok`` is false.
    """
    try:
        return await session.chat(request.message, cancel)
    except PollCancelledError as e:
        raise HTTPException(status_code=CLIENT_CLOSED_REQUEST, detail="Chat cancelled") from e


@router.get("/chat/transcript", response_model=list[ChatMessage])
async def transcript(session: AppSession = Depends(get_session)) -> list[ChatMessage]:
    return session.transcript.messages


@router.get("/assistant/status", response_model=AssistantStatus)
async def assistant_status(session: AppSession = Depends(get_session)) -> AssistantStatus:
    """Report whether AI features are configured and ready."""
    assistant = session.assistant
    return AssistantStatus(
        configured=assistant.configured,
        available=assistant.available,
        message=assistant.unavailable_message,
    )

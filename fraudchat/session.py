"""Per-process application session.

Holds the claim store, chat transcript and assistant service for one running
app. Built once at startup and handed to the HTTP layer, so tests can create
as many independent sessions as they need.
"""

import asyncio
import logging
import os

import httpx

from fraudchat.agent.config import AssistantConfig, get_assistant_config
from fraudchat.agent.fraud_assistant import FraudAssistant
from fraudchat.claims.store import ClaimStore, seed_demo_claims
from fraudchat.models.schemas import ChatMessage, ChatReply, ClaimAnalysis, Verdict

logger = logging.getLogger(__name__)

# Verdicts that carry an assistant reply worth keeping in the chat history
_TRANSCRIBED_VERDICTS = (Verdict.FLAGGED, Verdict.SUSPECTED, Verdict.LEGITIMATE)


class Transcript:
    """Ordered chat history shown in the UI."""

    def __init__(self) -> None:
        self.messages: list[ChatMessage] = []

    def add(self, role: str, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self.messages.append(message)
        return message


def _log_alert(text: str) -> None:
    logger.warning(f"Fraud alert: {text}")


class AppSession:
    """Claim store, transcript and assistant for one running app.

    Fraud alerts reach clients through ``ClaimAnalysis.alert`` and are
    logged here.

    Attributes:
        config: Assistant configuration.
        store: In-memory claim store.
        transcript: Chat history.
        assistant: Remote assistant service.
    """

    def __init__(
        self,
        config: AssistantConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        seed: bool = True,
    ) -> None:
        self.config = config or get_assistant_config()
        self.store = ClaimStore()
        if seed:
            seed_demo_claims(self.store)
        self.transcript = Transcript()
        self.assistant = FraudAssistant(
            self.store,
            config=self.config,
            transport=transport,
            notifier=_log_alert,
        )

    async def start(self) -> None:
        """Set up the remote assistant and note its state in the transcript."""
        await self.assistant.setup()
        if not self.assistant.available:
            self.transcript.add("assistant", self.assistant.unavailable_message)

    async def analyze(self, claim_id: int, cancel: asyncio.Event | None = None) -> ClaimAnalysis:
        """Analyze a claim and post the assistant's verdict to the transcript.

        Unavailable and failed analyses are returned without a transcript
        entry; the UI shows them as a notice instead.
        """
        analysis = await self.assistant.analyze_claim(claim_id, cancel)
        if analysis.verdict in _TRANSCRIBED_VERDICTS:
            self.transcript.add("assistant", analysis.message)
        return analysis

    async def chat(self, text: str, cancel: asyncio.Event | None = None) -> ChatReply:
        self.transcript.add("user", text)
        reply, ok = await self.assistant.chat(text, cancel)
        self.transcript.add("assistant", reply)
        return ChatReply(reply=reply, ok=ok)

    async def close(self) -> None:
        await self.assistant.aclose()


def create_session() -> AppSession:
    """Create a session from environment configuration.

    Set SEED_DEMO_CLAIMS=false to start with an empty claim list.
    """
    seed = os.getenv("SEED_DEMO_CLAIMS", "true").lower() not in ("0", "false", "no")
    return AppSession(seed=seed)

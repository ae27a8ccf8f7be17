"""Fraud-detection assistant backed by the OpenAI Assistants API.

Core module for claim analysis and chat.

Lifecycle:

1. **Setup (once)** - create the assistant, create a vector store and attach
   it to the assistant, create a conversation thread, then upload the current
   claims as a JSON file into the vector store. Setup is never retried; a
   failure leaves the service unavailable until restart.

2. **Claim analysis** - re-upload the entire claim list so the new claim is
   searchable, ask the assistant for a FRAUD_DETECTED / NO_FRAUD verdict,
   poll for the reply, and flag the claim when fraud is reported.

3. **Chat** - post the user's text verbatim on the same thread and poll for
   the reply. Chat and analysis share one thread, so the assistant sees the
   whole conversation.

Actions are serialized with a lock. Two submissions in flight would otherwise
interleave their uploads and polls on the shared thread and vector store.
"""

import asyncio
import logging
from collections.abc import Callable

import httpx
from pydantic import BaseModel

from fraudchat.agent.client import AssistantsClient
from fraudchat.agent.config import AssistantConfig, get_assistant_config
from fraudchat.agent.errors import AssistantError, PollCancelledError
from fraudchat.agent.polling import wait_for_reply
from fraudchat.claims.store import ClaimStore, UpdateOutcome
from fraudchat.models.schemas import Claim, ClaimAnalysis, ClaimStatus, Verdict

logger = logging.getLogger(__name__)

FRAUD_MARKER = "FRAUD_DETECTED"
NO_FRAUD_MARKER = "NO_FRAUD"

ASSISTANT_NAME = "Health Insurance Fraud Detection Assistant"
ASSISTANT_INSTRUCTIONS = (
    "You are an AI assistant specialized in detecting fraud in health insurance claims. "
    "Analyze claims for patterns such as: duplicate claims, unusually high amounts for "
    "services, mismatched diagnosis and service types, and suspicious submission patterns. "
    "Provide clear, brief explanations when flagging potential fraud. When asked to analyze "
    'a claim, respond with either "FRAUD_DETECTED: [reason]" or "NO_FRAUD: [reason]".'
)
VECTOR_STORE_NAME = "Insurance Claims Database"
CLAIMS_FILENAME = "claims-database.json"

DISABLED_MESSAGE = (
    "⚠️ OpenAI API key not configured. Set OPENAI_API_KEY in .env "
    "to enable AI fraud detection features."
)
SETUP_FAILED_MESSAGE = (
    "⚠️ The fraud detection assistant could not be initialized. "
    "Check your API key and restart to enable AI features."
)
CHAT_FAILED_MESSAGE = "Sorry, I encountered an error. Please check your API key and try again."


class RemoteResources(BaseModel):
    """Ids of the provider-side resources created during setup."""

    assistant_id: str | None = None
    vector_store_id: str | None = None
    thread_id: str | None = None
    file_id: str | None = None


def _format_amount(amount: float) -> str:
    return str(int(amount)) if amount.is_integer() else str(amount)


def build_analysis_prompt(claim: Claim) -> str:
    """Compose the fraud analysis request for one claim."""
    return (
        f"Analyze claim #{claim.id} for potential fraud. "
        f"This is a ${_format_amount(claim.amount)} claim "
        f"for {claim.service_type} with diagnosis: {claim.diagnosis}. Consider: "
        "1) Is the amount unusually high for this service? 2) Are there duplicate claims? "
        "3) Does the diagnosis match the service? Respond with either "
        f'"{FRAUD_MARKER}" or "{NO_FRAUD_MARKER}" followed by a brief explanation.'
    )


def reports_fraud(reply: str) -> bool:
    """Whether the reply carries the fraud marker anywhere in its text.

    Containment matches quoted or negated mentions too, so a reply holding
    both markers is logged for review.
    """
    if FRAUD_MARKER not in reply:
        return False
    if NO_FRAUD_MARKER in reply.replace(FRAUD_MARKER, ""):
        logger.warning(f"Reply contains both {FRAUD_MARKER} and {NO_FRAUD_MARKER}: {reply!r}")
    return True


class FraudAssistant:
    """Drives the remote assistant for claim analysis and chat.

    Holds the remote resource ids for one session and never calls the
    network when no API key is configured or setup has failed.
    """

    def __init__(
        self,
        store: ClaimStore,
        config: AssistantConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        notifier: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the assistant service.

        Args:
            store: Claim store to upload and update.
            config: Optional configuration. Loads from environment if not provided.
            transport: Optional HTTP transport override for the API client.
            notifier: Called with an alert text when a claim is flagged.
        """
        self._store = store
        self._config = config or get_assistant_config()
        self._notifier = notifier
        self._client = (
            AssistantsClient(self._config, transport=transport)
            if self._config.is_configured
            else None
        )
        self._resources = RemoteResources()
        self._ready = False
        self._setup_failed = False
        self._lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return self._client is not None

    @property
    def available(self) -> bool:
        return self._ready

    @property
    def resources(self) -> RemoteResources:
        return self._resources

    @property
    def unavailable_message(self) -> str | None:
        """Why AI features are off, or None when they are available."""
        if self._ready:
            return None
        if self._setup_failed:
            return SETUP_FAILED_MESSAGE
        if not self.configured:
            return DISABLED_MESSAGE
        return "⏳ The fraud detection assistant is starting up."

    async def setup(self) -> bool:
        """Create the remote assistant, vector store and thread.

        Returns:
            True when the assistant is ready for use.
        """
        if self._ready:
            return True
        if self._client is None:
            logger.warning("No API key configured; AI fraud detection disabled")
            return False
        if self._setup_failed:
            return False

        try:
            async with self._lock:
                await self._create_resources()
        except AssistantError:
            logger.exception("Failed to initialize OpenAI Assistant")
            self._setup_failed = True
            return False

        self._ready = True
        logger.info("OpenAI Assistant initialized successfully")
        return True

    async def _create_resources(self) -> None:
        client = self._client
        res = self._resources

        res.assistant_id = await client.create_assistant(
            name=ASSISTANT_NAME,
            instructions=ASSISTANT_INSTRUCTIONS,
            model=self._config.model_name,
            temperature=self._config.temperature,
        )
        logger.info(f"Assistant created: {res.assistant_id}")

        res.vector_store_id = await client.create_vector_store(VECTOR_STORE_NAME)
        logger.info(f"Vector store created: {res.vector_store_id}")
        await client.attach_vector_store(res.assistant_id, res.vector_store_id)

        res.thread_id = await client.create_thread()
        logger.info(f"Thread created: {res.thread_id}")

        await self._upload_claims()

    async def _upload_claims(self) -> None:
        """Upload the full claim list and add it to the vector store."""
        content = self._store.to_document().encode("utf-8")
        file_id = await self._client.upload_file(content, CLAIMS_FILENAME)
        logger.info(f"File uploaded: {file_id}")
        await self._client.add_file_to_vector_store(self._resources.vector_store_id, file_id)
        self._resources.file_id = file_id
        logger.info(f"File {file_id} added to vector store ({len(self._store)} claims)")

    async def _ask(self, prompt: str, cancel: asyncio.Event | None) -> str:
        res = self._resources
        await self._client.create_message(res.thread_id, prompt)
        run_id = await self._client.create_run(res.thread_id, res.assistant_id)
        logger.debug(f"Run {run_id} created on thread {res.thread_id}")
        return await wait_for_reply(
            self._client, res.thread_id, self._config.retry_policy, cancel
        )

    async def analyze_claim(
        self, claim_id: int, cancel: asyncio.Event | None = None
    ) -> ClaimAnalysis:
        """Ask the assistant whether a claim looks fraudulent.

        Args:
            claim_id: Id of a stored claim.
            cancel: Optional event that aborts the reply wait.

        Returns:
            ClaimAnalysis with the verdict and the message to display.

        Raises:
            ClaimNotFoundError: If the claim id is unknown.
            PollCancelledError: If ``cancel`` is set while waiting.
        """
        claim = self._store.require(claim_id)

        if not self._ready:
            return ClaimAnalysis(
                claim_id=claim_id,
                verdict=Verdict.UNAVAILABLE,
                message=(
                    f"Claim #{claim_id} submitted successfully! "
                    "(AI fraud detection disabled - add OpenAI API key to enable)"
                ),
                claim=claim,
            )

        try:
            async with self._lock:
                await self._upload_claims()
                reply = await self._ask(build_analysis_prompt(claim), cancel)
        except PollCancelledError:
            logger.info(f"Analysis of claim #{claim_id} cancelled")
            raise
        except AssistantError:
            logger.exception(f"Error analyzing claim #{claim_id}")
            return ClaimAnalysis(
                claim_id=claim_id,
                verdict=Verdict.ERROR,
                message=f"Claim #{claim_id} submitted, but fraud analysis failed.",
                claim=claim,
            )

        if not reports_fraud(reply):
            return ClaimAnalysis(
                claim_id=claim_id,
                verdict=Verdict.LEGITIMATE,
                message=f"✅ Claim #{claim_id} appears legitimate: {reply}",
                reply=reply,
                claim=claim,
            )

        update = self._store.update_status(claim_id, ClaimStatus.FLAGGED)
        current = update.claim or claim

        if update.outcome is UpdateOutcome.UPDATED:
            alert = f"Claim #{claim_id} flagged for potential fraud!"
            if self._notifier is not None:
                self._notifier(alert)
            return ClaimAnalysis(
                claim_id=claim_id,
                verdict=Verdict.FLAGGED,
                message=f"🚨 Claim #{claim_id} has been flagged for potential fraud: {reply}",
                reply=reply,
                claim=current,
                alert=alert,
            )

        if current.status is ClaimStatus.FLAGGED:
            return ClaimAnalysis(
                claim_id=claim_id,
                verdict=Verdict.FLAGGED,
                message=f"🚨 Claim #{claim_id} is already flagged for potential fraud: {reply}",
                reply=reply,
                claim=current,
            )

        # Fraud reported on a claim whose status can no longer change
        return ClaimAnalysis(
            claim_id=claim_id,
            verdict=Verdict.SUSPECTED,
            message=(
                f"⚠️ Claim #{claim_id} is already {current.status.value}; "
                f"the assistant reported possible fraud: {reply}"
            ),
            reply=reply,
            claim=current,
        )

    async def chat(self, text: str, cancel: asyncio.Event | None = None) -> tuple[str, bool]:
        """Send a free-form message to the assistant.

        Args:
            text: The user's message, sent verbatim.
            cancel: Optional event that aborts the reply wait.

        Returns:
            Tuple of (text to display, whether the assistant answered).

        Raises:
            PollCancelledError: If ``cancel`` is set while waiting.
        """
        if not self._ready:
            return self.unavailable_message, False

        try:
            async with self._lock:
                return await self._ask(text, cancel), True
        except PollCancelledError:
            logger.info("Chat request cancelled")
            raise
        except AssistantError:
            logger.exception("Error getting response")
            return CHAT_FAILED_MESSAGE, False

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

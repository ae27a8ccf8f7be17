"""Polling for assistant replies on a thread.

A wait moves from WAITING to DONE when the newest thread message is an
assistant message with content, to TIMED_OUT after the policy's attempt
ceiling, or to CANCELLED when the caller's cancel event is set.
"""

import asyncio
import logging
import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from fraudchat.agent.errors import PollCancelledError, ResponseTimeoutError

if TYPE_CHECKING:
    from fraudchat.agent.client import AssistantsClient

logger = logging.getLogger(__name__)

# Provider footnote markers, e.g. 【4:0†claims-database.json】
CITATION_PATTERN = re.compile(r"【\d+:\d+†.*?】")


class RetryPolicy(BaseModel):
    """How long to wait for a reply.

    Attributes:
        max_attempts: Message list calls before giving up.
        interval: Seconds to wait before each call.
    """

    max_attempts: int = Field(default=30, ge=1)
    interval: float = Field(default=1.0, ge=0.0)


def strip_citations(text: str) -> str:
    """Remove provider citation markers from reply text.

    Removing an inner marker can join its neighbours into a new one, so
    markers are removed until none are left.
    """
    removed = 1
    while removed:
        text, removed = CITATION_PATTERN.subn("", text)
    return text


def extract_reply(messages: list[dict]) -> str | None:
    """Return the newest message's first text block if it is an assistant reply."""
    if not messages:
        return None
    latest = messages[0]
    if latest.get("role") != "assistant" or not latest.get("content"):
        return None
    block = latest["content"][0]
    return block.get("text", {}).get("value", "")


async def _pause(interval: float, cancel: asyncio.Event | None) -> None:
    if cancel is None:
        await asyncio.sleep(interval)
        return
    try:
        await asyncio.wait_for(cancel.wait(), timeout=interval)
    except TimeoutError:
        return
    raise PollCancelledError("Reply wait cancelled")


async def wait_for_reply(
    client: "AssistantsClient",
    thread_id: str,
    policy: RetryPolicy | None = None,
    cancel: asyncio.Event | None = None,
) -> str:
    """Poll a thread until the assistant has replied.

    Args:
        client: Assistants API client.
        thread_id: Thread the run was created on.
        policy: Attempt ceiling and interval. Defaults to 30 polls, 1s apart.
        cancel: Optional event; setting it aborts the wait.

    Returns:
        The reply text with citation markers removed.

    Raises:
        ResponseTimeoutError: If no reply arrives within the policy.
        PollCancelledError: If ``cancel`` is set while waiting.
        RemoteCallError: If listing messages fails.
    """
    policy = policy or RetryPolicy()

    for attempt in range(1, policy.max_attempts + 1):
        await _pause(policy.interval, cancel)
        if cancel is not None and cancel.is_set():
            raise PollCancelledError("Reply wait cancelled")

        reply = extract_reply(await client.list_messages(thread_id))
        if reply is not None:
            logger.debug(f"Reply received on thread {thread_id} after {attempt} polls")
            return strip_citations(reply)

    logger.warning(f"No reply on thread {thread_id} after {policy.max_attempts} polls")
    raise ResponseTimeoutError(policy.max_attempts)

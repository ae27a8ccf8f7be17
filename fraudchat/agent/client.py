"""Async client for the OpenAI Assistants API (v2).

Wraps only the endpoints the fraud assistant needs on top of the official
SDK. Every failed call, including a success status with a body that is not
the expected resource, is raised as RemoteCallError with the response body
logged for diagnosis.
"""

import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

import httpx
from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    AsyncOpenAI,
    DefaultAsyncHttpxClient,
)

from fraudchat.agent.config import AssistantConfig
from fraudchat.agent.errors import ConfigurationMissingError, RemoteCallError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _resource_id(action: str, resource: Any) -> str:
    resource_id = getattr(resource, "id", None)
    if not isinstance(resource_id, str) or not resource_id:
        logger.error(f"Failed to {action}: response carried no id: {resource!r:.200}")
        raise RemoteCallError(action, detail=f"Unexpected response: {resource!r:.200}")
    return resource_id


class AssistantsClient:
    """Thin wrapper over assistants, vector stores, files and threads."""

    def __init__(
        self,
        config: AssistantConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Assistant configuration with a non-empty API key.
            transport: Optional transport override (used by tests).

        Raises:
            ConfigurationMissingError: If no API key is configured.
        """
        if not config.is_configured:
            raise ConfigurationMissingError(
                "API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        # Retries stay with the polling loop; one attempt per call here.
        self._openai = AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.request_timeout,
            max_retries=0,
            http_client=DefaultAsyncHttpxClient(transport=transport),
        )

    async def aclose(self) -> None:
        await self._openai.close()

    async def _call(self, action: str, request: Awaitable[T]) -> T:
        try:
            return await request
        except APIStatusError as e:
            logger.error(f"Failed to {action}: {e.status_code} {e.response.text}")
            raise RemoteCallError(action, e.status_code, e.response.text) from e
        except APIConnectionError as e:
            detail = str(e.__cause__ or e)
            logger.error(f"Failed to {action}: {detail}")
            raise RemoteCallError(action, detail=detail) from e
        except APIError as e:
            logger.error(f"Failed to {action}: {e}")
            raise RemoteCallError(action, detail=str(e)) from e
        except (AttributeError, TypeError, ValueError) as e:
            # Success status with a body the SDK could not turn into a resource
            logger.error(f"Failed to {action}: malformed response: {e}")
            raise RemoteCallError(action, detail=f"Malformed response: {e}") from e

    async def create_assistant(
        self,
        name: str,
        instructions: str,
        model: str,
        temperature: float,
    ) -> str:
        """Create an assistant with the file_search tool.

        Returns:
            The assistant id.
        """
        action = "create assistant"
        assistant = await self._call(
            action,
            self._openai.beta.assistants.create(
                name=name,
                instructions=instructions,
                model=model,
                tools=[{"type": "file_search"}],
                temperature=temperature,
            ),
        )
        return _resource_id(action, assistant)

    async def attach_vector_store(self, assistant_id: str, vector_store_id: str) -> None:
        """Point the assistant's file_search tool at a vector store."""
        await self._call(
            "update assistant",
            self._openai.beta.assistants.update(
                assistant_id,
                tool_resources={"file_search": {"vector_store_ids": [vector_store_id]}},
            ),
        )

    async def create_vector_store(self, name: str) -> str:
        action = "create vector store"
        vector_store = await self._call(action, self._openai.vector_stores.create(name=name))
        return _resource_id(action, vector_store)

    async def upload_file(self, content: bytes, filename: str) -> str:
        """Upload a file for use by assistants.

        Returns:
            The file id.
        """
        action = "upload file"
        uploaded = await self._call(
            action,
            self._openai.files.create(
                file=(filename, content, "application/json"),
                purpose="assistants",
            ),
        )
        return _resource_id(action, uploaded)

    async def add_file_to_vector_store(self, vector_store_id: str, file_id: str) -> None:
        await self._call(
            "add file to vector store",
            self._openai.vector_stores.files.create(
                vector_store_id=vector_store_id, file_id=file_id
            ),
        )

    async def create_thread(self) -> str:
        action = "create thread"
        thread = await self._call(action, self._openai.beta.threads.create())
        return _resource_id(action, thread)

    async def create_message(self, thread_id: str, content: str, role: str = "user") -> str:
        action = "create message"
        message = await self._call(
            action,
            self._openai.beta.threads.messages.create(thread_id, role=role, content=content),
        )
        return _resource_id(action, message)

    async def create_run(self, thread_id: str, assistant_id: str) -> str:
        action = "create run"
        run = await self._call(
            action,
            self._openai.beta.threads.runs.create(thread_id, assistant_id=assistant_id),
        )
        return _resource_id(action, run)

    async def list_messages(self, thread_id: str) -> list[dict]:
        """List thread messages as plain dicts, most recent first."""

        async def fetch() -> list[dict]:
            page = await self._openai.beta.threads.messages.list(thread_id)
            return [message.to_dict() for message in page.data]

        return await self._call("get messages", fetch())

"""Assistant configuration with environment variable loading.

Pydantic-based configuration for the remote fraud-detection assistant.
Supports OpenAI and OpenAI-compatible Assistants APIs via custom base URL.
A missing API key is allowed: it switches every AI feature to a disabled state.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from fraudchat.agent.polling import RetryPolicy

# Load environment variables from .env file
load_dotenv()


class AssistantConfig(BaseModel):
    """Configuration for the remote assistant.

    Attributes:
        api_key: Bearer credential for the provider. Empty disables AI features.
        base_url: Assistants API base URL.
        model_name: Model identifier the assistant is created with.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        request_timeout: Per-request HTTP timeout in seconds.
        poll_max_attempts: Message list polls before giving up on a reply.
        poll_interval: Seconds between polls.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        description="API key for LLM provider",
    )
    base_url: str = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or "https://api.openai.com/v1",
        description="Assistants API base URL",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o"),
        description="Model to use",
    )
    temperature: float = Field(
        default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.2")),
        ge=0.0,
        le=2.0,
        description="Sampling temperature for the assistant",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("LLM_REQUEST_TIMEOUT", "30.0")),
        gt=0.0,
        description="HTTP timeout per remote call in seconds",
    )
    poll_max_attempts: int = Field(
        default_factory=lambda: int(os.getenv("POLL_MAX_ATTEMPTS", "30")),
        ge=1,
        description="Maximum number of reply polls",
    )
    poll_interval: float = Field(
        default_factory=lambda: float(os.getenv("POLL_INTERVAL", "1.0")),
        ge=0.0,
        description="Seconds to wait before each reply poll",
    )

    @field_validator("api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        """Normalize the API key; blank means not configured."""
        return (v or "").strip()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.poll_max_attempts, interval=self.poll_interval)


def get_assistant_config() -> AssistantConfig:
    """Create assistant configuration from environment.

    Returns:
        Configured AssistantConfig instance.
    """
    return AssistantConfig()

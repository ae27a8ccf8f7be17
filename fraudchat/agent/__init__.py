"""Remote assistant orchestration for fraud analysis and chat.

Drives the OpenAI Assistants API: one assistant, one vector store holding the
claims database, one conversation thread per session.

Responsibilities:
    - Assistant, vector store and thread setup
    - Uploading the claim list for file search
    - Posting prompts, creating runs, and polling for replies
    - Disabled state when no API key is configured

Maintains clean separation from the HTTP layer.
"""

from fraudchat.agent.config import AssistantConfig, get_assistant_config
from fraudchat.agent.errors import (
    AssistantError,
    ConfigurationMissingError,
    PollCancelledError,
    RemoteCallError,
    ResponseTimeoutError,
)
from fraudchat.agent.fraud_assistant import FraudAssistant
from fraudchat.agent.polling import RetryPolicy, strip_citations, wait_for_reply

__all__ = [
    "AssistantConfig",
    "AssistantError",
    "ConfigurationMissingError",
    "FraudAssistant",
    "PollCancelledError",
    "RemoteCallError",
    "ResponseTimeoutError",
    "RetryPolicy",
    "get_assistant_config",
    "strip_citations",
    "wait_for_reply",
]

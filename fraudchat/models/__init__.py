"""Pydantic models for claims, analysis results and chat payloads.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Claim / ClaimCreate: Stored claim and its submission payload
    - ClaimAnalysis: Outcome of a fraud analysis request
    - ChatRequest / ChatReply: Chat endpoint payloads
    - ChatMessage: Transcript entry
    - AssistantStatus: Remote assistant availability
"""

from fraudchat.models.schemas import (
    AssistantStatus,
    ChatMessage,
    ChatReply,
    ChatRequest,
    Claim,
    ClaimAnalysis,
    ClaimCreate,
    ClaimStatus,
    StatusChangeRequest,
    Verdict,
)

__all__ = [
    "AssistantStatus",
    "ChatMessage",
    "ChatReply",
    "ChatRequest",
    "Claim",
    "ClaimAnalysis",
    "ClaimCreate",
    "ClaimStatus",
    "StatusChangeRequest",
    "Verdict",
]

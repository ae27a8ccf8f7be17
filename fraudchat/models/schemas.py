from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class ClaimStatus(str, Enum):
    """Lifecycle states of a submitted claim."""

    PENDING = "pending"
    APPROVED = "approved"
    FLAGGED = "flagged"


class Verdict(str, Enum):
    """Outcome of a fraud analysis request."""

    FLAGGED = "flagged"
    SUSPECTED = "suspected"
    LEGITIMATE = "legitimate"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


class ClaimCreate(BaseModel):
    """Submission payload for a new claim.

    Attributes:
        patient_name: Name of the patient the service was provided to.
        amount: Claimed amount in dollars.
        service_type: Kind of service (Consultation, Surgery, ...).
        diagnosis: Diagnosis justifying the service.
    """

    patient_name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    service_type: str = Field(..., min_length=1)
    diagnosis: str = Field(..., min_length=1)

    @field_validator("patient_name", "service_type", "diagnosis", mode="before")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Strip whitespace from text fields before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class Claim(ClaimCreate):
    """A stored claim.

    Only ``status`` changes after the claim is appended to the store.
    """

    id: int = Field(..., ge=1)
    status: ClaimStatus = ClaimStatus.PENDING
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_document(self) -> dict[str, object]:
        """Serialize using the key names of the uploaded claims database."""
        return {
            "id": self.id,
            "patientName": self.patient_name,
            "amount": self.amount,
            "serviceType": self.service_type,
            "diagnosis": self.diagnosis,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
        }


class StatusChangeRequest(BaseModel):
    """Request payload for a manual status change."""

    status: ClaimStatus


class ClaimAnalysis(BaseModel):
    """Result of analyzing one claim for fraud.

    Attributes:
        claim_id: The analyzed claim.
        verdict: Flagged, legitimate, suspected (fraud reported on a claim
            that can no longer be flagged), or why no verdict was produced.
        message: Text to show the user.
        reply: Raw assistant reply with citations stripped, if any.
        claim: Claim state after the analysis.
        alert: Fraud alert text when this analysis flagged the claim.
    """

    claim_id: int
    verdict: Verdict
    message: str
    reply: str | None = None
    claim: Claim | None = None
    alert: str | None = None


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint."""

    message: str = Field(..., min_length=1)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class ChatMessage(BaseModel):
    """A single transcript entry.

    Attributes:
        role: 'user' or 'assistant'.
        content: The message text.
        time: Display time the message was recorded.
    """

    role: str
    content: str
    time: str = Field(default_factory=lambda: datetime.now().strftime("%I:%M %p"))


class ChatReply(BaseModel):
    """Response from the chat endpoint.

    Attributes:
        reply: Text shown as the assistant's message.
        ok: False when the assistant was unavailable or the call failed.
    """

    reply: str
    ok: bool = True


class AssistantStatus(BaseModel):
    """Availability of the remote assistant."""

    configured: bool
    available: bool
    message: str | None = None

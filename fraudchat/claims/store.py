"""In-memory claim store.

Claims are kept in insertion order and never deleted. Only the status field
changes after a claim is appended, following the allowed transitions below.
"""

import json
import logging
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel

from fraudchat.models.schemas import Claim, ClaimCreate, ClaimStatus

logger = logging.getLogger(__name__)

# approved and flagged are terminal
ALLOWED_TRANSITIONS: dict[ClaimStatus, frozenset[ClaimStatus]] = {
    ClaimStatus.PENDING: frozenset({ClaimStatus.APPROVED, ClaimStatus.FLAGGED}),
    ClaimStatus.APPROVED: frozenset(),
    ClaimStatus.FLAGGED: frozenset(),
}


class ClaimNotFoundError(Exception):
    """Raised when a claim id is not in the store."""

    def __init__(self, claim_id: int) -> None:
        super().__init__(f"Claim #{claim_id} not found")
        self.claim_id = claim_id


class UpdateOutcome(str, Enum):
    """Result of a status update request."""

    UPDATED = "updated"
    NOT_FOUND = "not_found"
    REJECTED = "rejected"


class StatusUpdate(BaseModel):
    """Explicit result of ``ClaimStore.update_status``.

    Attributes:
        claim_id: The requested claim id.
        outcome: Whether the status changed, the id was unknown,
            or the transition is not allowed.
        claim: The claim after the update, when it exists.
    """

    claim_id: int
    outcome: UpdateOutcome
    claim: Claim | None = None

    @property
    def updated(self) -> bool:
        return self.outcome is UpdateOutcome.UPDATED


class ClaimStore:
    """Ordered, append-only sequence of claims held in process memory."""

    def __init__(self) -> None:
        self._claims: list[Claim] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._claims)

    def append(self, data: ClaimCreate) -> Claim:
        """Store a new claim.

        Assigns the next id, sets status to pending and stamps the
        submission time.

        Args:
            data: Validated submission payload.

        Returns:
            The stored claim.
        """
        claim = Claim(
            id=self._next_id,
            status=ClaimStatus.PENDING,
            timestamp=datetime.now(UTC),
            **data.model_dump(),
        )
        self._insert(claim)
        logger.info(f"Claim #{claim.id} submitted for {claim.service_type}")
        return claim

    def _insert(self, claim: Claim) -> None:
        self._claims.append(claim)
        self._next_id = max(self._next_id, claim.id + 1)

    def get(self, claim_id: int) -> Claim | None:
        for claim in self._claims:
            if claim.id == claim_id:
                return claim
        return None

    def require(self, claim_id: int) -> Claim:
        """Return the claim or raise ClaimNotFoundError."""
        claim = self.get(claim_id)
        if claim is None:
            raise ClaimNotFoundError(claim_id)
        return claim

    def update_status(self, claim_id: int, new_status: ClaimStatus) -> StatusUpdate:
        """Change the status of one claim.

        Unknown ids and disallowed transitions are reported through the
        returned outcome, never raised.

        Args:
            claim_id: Claim to update.
            new_status: Target status.

        Returns:
            StatusUpdate describing what happened.
        """
        claim = self.get(claim_id)
        if claim is None:
            logger.warning(f"Status update for unknown claim #{claim_id}")
            return StatusUpdate(claim_id=claim_id, outcome=UpdateOutcome.NOT_FOUND)

        if new_status not in ALLOWED_TRANSITIONS[claim.status]:
            logger.warning(
                f"Rejected status change for claim #{claim_id}: "
                f"{claim.status.value} -> {new_status.value}"
            )
            return StatusUpdate(
                claim_id=claim_id, outcome=UpdateOutcome.REJECTED, claim=claim
            )

        claim.status = new_status
        logger.info(f"Claim #{claim_id} status set to {new_status.value}")
        return StatusUpdate(claim_id=claim_id, outcome=UpdateOutcome.UPDATED, claim=claim)

    def list_all(self) -> list[Claim]:
        """Return claims newest first. Storage order is not affected."""
        return list(reversed(self._claims))

    def to_document(self) -> str:
        """Serialize every claim, oldest first, as a pretty-printed JSON array."""
        return json.dumps([claim.to_document() for claim in self._claims], indent=2)


def seed_demo_claims(store: ClaimStore) -> None:
    """Load the two demo claims a fresh session starts with."""
    store._insert(
        Claim(
            id=1,
            patient_name="John Doe",
            amount=500,
            service_type="Consultation",
            diagnosis="Annual checkup",
            status=ClaimStatus.APPROVED,
            timestamp=datetime(2024, 1, 15, tzinfo=UTC),
        )
    )
    store._insert(
        Claim(
            id=2,
            patient_name="Jane Smith",
            amount=3500,
            service_type="Surgery",
            diagnosis="Appendectomy",
            status=ClaimStatus.PENDING,
            timestamp=datetime(2024, 1, 20, tzinfo=UTC),
        )
    )

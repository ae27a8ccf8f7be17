"""In-memory claim storage.

Append-only claim records with explicit status transitions.
"""

from fraudchat.claims.store import (
    ClaimNotFoundError,
    ClaimStore,
    StatusUpdate,
    UpdateOutcome,
    seed_demo_claims,
)

__all__ = [
    "ClaimNotFoundError",
    "ClaimStore",
    "StatusUpdate",
    "UpdateOutcome",
    "seed_demo_claims",
]

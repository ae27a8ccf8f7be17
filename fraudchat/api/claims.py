"""Claim submission, listing, status and fraud analysis endpoints."""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from fraudchat.agent.errors import PollCancelledError
from fraudchat.api.deps import disconnect_signal, get_session
from fraudchat.claims.store import ClaimNotFoundError, UpdateOutcome
from fraudchat.models.schemas import Claim, ClaimAnalysis, ClaimCreate, StatusChangeRequest
from fraudchat.session import AppSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/claims", tags=["claims"])

# nginx-style "client closed request"
CLIENT_CLOSED_REQUEST = 499


def _not_found(claim_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Claim #{claim_id} not found",
    )


@router.get("", response_model=list[Claim])
async def list_claims(session: AppSession = Depends(get_session)) -> list[Claim]:
    """List all claims, newest first."""
    return session.store.list_all()


@router.post("", response_model=Claim, status_code=status.HTTP_201_CREATED)
async def submit_claim(
    data: ClaimCreate,
    session: AppSession = Depends(get_session),
) -> Claim:
    """Store a new pending claim.

    Analysis is a separate call so the claim list can be shown before the
    assistant replies.
    """
    return session.store.append(data)


@router.get("/{claim_id}", response_model=Claim)
async def get_claim(claim_id: int, session: AppSession = Depends(get_session)) -> Claim:
    claim = session.store.get(claim_id)
    if claim is None:
        raise _not_found(claim_id)
    return claim


@router.post("/{claim_id}/status", response_model=Claim)
async def change_status(
    claim_id: int,
    body: StatusChangeRequest,
    session: AppSession = Depends(get_session),
) -> Claim:
    """Manually approve or flag a pending claim.

    Raises:
        404: Unknown claim id.
        409: Transition not allowed from the claim's current status.
    """
    result = session.store.update_status(claim_id, body.status)

    if result.outcome is UpdateOutcome.NOT_FOUND:
        raise _not_found(claim_id)
    if result.outcome is UpdateOutcome.REJECTED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"Claim #{claim_id} is {result.claim.status.value} "
                f"and cannot become {body.status.value}"
            ),
        )
    return result.claim


@router.post("/{claim_id}/analysis", response_model=ClaimAnalysis)
async def analyze_claim(
    claim_id: int,
    session: AppSession = Depends(get_session),
    cancel: asyncio.Event = Depends(disconnect_signal),
) -> ClaimAnalysis:
    """Run fraud analysis on a stored claim.

    Returns a ClaimAnalysis even when the assistant is disabled or the
    remote call fails; the verdict says which.

    Raises:
        404: Unknown claim id.
    """
    try:
        return await session.analyze(claim_id, cancel)
    except ClaimNotFoundError as e:
        raise _not_found(claim_id) from e
    except PollCancelledError as e:
        raise HTTPException(
            status_code=CLIENT_CLOSED_REQUEST,
            detail="Analysis cancelled",
        ) from e

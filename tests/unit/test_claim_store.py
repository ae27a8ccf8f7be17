"""Unit tests for the in-memory claim store."""

import json

import pytest
import pytest_check as check
from pydantic import ValidationError

from fraudchat.claims.store import (
    ClaimNotFoundError,
    ClaimStore,
    UpdateOutcome,
    seed_demo_claims,
)
from fraudchat.models.schemas import ClaimCreate, ClaimStatus


def make_claim(n: int = 1, amount: float = 100.0) -> ClaimCreate:
    return ClaimCreate(
        patient_name=f"Patient {n}",
        amount=amount,
        service_type="Consultation",
        diagnosis="Checkup",
    )


class TestAppend:
    """Tests for ClaimStore.append."""

    @pytest.mark.parametrize("count", [1, 2, 7])
    def test_ids_are_sequential_from_one(self, count: int) -> None:
        """N appends yield ids 1..N in insertion order."""
        store = ClaimStore()
        claims = [store.append(make_claim(i)) for i in range(count)]

        assert [c.id for c in claims] == list(range(1, count + 1))

    def test_list_all_is_reverse_insertion_order(self) -> None:
        """list_all yields claims newest first."""
        store = ClaimStore()
        for i in range(5):
            store.append(make_claim(i))

        assert [c.id for c in store.list_all()] == [5, 4, 3, 2, 1]

    def test_list_all_does_not_reorder_storage(self) -> None:
        """Listing twice returns the same order; storage stays chronological."""
        store = ClaimStore()
        for i in range(3):
            store.append(make_claim(i))

        store.list_all().clear()

        check.equal([c.id for c in store.list_all()], [3, 2, 1])
        check.equal(
            [c["id"] for c in json.loads(store.to_document())],
            [1, 2, 3],
        )

    def test_new_claim_is_pending(self) -> None:
        store = ClaimStore()
        claim = store.append(make_claim())

        check.equal(claim.status, ClaimStatus.PENDING)
        check.equal(claim.patient_name, "Patient 1")
        check.equal(len(store), 1)

    def test_ids_continue_after_seed(self) -> None:
        """Seeded claims take ids 1 and 2; the next submission gets 3."""
        store = ClaimStore()
        seed_demo_claims(store)

        claim = store.append(make_claim())

        assert claim.id == 3


class TestUpdateStatus:
    """Tests for ClaimStore.update_status."""

    def test_changes_only_target_status(self) -> None:
        """Updating one claim leaves other fields and other claims unchanged."""
        store = ClaimStore()
        for i in range(3):
            store.append(make_claim(i, amount=100.0 * (i + 1)))
        before = [c.model_copy() for c in store.list_all()]

        result = store.update_status(2, ClaimStatus.FLAGGED)

        check.equal(result.outcome, UpdateOutcome.UPDATED)
        check.is_true(result.updated)
        for old, new in zip(before, store.list_all(), strict=True):
            if new.id == 2:
                check.equal(new.status, ClaimStatus.FLAGGED)
                check.equal(
                    new.model_dump(exclude={"status"}), old.model_dump(exclude={"status"})
                )
            else:
                check.equal(new, old)

    def test_unknown_id_reports_not_found(self) -> None:
        """Unknown id is reported, not raised, and changes nothing."""
        store = ClaimStore()
        store.append(make_claim())

        result = store.update_status(99, ClaimStatus.FLAGGED)

        check.equal(result.outcome, UpdateOutcome.NOT_FOUND)
        check.is_none(result.claim)
        check.equal(store.get(1).status, ClaimStatus.PENDING)

    def test_flagged_is_terminal(self) -> None:
        """A flagged claim cannot be flagged again or un-flagged."""
        store = ClaimStore()
        store.append(make_claim())
        store.update_status(1, ClaimStatus.FLAGGED)

        again = store.update_status(1, ClaimStatus.FLAGGED)
        back = store.update_status(1, ClaimStatus.PENDING)

        check.equal(again.outcome, UpdateOutcome.REJECTED)
        check.equal(back.outcome, UpdateOutcome.REJECTED)
        check.equal(store.get(1).status, ClaimStatus.FLAGGED)

    def test_pending_can_be_approved(self) -> None:
        store = ClaimStore()
        store.append(make_claim())

        result = store.update_status(1, ClaimStatus.APPROVED)

        assert result.claim.status == ClaimStatus.APPROVED

    def test_approved_cannot_be_flagged(self) -> None:
        store = ClaimStore()
        seed_demo_claims(store)

        result = store.update_status(1, ClaimStatus.FLAGGED)

        assert result.outcome == UpdateOutcome.REJECTED


class TestLookupAndDocument:
    """Tests for get, require and to_document."""

    def test_require_raises_for_unknown_id(self) -> None:
        store = ClaimStore()

        with pytest.raises(ClaimNotFoundError, match="Claim #4 not found"):
            store.require(4)

    def test_document_uses_database_keys(self) -> None:
        """Uploaded document keeps the camelCase claim keys."""
        store = ClaimStore()
        seed_demo_claims(store)

        records = json.loads(store.to_document())

        check.equal(len(records), 2)
        check.equal(
            set(records[1]),
            {"id", "patientName", "amount", "serviceType", "diagnosis", "status", "timestamp"},
        )
        check.equal(records[1]["patientName"], "Jane Smith")
        check.equal(records[1]["serviceType"], "Surgery")
        check.equal(records[0]["status"], "approved")

    def test_empty_store_document_is_empty_array(self) -> None:
        assert json.loads(ClaimStore().to_document()) == []


class TestClaimCreateValidation:
    """Tests for submission payload validation."""

    def test_rejects_negative_amount(self) -> None:
        with pytest.raises(ValidationError, match="amount"):
            ClaimCreate(patient_name="A", amount=-1, service_type="Surgery", diagnosis="X")

    def test_rejects_blank_text_fields(self) -> None:
        with pytest.raises(ValidationError, match="diagnosis"):
            ClaimCreate(patient_name="A", amount=1, service_type="Surgery", diagnosis="   ")

    def test_strips_text_fields(self) -> None:
        data = ClaimCreate(
            patient_name="  Ann  ", amount=0, service_type=" Lab ", diagnosis=" Flu "
        )

        check.equal(data.patient_name, "Ann")
        check.equal(data.service_type, "Lab")
        check.equal(data.diagnosis, "Flu")

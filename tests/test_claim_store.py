import re

import pytest

from claims_portal.models.audit import AuditLog
from claims_portal.models.claim import Claim, ClaimStatus
from claims_portal.rules import ClaimValidationError
from claims_portal.services.claim_store import ClaimFilter, ClaimStore
from claims_portal.services.lifecycle import ClaimLifecycleService
from claims_portal.services.results import WriteStatus

REFERENCE_PATTERN = re.compile(r"^MEI-[0-9A-Z]+-[0-9A-Z]{6}$")


def _sequence(*refs):
    it = iter(refs)
    return lambda: next(it)


def _claim(store, db, payload, **overrides):
    data = dict(payload)
    data.update(overrides)
    result = store.create(db, data)
    assert result.ok, result.message
    return result.value


class TestReferenceNumbers:
    def test_format(self):
        assert REFERENCE_PATTERN.match(Claim.generate_reference_number("MEI"))

    def test_thousand_references_are_distinct(self):
        refs = {Claim.generate_reference_number("MEI") for _ in range(1000)}
        assert len(refs) == 1000

    def test_collision_is_retried_transparently(self, db, valid_payload):
        _claim(ClaimStore(reference_generator=_sequence("MEI-TAKEN-AAAAAA")), db, valid_payload)

        store = ClaimStore(reference_generator=_sequence("MEI-TAKEN-AAAAAA", "MEI-FRESH-BBBBBB"))
        result = store.create(db, valid_payload)

        assert result.ok
        assert result.value.reference_number == "MEI-FRESH-BBBBBB"
        assert db.query(Claim).count() == 2

    def test_gives_up_after_max_attempts(self, db, valid_payload):
        _claim(ClaimStore(reference_generator=lambda: "MEI-TAKEN-AAAAAA"), db, valid_payload)

        store = ClaimStore(reference_generator=lambda: "MEI-TAKEN-AAAAAA", max_attempts=3)
        result = store.create(db, valid_payload)

        assert result.status == WriteStatus.WRITE_FAILED
        assert db.query(Claim).count() == 1


class TestCreate:
    def test_new_claim_defaults(self, db, valid_payload):
        claim = _claim(ClaimStore(), db, valid_payload)
        assert claim.status == ClaimStatus.SUBMITTED.value
        assert claim.stage == "new"
        assert claim.version == 1
        assert REFERENCE_PATTERN.match(claim.reference_number)
        assert claim.damage_photos == valid_payload["damage_photos"]

    def test_creation_is_audited(self, db, valid_payload):
        claim = _claim(ClaimStore(), db, valid_payload)
        logs = db.query(AuditLog).filter(AuditLog.claim_id == claim.id).all()
        assert [log.action for log in logs] == ["claim_submitted"]
        assert logs[0].changes["reference_number"] == claim.reference_number

    def test_invalid_payload_is_not_stored(self, db, valid_payload):
        valid_payload["declaration_accepted"] = False
        with pytest.raises(ClaimValidationError):
            ClaimStore().create(db, valid_payload)
        assert db.query(Claim).count() == 0


class TestQueries:
    @pytest.fixture
    def claims(self, db, valid_payload):
        store = ClaimStore()
        return [
            _claim(store, db, valid_payload, claimant_name="Margaret Ellis",
                   property_address="Flat 4, 12 Harbour Court, Bristol BS1 5TY"),
            _claim(store, db, valid_payload, claimant_name="David Owusu",
                   property_address="Flat 9, Harbour Court, Bristol BS1 5TY"),
            _claim(store, db, valid_payload, claimant_name="Ana Pereira",
                   property_address="22 Kingsdown Parade, Bristol BS6 5UE"),
        ]

    def test_newest_first(self, db, claims):
        listed = ClaimStore().list(db)
        assert [c.id for c in listed] == [c.id for c in reversed(claims)]

    def test_list_is_idempotent(self, db, claims):
        store = ClaimStore()
        first = [c.id for c in store.list(db, ClaimFilter(search="harbour"))]
        second = [c.id for c in store.list(db, ClaimFilter(search="harbour"))]
        assert first == second
        assert len(first) == 2

    def test_search_is_case_insensitive(self, db, claims):
        store = ClaimStore()
        assert [c.id for c in store.list(db, ClaimFilter(search="PEREIRA"))] == [claims[2].id]
        ref = claims[0].reference_number.lower()
        assert [c.id for c in store.list(db, ClaimFilter(search=ref))] == [claims[0].id]

    def test_search_treats_wildcards_literally(self, db, claims):
        assert ClaimStore().list(db, ClaimFilter(search="%")) == []

    def test_search_and_status_together(self, db, claims):
        lifecycle = ClaimLifecycleService()
        assert lifecycle.transition_status(db, claims[1].id, "pending").ok
        assert lifecycle.transition_status(db, claims[2].id, "pending").ok

        store = ClaimStore()
        found = store.list(db, ClaimFilter(search="harbour", status="pending"))
        assert [c.id for c in found] == [claims[1].id]
        assert store.count(db, ClaimFilter(search="harbour", status="pending")) == 1
        assert store.count(db, ClaimFilter(status="all")) == 3

    def test_limit_and_offset(self, db, claims):
        store = ClaimStore()
        page = store.list(db, ClaimFilter(limit=2, offset=1))
        assert [c.id for c in page] == [claims[1].id, claims[0].id]
        assert len(store.list(db, ClaimFilter(limit=None))) == 3

    def test_get_by_reference_ignores_case_and_whitespace(self, db, claims):
        ref = claims[0].reference_number
        assert ClaimStore().get_by_reference(db, f"  {ref.lower()} ").id == claims[0].id
        assert ClaimStore().get_by_reference(db, "MEI-NOPE-XXXXXX") is None


class TestUpdate:
    def test_updates_writable_fields_with_audit(self, db, submitted_claim, staff_user):
        result = ClaimStore().update(
            db, submitted_claim.id, {"claimant_phone": "07700 900999"},
            actor_user_id=staff_user.id, expected_version=1,
        )
        assert result.ok
        assert result.value.claimant_phone == "07700 900999"
        assert result.value.version == 2

        log = db.query(AuditLog).filter(AuditLog.action == "claim_updated").one()
        assert log.actor_user_id == staff_user.id
        assert log.changes["changes"]["claimant_phone"]["to"] == "07700 900999"

    def test_status_cannot_be_written_directly(self, db, submitted_claim):
        result = ClaimStore().update(db, submitted_claim.id, {"status": "approved"})
        assert result.status == WriteStatus.INVALID_INPUT
        db.refresh(submitted_claim)
        assert submitted_claim.status == "submitted"

    def test_stale_version_conflicts(self, db, submitted_claim):
        store = ClaimStore()
        assert store.update(db, submitted_claim.id, {"property_unit": "Flat 5"}, expected_version=1).ok
        result = store.update(db, submitted_claim.id, {"property_unit": "Flat 6"}, expected_version=1)
        assert result.status == WriteStatus.CONFLICT
        db.refresh(submitted_claim)
        assert submitted_claim.property_unit == "Flat 5"

    def test_missing_claim(self, db):
        assert ClaimStore().update(db, 999, {"property_unit": "x"}).status == WriteStatus.NOT_FOUND

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session
from sqlalchemy.orm.exc import StaleDataError

from ..config import get_settings
from ..constants import CLAIM_LIST_DEFAULT_LIMIT
from ..models.claim import Claim, ClaimStatus, INITIAL_STAGE
from ..rules import validate_submission
from ..schemas.steps import ClaimSubmission
from .audit import AuditService
from .results import WriteResult, WriteStatus

logger = logging.getLogger(__name__)

# Descriptive fields staff may correct after submission. Status, assignment,
# insurer and closure fields only change through the lifecycle service.
STAFF_WRITABLE_FIELDS = frozenset({
    "claimant_name",
    "claimant_email",
    "claimant_phone",
    "property_address",
    "property_block",
    "property_unit",
    "property_place_id",
    "property_construction_age",
    "property_construction_type",
    "incident_description",
    "building_damage_description",
    "building_damage_affected_areas",
    "theft_description",
    "theft_police_reference",
    "tenant_name",
    "tenant_phone",
    "tenant_email",
    "tenancy_agreements",
    "damage_photos",
    "repair_quotes",
    "invoices",
    "police_reports",
    "other_documents",
})


@dataclass
class ClaimFilter:
    search: Optional[str] = None
    status: Optional[str] = None
    limit: Optional[int] = CLAIM_LIST_DEFAULT_LIMIT
    offset: int = 0


def version_conflict(claim: Claim, expected_version: Optional[int]) -> Optional[WriteResult]:
    if expected_version is not None and claim.version != expected_version:
        return WriteResult.failure(
            WriteStatus.CONFLICT,
            "Claim was modified by someone else. Reload and try again.",
            current_version=claim.version,
            expected_version=expected_version,
        )
    return None


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ClaimStore:
    def __init__(
        self,
        reference_generator: Optional[Callable[[], str]] = None,
        max_attempts: Optional[int] = None,
    ):
        settings = get_settings()
        self.reference_generator = reference_generator or (
            lambda: Claim.generate_reference_number(settings.reference_prefix)
        )
        self.max_attempts = max_attempts or settings.reference_max_attempts

    def create(self, db: Session, submission: Union[ClaimSubmission, Mapping[str, Any]]) -> WriteResult:
        if not isinstance(submission, ClaimSubmission):
            submission = validate_submission(submission)

        values = submission.model_dump()
        values["incident_type"] = submission.incident_type.value
        values["signature_type"] = submission.signature_type.value

        for attempt in range(1, self.max_attempts + 1):
            now = datetime.utcnow()
            claim = Claim(
                **values,
                reference_number=self.reference_generator(),
                status=ClaimStatus.SUBMITTED.value,
                stage=INITIAL_STAGE,
                submitted_at=now,
                last_updated_at=now,
            )
            try:
                db.add(claim)
                db.flush()
                AuditService.log_claim_submitted(db, claim)
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.warning(
                    f"Reference collision on attempt {attempt}/{self.max_attempts}: "
                    f"ref={claim.reference_number} error={e.orig}"
                )
                continue
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Claim create failed: {e}")
                return WriteResult.failure(WriteStatus.WRITE_FAILED, "Could not save claim")

            db.refresh(claim)
            logger.info(f"Claim submitted: id={claim.id} ref={claim.reference_number}")
            return WriteResult.success(claim)

        logger.error(f"Claim create gave up after {self.max_attempts} reference collisions")
        return WriteResult.failure(WriteStatus.WRITE_FAILED, "Could not allocate a unique reference number")

    def get_by_id(self, db: Session, claim_id: int) -> Optional[Claim]:
        return db.query(Claim).filter(Claim.id == claim_id).first()

    def get_by_reference(self, db: Session, reference_number: str) -> Optional[Claim]:
        ref = (reference_number or "").strip().upper()
        if not ref:
            return None
        return db.query(Claim).filter(Claim.reference_number == ref).first()

    def _filtered(self, db: Session, claim_filter: ClaimFilter) -> Query:
        query = db.query(Claim)
        if claim_filter.search and claim_filter.search.strip():
            pattern = f"%{_escape_like(claim_filter.search.strip().lower())}%"
            query = query.filter(or_(
                func.lower(Claim.reference_number).like(pattern, escape="\\"),
                func.lower(Claim.claimant_name).like(pattern, escape="\\"),
                func.lower(Claim.property_address).like(pattern, escape="\\"),
            ))
        if claim_filter.status and claim_filter.status != "all":
            query = query.filter(Claim.status == claim_filter.status)
        return query

    def list(self, db: Session, claim_filter: Optional[ClaimFilter] = None) -> List[Claim]:
        claim_filter = claim_filter or ClaimFilter()
        query = (
            self._filtered(db, claim_filter)
            .order_by(Claim.submitted_at.desc(), Claim.id.desc())
            .offset(claim_filter.offset)
        )
        if claim_filter.limit is not None:
            query = query.limit(claim_filter.limit)
        return query.all()

    def count(self, db: Session, claim_filter: Optional[ClaimFilter] = None) -> int:
        return self._filtered(db, claim_filter or ClaimFilter()).count()

    def update(
        self,
        db: Session,
        claim_id: int,
        fields: Mapping[str, Any],
        actor_user_id: Optional[int] = None,
        expected_version: Optional[int] = None,
    ) -> WriteResult:
        claim = self.get_by_id(db, claim_id)
        if not claim:
            return WriteResult.failure(WriteStatus.NOT_FOUND, "Claim not found")

        rejected = sorted(set(fields) - STAFF_WRITABLE_FIELDS)
        if rejected:
            return WriteResult.failure(
                WriteStatus.INVALID_INPUT,
                f"Fields cannot be edited directly: {', '.join(rejected)}",
                fields=rejected,
            )

        conflict = version_conflict(claim, expected_version)
        if conflict:
            return conflict

        changes: Dict[str, Dict[str, Any]] = {}
        for name, value in fields.items():
            old = getattr(claim, name)
            if old != value:
                changes[name] = {"from": old, "to": value}
        if not changes:
            return WriteResult.success(claim)

        try:
            for name, change in changes.items():
                setattr(claim, name, change["to"])
            claim.last_updated_at = datetime.utcnow()
            AuditService.log_field_changes(db, claim, "claim_updated", changes, actor_user_id=actor_user_id)
            db.commit()
        except StaleDataError:
            db.rollback()
            return WriteResult.failure(WriteStatus.CONFLICT, "Claim was modified by someone else. Reload and try again.")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Claim update failed: id={claim_id} error={e}")
            return WriteResult.failure(WriteStatus.WRITE_FAILED, "Could not save claim")

        db.refresh(claim)
        logger.info(f"Claim updated: id={claim.id} fields={list(changes)} by user={actor_user_id}")
        return WriteResult.success(claim)

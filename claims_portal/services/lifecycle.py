"""Staff-driven changes to a submitted claim.

Every operation is a single atomic group: the claim change, its status
transition row (where the status moves) and its audit entry are committed
together or not at all. Failures come back as ``WriteResult`` values; the
acting user is always passed in explicitly as ``actor_user_id``.
"""
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..constants import CLOSURE_REASON_MIN
from ..models.assessor import LossAssessor
from ..models.audit import AuditLog, ClaimStatusTransition
from ..models.claim import Claim, ClaimStatus
from ..models.note import ClaimNote, NoteType, NoteVisibility
from ..models.policy import InsurancePolicy
from ..models.user import User
from ..state_machine import InvalidStatusTransitionError, validate_status_transition
from .audit import AuditService
from .claim_store import version_conflict
from .results import WriteResult, WriteStatus

logger = logging.getLogger(__name__)

UNSET: Any = object()

CONFLICT_MESSAGE = "Claim was modified by someone else. Reload and try again."


class ClaimLifecycleService:
    def __init__(self, audit_service=AuditService):
        self.audit_service = audit_service

    # -- helpers -------------------------------------------------------------

    def _load(self, db: Session, claim_id: int, expected_version: Optional[int]) -> Tuple[Optional[Claim], Optional[WriteResult]]:
        claim = db.query(Claim).filter(Claim.id == claim_id).first()
        if not claim:
            return None, WriteResult.failure(WriteStatus.NOT_FOUND, "Claim not found")
        conflict = version_conflict(claim, expected_version)
        if conflict:
            return None, conflict
        return claim, None

    def _commit(self, db: Session, apply: Callable[[], Any], description: str) -> WriteResult:
        try:
            value = apply()
            db.commit()
        except StaleDataError:
            db.rollback()
            logger.warning(f"Concurrent modification while applying {description}")
            return WriteResult.failure(WriteStatus.CONFLICT, CONFLICT_MESSAGE)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Write failed, rolled back {description}: {e}")
            return WriteResult.failure(WriteStatus.WRITE_FAILED, "Could not save changes. Nothing was changed.")
        except Exception:
            db.rollback()
            raise
        if value is not None:
            db.refresh(value)
        logger.info(f"Applied {description}")
        return WriteResult.success(value)

    @staticmethod
    def _touch(claim: Claim) -> None:
        claim.last_updated_at = datetime.utcnow()

    # -- status --------------------------------------------------------------

    def transition_status(
        self,
        db: Session,
        claim_id: int,
        to_status: str,
        actor_user_id: Optional[int] = None,
        note: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> WriteResult:
        try:
            target = ClaimStatus(to_status)
        except ValueError:
            return WriteResult.failure(WriteStatus.INVALID_INPUT, f"Invalid status: {to_status}")
        if target == ClaimStatus.CLOSED:
            return WriteResult.failure(
                WriteStatus.INVALID_TRANSITION,
                "Claims are closed through the close action, which records a closure reason.",
            )

        claim, failure = self._load(db, claim_id, expected_version)
        if failure:
            return failure

        current = ClaimStatus(claim.status)
        try:
            validate_status_transition(current, target)
        except InvalidStatusTransitionError as e:
            return WriteResult.failure(
                WriteStatus.INVALID_TRANSITION, e.message,
                from_status=e.current_status, to_status=e.target_status,
            )

        def apply():
            claim.status = target.value
            self._touch(claim)
            self.audit_service.log_status_change(
                db, claim, current.value, target.value,
                actor_user_id=actor_user_id, note=note,
            )
            return claim

        result = self._commit(
            db, apply,
            f"status change claim={claim_id} {current.value}->{target.value} by user={actor_user_id}",
        )
        if result.ok:
            result.details = {"from_status": current.value, "to_status": target.value}
        return result

    def close_claim(
        self,
        db: Session,
        claim_id: int,
        reason: str,
        final_notes: Optional[str] = None,
        actor_user_id: Optional[int] = None,
        expected_version: Optional[int] = None,
    ) -> WriteResult:
        reason = (reason or "").strip()
        if len(reason) < CLOSURE_REASON_MIN:
            return WriteResult.failure(
                WriteStatus.INVALID_INPUT,
                f"Closure reason must be at least {CLOSURE_REASON_MIN} characters",
            )

        claim, failure = self._load(db, claim_id, expected_version)
        if failure:
            return failure

        current = ClaimStatus(claim.status)
        try:
            validate_status_transition(current, ClaimStatus.CLOSED)
        except InvalidStatusTransitionError as e:
            return WriteResult.failure(
                WriteStatus.INVALID_TRANSITION, e.message,
                from_status=e.current_status, to_status=e.target_status,
            )

        def apply():
            now = datetime.utcnow()
            claim.status = ClaimStatus.CLOSED.value
            claim.closed_at = now
            claim.closure_reason = reason
            claim.closed_by_user_id = actor_user_id
            claim.last_updated_at = now
            self.audit_service.log_status_change(
                db, claim, current.value, ClaimStatus.CLOSED.value,
                actor_user_id=actor_user_id, note=reason, action="claim_closed",
            )
            if final_notes and final_notes.strip():
                db.add(ClaimNote(
                    claim_id=claim.id,
                    author_user_id=actor_user_id,
                    content=f"Closure Notes: {final_notes.strip()}",
                    note_type=NoteType.CLOSURE.value,
                    visibility=NoteVisibility.INTERNAL.value,
                ))
            return claim

        result = self._commit(db, apply, f"closure claim={claim_id} from {current.value} by user={actor_user_id}")
        if result.ok:
            result.details = {"from_status": current.value, "to_status": ClaimStatus.CLOSED.value}
        return result

    # -- assignment and workflow fields --------------------------------------

    def assign(
        self,
        db: Session,
        claim_id: int,
        handler_user_id: Optional[int] = UNSET,
        policy_id: Optional[int] = UNSET,
        actor_user_id: Optional[int] = None,
        expected_version: Optional[int] = None,
    ) -> WriteResult:
        claim, failure = self._load(db, claim_id, expected_version)
        if failure:
            return failure

        if handler_user_id is not UNSET and handler_user_id is not None:
            handler = db.query(User).filter(User.id == handler_user_id).first()
            if not handler or not handler.is_active:
                return WriteResult.failure(WriteStatus.INVALID_INPUT, "Handler not found or inactive")
        if policy_id is not UNSET and policy_id is not None:
            policy = db.query(InsurancePolicy).filter(InsurancePolicy.id == policy_id).first()
            if not policy or not policy.is_active:
                return WriteResult.failure(WriteStatus.INVALID_INPUT, "Policy not found or inactive")

        changes: Dict[str, Dict[str, Any]] = {}
        if handler_user_id is not UNSET and handler_user_id != claim.assigned_to_user_id:
            changes["assigned_to_user_id"] = {"from": claim.assigned_to_user_id, "to": handler_user_id}
        if policy_id is not UNSET and policy_id != claim.policy_id:
            changes["policy_id"] = {"from": claim.policy_id, "to": policy_id}
        if not changes:
            return WriteResult.success(claim)

        def apply():
            for name, change in changes.items():
                setattr(claim, name, change["to"])
            self._touch(claim)
            self.audit_service.log_field_changes(db, claim, "claim_assigned", changes, actor_user_id=actor_user_id)
            return claim

        return self._commit(db, apply, f"assignment claim={claim_id} {changes} by user={actor_user_id}")

    def assign_assessor(
        self,
        db: Session,
        claim_id: int,
        assessor_id: Optional[int],
        actor_user_id: Optional[int] = None,
        expected_version: Optional[int] = None,
    ) -> WriteResult:
        claim, failure = self._load(db, claim_id, expected_version)
        if failure:
            return failure

        assessor = None
        if assessor_id is not None:
            assessor = db.query(LossAssessor).filter(LossAssessor.id == assessor_id).first()
            if not assessor or not assessor.is_active:
                return WriteResult.failure(WriteStatus.INVALID_INPUT, "Loss assessor not found or inactive")

        previous = claim.loss_assessor_id
        if previous == assessor_id:
            return WriteResult.success(claim)

        def apply():
            claim.loss_assessor_id = assessor_id
            self._touch(claim)
            if assessor is not None:
                action = "loss_assessor_assigned"
                metadata = {
                    "assessor_id": assessor.id,
                    "company_name": assessor.company_name,
                    "previous_assessor_id": previous,
                }
            else:
                action = "loss_assessor_removed"
                metadata = {"previous_assessor_id": previous}
            self.audit_service.log_event(
                db=db, claim_id=claim.id, action=action,
                actor_user_id=actor_user_id, metadata=metadata,
            )
            return claim

        return self._commit(db, apply, f"assessor change claim={claim_id} {previous}->{assessor_id} by user={actor_user_id}")

    def update_insurer_details(
        self,
        db: Session,
        claim_id: int,
        insurer_claim_ref: Optional[str] = UNSET,
        insurer_submitted_at: Optional[datetime] = UNSET,
        insurer_response_date: Optional[datetime] = UNSET,
        actor_user_id: Optional[int] = None,
        expected_version: Optional[int] = None,
    ) -> WriteResult:
        claim, failure = self._load(db, claim_id, expected_version)
        if failure:
            return failure

        requested = {
            "insurer_claim_ref": insurer_claim_ref,
            "insurer_submitted_at": insurer_submitted_at,
            "insurer_response_date": insurer_response_date,
        }
        changes: Dict[str, Dict[str, Any]] = {}
        for name, value in requested.items():
            if value is UNSET:
                continue
            if getattr(claim, name) != value:
                changes[name] = {"from": getattr(claim, name), "to": value}
        if not changes:
            return WriteResult.success(claim)

        newly_submitted = (
            "insurer_submitted_at" in changes
            and changes["insurer_submitted_at"]["from"] is None
            and changes["insurer_submitted_at"]["to"] is not None
        )
        action = "insurer_submitted" if newly_submitted else "insurer_details_updated"

        def apply():
            for name, change in changes.items():
                setattr(claim, name, change["to"])
            self._touch(claim)
            self.audit_service.log_field_changes(db, claim, action, changes, actor_user_id=actor_user_id)
            return claim

        return self._commit(db, apply, f"{action} claim={claim_id} by user={actor_user_id}")

    def update_stage(
        self,
        db: Session,
        claim_id: int,
        stage: str,
        actor_user_id: Optional[int] = None,
        expected_version: Optional[int] = None,
    ) -> WriteResult:
        stage = (stage or "").strip()
        if not stage:
            return WriteResult.failure(WriteStatus.INVALID_INPUT, "Stage is required")

        claim, failure = self._load(db, claim_id, expected_version)
        if failure:
            return failure

        previous = claim.stage
        if previous == stage:
            return WriteResult.success(claim)

        def apply():
            claim.stage = stage
            self._touch(claim)
            self.audit_service.log_field_changes(
                db, claim, "stage_changed", {"stage": {"from": previous, "to": stage}},
                actor_user_id=actor_user_id,
            )
            return claim

        return self._commit(db, apply, f"stage change claim={claim_id} {previous}->{stage} by user={actor_user_id}")

    # -- notes ---------------------------------------------------------------

    def add_note(
        self,
        db: Session,
        claim_id: int,
        content: str,
        actor_user_id: Optional[int] = None,
        note_type: str = NoteType.GENERAL.value,
        visibility: str = NoteVisibility.INTERNAL.value,
        follow_up_date: Optional[date] = None,
        auto_chaser_flag: bool = False,
        expected_version: Optional[int] = None,
    ) -> WriteResult:
        content = (content or "").strip()
        if not content:
            return WriteResult.failure(WriteStatus.INVALID_INPUT, "Note content is required")
        try:
            note_type = NoteType(note_type).value
            visibility = NoteVisibility(visibility).value
        except ValueError as e:
            return WriteResult.failure(WriteStatus.INVALID_INPUT, str(e))

        claim, failure = self._load(db, claim_id, expected_version)
        if failure:
            return failure

        def apply():
            note = ClaimNote(
                claim_id=claim.id,
                author_user_id=actor_user_id,
                content=content,
                note_type=note_type,
                visibility=visibility,
                follow_up_date=follow_up_date,
                auto_chaser_flag=auto_chaser_flag,
            )
            db.add(note)
            db.flush()
            self.audit_service.log_event(
                db=db, claim_id=claim.id, action="note_added",
                actor_user_id=actor_user_id,
                metadata={"note_id": note.id, "note_type": note_type, "visibility": visibility},
                entity_type="note", entity_id=note.id,
            )
            return note

        return self._commit(db, apply, f"note added claim={claim_id} by user={actor_user_id}")

    def update_note(
        self,
        db: Session,
        note_id: int,
        actor_user_id: Optional[int] = None,
        **fields: Any,
    ) -> WriteResult:
        allowed = {"content", "note_type", "visibility", "follow_up_date", "auto_chaser_flag", "completed"}
        unknown = sorted(set(fields) - allowed)
        if unknown:
            return WriteResult.failure(WriteStatus.INVALID_INPUT, f"Unknown note fields: {', '.join(unknown)}")
        try:
            if "note_type" in fields:
                fields["note_type"] = NoteType(fields["note_type"]).value
            if "visibility" in fields:
                fields["visibility"] = NoteVisibility(fields["visibility"]).value
        except ValueError as e:
            return WriteResult.failure(WriteStatus.INVALID_INPUT, str(e))
        if "content" in fields:
            fields["content"] = (fields["content"] or "").strip()
            if not fields["content"]:
                return WriteResult.failure(WriteStatus.INVALID_INPUT, "Note content is required")

        note = db.query(ClaimNote).filter(ClaimNote.id == note_id).first()
        if not note:
            return WriteResult.failure(WriteStatus.NOT_FOUND, "Note not found")

        changes = {
            name: {"from": getattr(note, name), "to": value}
            for name, value in fields.items()
            if getattr(note, name) != value
        }
        if not changes:
            return WriteResult.success(note)

        def apply():
            for name, change in changes.items():
                setattr(note, name, change["to"])
            self.audit_service.log_event(
                db=db, claim_id=note.claim_id, action="note_updated",
                actor_user_id=actor_user_id,
                metadata={"note_id": note.id, "changes": changes},
                entity_type="note", entity_id=note.id,
            )
            return note

        return self._commit(db, apply, f"note updated note={note_id} by user={actor_user_id}")

    def delete_note(self, db: Session, note_id: int, actor_user_id: Optional[int] = None) -> WriteResult:
        note = db.query(ClaimNote).filter(ClaimNote.id == note_id).first()
        if not note:
            return WriteResult.failure(WriteStatus.NOT_FOUND, "Note not found")

        def apply():
            self.audit_service.log_event(
                db=db, claim_id=note.claim_id, action="note_deleted",
                actor_user_id=actor_user_id,
                metadata={"note_id": note.id, "content": note.content, "note_type": note.note_type},
                entity_type="note", entity_id=note.id,
            )
            db.delete(note)
            return None

        return self._commit(db, apply, f"note deleted note={note_id} by user={actor_user_id}")

    # -- reads ---------------------------------------------------------------

    @staticmethod
    def list_notes(db: Session, claim_id: int, visibility: Optional[str] = None) -> List[ClaimNote]:
        query = db.query(ClaimNote).filter(ClaimNote.claim_id == claim_id)
        if visibility:
            query = query.filter(ClaimNote.visibility == visibility)
        return query.order_by(ClaimNote.created_at.desc(), ClaimNote.id.desc()).all()

    @staticmethod
    def list_audit_logs(db: Session, claim_id: int) -> List[AuditLog]:
        return (
            db.query(AuditLog)
            .filter(AuditLog.claim_id == claim_id)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .all()
        )

    @staticmethod
    def list_transitions(db: Session, claim_id: int) -> List[ClaimStatusTransition]:
        return (
            db.query(ClaimStatusTransition)
            .filter(ClaimStatusTransition.claim_id == claim_id)
            .order_by(ClaimStatusTransition.created_at.desc(), ClaimStatusTransition.id.desc())
            .all()
        )

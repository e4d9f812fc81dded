import json
from typing import Optional, Dict, Any
from sqlalchemy.orm import Session

from ..models.audit import AuditLog, ClaimStatusTransition
from ..models.claim import Claim


class AuditService:
    """Adds audit rows to the caller's session; the caller owns the commit."""

    @staticmethod
    def log_event(
        db: Session,
        claim_id: Optional[int],
        action: str,
        actor_user_id: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        entity_type: str = "claim",
        entity_id: Optional[int] = None,
    ) -> AuditLog:
        event = AuditLog(
            claim_id=claim_id,
            action=action,
            actor_user_id=actor_user_id,
            entity_type=entity_type,
            entity_id=entity_id if entity_id is not None else claim_id,
            metadata_json=json.dumps(metadata, default=str) if metadata else None,
        )
        db.add(event)
        return event

    @staticmethod
    def log_claim_submitted(db: Session, claim: Claim) -> AuditLog:
        return AuditService.log_event(
            db=db,
            claim_id=claim.id,
            action="claim_submitted",
            metadata={"reference_number": claim.reference_number, "status": claim.status},
        )

    @staticmethod
    def log_status_change(
        db: Session,
        claim: Claim,
        from_status: str,
        to_status: str,
        actor_user_id: Optional[int] = None,
        note: Optional[str] = None,
        action: str = "status_change",
    ) -> AuditLog:
        """Record a status move as both a transition row and an audit entry."""
        db.add(ClaimStatusTransition(
            claim_id=claim.id,
            from_status=from_status,
            to_status=to_status,
            changed_by_user_id=actor_user_id,
            note=note,
        ))
        return AuditService.log_event(
            db=db,
            claim_id=claim.id,
            action=action,
            actor_user_id=actor_user_id,
            metadata={"field": "status", "from": from_status, "to": to_status, "note": note},
        )

    @staticmethod
    def log_field_changes(
        db: Session,
        claim: Claim,
        action: str,
        changes: Dict[str, Dict[str, Any]],
        actor_user_id: Optional[int] = None,
    ) -> AuditLog:
        return AuditService.log_event(
            db=db,
            claim_id=claim.id,
            action=action,
            actor_user_id=actor_user_id,
            metadata={"changes": changes},
        )

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.assessor import LossAssessor
from ..models.claim import Claim
from ..models.user import User
from ..schemas.assessor import LossAssessorCreate, LossAssessorResponse, LossAssessorUpdate
from ..services.audit import AuditService
from .auth import require_admin, require_staff

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/loss-assessors", tags=["loss-assessors"])


def _get_assessor_or_404(db: Session, assessor_id: int) -> LossAssessor:
    assessor = db.query(LossAssessor).filter(LossAssessor.id == assessor_id).first()
    if not assessor:
        raise HTTPException(status_code=404, detail="Loss assessor not found")
    return assessor


@router.get("", response_model=List[LossAssessorResponse])
def list_assessors(
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    query = db.query(LossAssessor)
    if not include_inactive:
        query = query.filter(LossAssessor.is_active.is_(True))
    return query.order_by(LossAssessor.company_name).all()


@router.get("/{assessor_id}", response_model=LossAssessorResponse)
def get_assessor(
    assessor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return _get_assessor_or_404(db, assessor_id)


@router.post("", response_model=LossAssessorResponse, status_code=status.HTTP_201_CREATED)
def create_assessor(
    body: LossAssessorCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    data = body.model_dump()
    data["email"] = data["email"].lower()
    assessor = LossAssessor(**data)
    db.add(assessor)
    db.flush()
    AuditService.log_event(
        db=db, claim_id=None, action="loss_assessor_created",
        actor_user_id=current_user.id,
        metadata={"company_name": assessor.company_name},
        entity_type="loss_assessor", entity_id=assessor.id,
    )
    db.commit()
    db.refresh(assessor)
    logger.info(f"Loss assessor created: id={assessor.id} by user={current_user.id}")
    return assessor


@router.patch("/{assessor_id}", response_model=LossAssessorResponse)
def update_assessor(
    assessor_id: int,
    body: LossAssessorUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    assessor = _get_assessor_or_404(db, assessor_id)
    data = body.model_dump(exclude_unset=True)
    if data.get("email"):
        data["email"] = data["email"].lower()

    changes = {}
    for field, value in data.items():
        if getattr(assessor, field) != value:
            changes[field] = {"from": getattr(assessor, field), "to": value}
            setattr(assessor, field, value)

    if changes:
        AuditService.log_event(
            db=db, claim_id=None, action="loss_assessor_updated",
            actor_user_id=current_user.id,
            metadata={"changes": changes},
            entity_type="loss_assessor", entity_id=assessor.id,
        )
        db.commit()
        db.refresh(assessor)
    return assessor


@router.delete("/{assessor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assessor(
    assessor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Remove an assessor; one still referenced by claims is only deactivated."""
    assessor = _get_assessor_or_404(db, assessor_id)
    in_use = db.query(Claim.id).filter(Claim.loss_assessor_id == assessor.id).first() is not None

    if in_use:
        assessor.is_active = False
        action = "loss_assessor_deactivated"
    else:
        db.delete(assessor)
        action = "loss_assessor_deleted"

    AuditService.log_event(
        db=db, claim_id=None, action=action,
        actor_user_id=current_user.id,
        metadata={"company_name": assessor.company_name},
        entity_type="loss_assessor", entity_id=assessor_id,
    )
    db.commit()
    logger.info(f"{action}: id={assessor_id} by user={current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

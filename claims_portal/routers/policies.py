import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.policy import InsurancePolicy
from ..models.user import User
from ..schemas.policy import PolicyCreate, PolicyResponse, PolicyUpdate
from ..services.audit import AuditService
from .auth import require_admin, require_staff

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/policies", tags=["policies"])


def _get_policy_or_404(db: Session, policy_id: int) -> InsurancePolicy:
    policy = db.query(InsurancePolicy).filter(InsurancePolicy.id == policy_id).first()
    if not policy:
        raise HTTPException(status_code=404, detail="Policy not found")
    return policy


@router.get("", response_model=List[PolicyResponse])
def list_policies(
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    query = db.query(InsurancePolicy)
    if not include_inactive:
        query = query.filter(InsurancePolicy.is_active.is_(True))
    return query.order_by(InsurancePolicy.policy_number).all()


@router.get("/{policy_id}", response_model=PolicyResponse)
def get_policy(
    policy_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return _get_policy_or_404(db, policy_id)


@router.post("", response_model=PolicyResponse, status_code=status.HTTP_201_CREATED)
def create_policy(
    body: PolicyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    policy_number = body.policy_number.strip()
    existing = db.query(InsurancePolicy).filter(InsurancePolicy.policy_number == policy_number).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Policy with this number already exists",
        )

    policy = InsurancePolicy(**body.model_dump(exclude={"policy_number"}), policy_number=policy_number)
    db.add(policy)
    db.flush()
    AuditService.log_event(
        db=db, claim_id=None, action="policy_created",
        actor_user_id=current_user.id,
        metadata={"policy_number": policy_number, "insurer": policy.insurer},
        entity_type="policy", entity_id=policy.id,
    )
    db.commit()
    db.refresh(policy)
    logger.info(f"Policy created: id={policy.id} number={policy_number} by user={current_user.id}")
    return policy


@router.patch("/{policy_id}", response_model=PolicyResponse)
def update_policy(
    policy_id: int,
    body: PolicyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    policy = _get_policy_or_404(db, policy_id)
    changes = {}
    for field, value in body.model_dump(exclude_unset=True).items():
        if getattr(policy, field) != value:
            changes[field] = {"from": getattr(policy, field), "to": value}
            setattr(policy, field, value)

    if changes:
        AuditService.log_event(
            db=db, claim_id=None, action="policy_updated",
            actor_user_id=current_user.id,
            metadata={"changes": changes},
            entity_type="policy", entity_id=policy.id,
        )
        db.commit()
        db.refresh(policy)
    return policy


@router.patch("/{policy_id}/deactivate", response_model=PolicyResponse)
def deactivate_policy(
    policy_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    policy = _get_policy_or_404(db, policy_id)
    if policy.is_active:
        policy.is_active = False
        AuditService.log_event(
            db=db, claim_id=None, action="policy_deactivated",
            actor_user_id=current_user.id,
            metadata={"policy_number": policy.policy_number},
            entity_type="policy", entity_id=policy.id,
        )
        db.commit()
        db.refresh(policy)
        logger.info(f"Policy deactivated: id={policy.id} by user={current_user.id}")
    return policy

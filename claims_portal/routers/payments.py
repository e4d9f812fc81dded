from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.payment import PaymentCreate, PaymentResponse, PaymentStatusUpdate
from ..services.claim_store import ClaimStore
from ..services.payments import PaymentService
from .auth import require_staff
from .deps import get_claim_store, get_payment_service, unwrap

router = APIRouter(prefix="/api", tags=["payments"])


@router.post("/claims/{claim_id}/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(
    claim_id: int,
    body: PaymentCreate,
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_payment_service),
    current_user: User = Depends(require_staff),
):
    return unwrap(payments.create_payment(
        db, claim_id,
        payment_type=body.payment_type.value,
        amount_pence=body.amount_pence,
        actor_user_id=current_user.id,
        currency=body.currency,
        description=body.description,
        recipient_name=body.recipient_name,
        payment_method=body.payment_method,
        transaction_reference=body.transaction_reference,
    ))


@router.get("/claims/{claim_id}/payments", response_model=List[PaymentResponse])
def list_payments(
    claim_id: int,
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
    payments: PaymentService = Depends(get_payment_service),
    current_user: User = Depends(require_staff),
):
    if not store.get_by_id(db, claim_id):
        raise HTTPException(status_code=404, detail="Claim not found")
    return payments.list_payments(db, claim_id)


@router.patch("/payments/{payment_id}/status", response_model=PaymentResponse)
def update_payment_status(
    payment_id: int,
    body: PaymentStatusUpdate,
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_payment_service),
    current_user: User = Depends(require_staff),
):
    return unwrap(payments.update_status(
        db, payment_id, body.status.value,
        actor_user_id=current_user.id,
        transaction_reference=body.transaction_reference,
    ))

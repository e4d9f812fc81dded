import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.claim import Claim
from ..models.payment import ClaimPayment, PaymentStatus, PaymentType
from ..state_machine import InvalidStatusTransitionError, validate_payment_transition
from .audit import AuditService
from .results import WriteResult, WriteStatus

logger = logging.getLogger(__name__)


class PaymentService:
    """Records settlement, excess and refund payments against a claim.

    Each write adds its audit entry in the same transaction.
    """

    def __init__(self, audit_service=AuditService):
        self.audit_service = audit_service

    def create_payment(
        self,
        db: Session,
        claim_id: int,
        payment_type: str,
        amount_pence: int,
        actor_user_id: Optional[int] = None,
        currency: str = "GBP",
        description: Optional[str] = None,
        recipient_name: Optional[str] = None,
        payment_method: Optional[str] = None,
        transaction_reference: Optional[str] = None,
    ) -> WriteResult:
        try:
            payment_type = PaymentType(payment_type).value
        except ValueError:
            return WriteResult.failure(WriteStatus.INVALID_INPUT, f"Invalid payment type: {payment_type}")
        if not isinstance(amount_pence, int) or amount_pence <= 0:
            return WriteResult.failure(WriteStatus.INVALID_INPUT, "Amount must be a positive number of pence")

        claim = db.query(Claim).filter(Claim.id == claim_id).first()
        if not claim:
            return WriteResult.failure(WriteStatus.NOT_FOUND, "Claim not found")

        payment = ClaimPayment(
            claim_id=claim.id,
            payment_type=payment_type,
            amount_pence=amount_pence,
            currency=currency.upper(),
            description=description,
            recipient_name=recipient_name,
            payment_method=payment_method,
            transaction_reference=transaction_reference,
            status=PaymentStatus.PENDING.value,
            created_by_user_id=actor_user_id,
        )
        try:
            db.add(payment)
            db.flush()
            self.audit_service.log_event(
                db=db,
                claim_id=claim.id,
                action="payment_created",
                actor_user_id=actor_user_id,
                metadata={
                    "payment_id": payment.id,
                    "payment_type": payment_type,
                    "amount_pence": amount_pence,
                    "currency": payment.currency,
                },
                entity_type="payment",
                entity_id=payment.id,
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Payment create failed for claim {claim_id}: {e}")
            return WriteResult.failure(WriteStatus.WRITE_FAILED, "Could not save payment")

        db.refresh(payment)
        logger.info(f"Created {payment_type} payment {payment.id} for claim {claim_id}: {amount_pence} pence")
        return WriteResult.success(payment)

    def update_status(
        self,
        db: Session,
        payment_id: int,
        status: str,
        actor_user_id: Optional[int] = None,
        transaction_reference: Optional[str] = None,
    ) -> WriteResult:
        try:
            target = PaymentStatus(status)
        except ValueError:
            return WriteResult.failure(WriteStatus.INVALID_INPUT, f"Invalid payment status: {status}")

        payment = db.query(ClaimPayment).filter(ClaimPayment.id == payment_id).first()
        if not payment:
            return WriteResult.failure(WriteStatus.NOT_FOUND, "Payment not found")

        current = PaymentStatus(payment.status)
        try:
            validate_payment_transition(current, target)
        except InvalidStatusTransitionError as e:
            return WriteResult.failure(WriteStatus.INVALID_TRANSITION, e.message)

        try:
            payment.status = target.value
            if target == PaymentStatus.COMPLETED:
                payment.paid_at = datetime.utcnow()
            if transaction_reference:
                payment.transaction_reference = transaction_reference
            self.audit_service.log_event(
                db=db,
                claim_id=payment.claim_id,
                action="payment_status_updated",
                actor_user_id=actor_user_id,
                metadata={
                    "payment_id": payment.id,
                    "from": current.value,
                    "to": target.value,
                    "transaction_reference": payment.transaction_reference,
                },
                entity_type="payment",
                entity_id=payment.id,
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Payment status update failed for payment {payment_id}: {e}")
            return WriteResult.failure(WriteStatus.WRITE_FAILED, "Could not save payment")

        db.refresh(payment)
        logger.info(f"Payment {payment_id} moved {current.value} -> {target.value}")
        return WriteResult.success(payment)

    @staticmethod
    def list_payments(db: Session, claim_id: int) -> List[ClaimPayment]:
        return (
            db.query(ClaimPayment)
            .filter(ClaimPayment.claim_id == claim_id)
            .order_by(ClaimPayment.created_at.desc(), ClaimPayment.id.desc())
            .all()
        )

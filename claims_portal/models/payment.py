from datetime import datetime
from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, BigInteger, ForeignKey, Text, CheckConstraint

from ..database import Base


class PaymentType(str, Enum):
    SETTLEMENT = "settlement"
    EXCESS = "excess"
    REFUND = "refund"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


PAYMENT_STATUS_TRANSITIONS = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED, PaymentStatus.FAILED, PaymentStatus.CANCELLED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING, PaymentStatus.CANCELLED}),
    PaymentStatus.COMPLETED: frozenset(),
    PaymentStatus.CANCELLED: frozenset(),
}

TERMINAL_PAYMENT_STATUSES = frozenset({PaymentStatus.COMPLETED, PaymentStatus.CANCELLED})


class ClaimPayment(Base):
    __tablename__ = "claim_payments"
    __table_args__ = (
        CheckConstraint("amount_pence > 0", name="ck_claim_payments_amount_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    claim_id = Column(Integer, ForeignKey("claims.id"), nullable=False, index=True)

    payment_type = Column(String(20), nullable=False)
    amount_pence = Column(BigInteger, nullable=False)
    currency = Column(String(3), nullable=False, default="GBP")
    description = Column(Text, nullable=True)
    recipient_name = Column(String(255), nullable=True)

    status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    paid_at = Column(DateTime, nullable=True)
    transaction_reference = Column(String(255), nullable=True)
    payment_method = Column(String(50), nullable=True)

    created_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

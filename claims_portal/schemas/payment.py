from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..models.payment import PaymentStatus, PaymentType


class PaymentCreate(BaseModel):
    payment_type: PaymentType
    amount_pence: int = Field(gt=0)
    currency: str = Field("GBP", min_length=3, max_length=3)
    description: Optional[str] = None
    recipient_name: Optional[str] = None
    payment_method: Optional[str] = None
    transaction_reference: Optional[str] = None


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
    transaction_reference: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    claim_id: int
    payment_type: str
    amount_pence: int
    currency: str
    description: Optional[str] = None
    recipient_name: Optional[str] = None
    status: str
    paid_at: Optional[datetime] = None
    transaction_reference: Optional[str] = None
    payment_method: Optional[str] = None
    created_by_user_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True

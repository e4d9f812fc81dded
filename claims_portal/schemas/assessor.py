from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class LossAssessorCreate(BaseModel):
    company_name: str = Field(min_length=1)
    contact_name: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    specializations: List[str] = []
    address: Optional[str] = None
    notes: Optional[str] = None


class LossAssessorUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=1)
    contact_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    specializations: Optional[List[str]] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class LossAssessorResponse(BaseModel):
    id: int
    company_name: str
    contact_name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    specializations: List[str] = []
    address: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

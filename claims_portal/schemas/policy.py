from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class PolicyCreate(BaseModel):
    policy_number: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1)
    insurer: str = Field(min_length=1)
    coverage_type: Optional[str] = None
    excess_pence: Optional[int] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    building_address: Optional[str] = None
    notes: Optional[str] = None


class PolicyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    insurer: Optional[str] = Field(None, min_length=1)
    coverage_type: Optional[str] = None
    excess_pence: Optional[int] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    building_address: Optional[str] = None
    notes: Optional[str] = None


class PolicyResponse(BaseModel):
    id: int
    policy_number: str
    name: str
    insurer: str
    coverage_type: Optional[str] = None
    excess_pence: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    building_address: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

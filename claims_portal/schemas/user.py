from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from ..models.user import UserRole


class UserCreate(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr
    password: Optional[str] = Field(None, min_length=8)
    role: UserRole = UserRole.STAFF
    phone: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    phone: Optional[str] = None
    is_active: bool
    has_logged_in: bool
    created_at: datetime

    class Config:
        from_attributes = True

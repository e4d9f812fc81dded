from datetime import datetime
from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, Boolean

from ..database import Base


class UserRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    SUPERUSER = "superuser"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    # Null for staff who have not set a password yet
    password_hash = Column(String(255), nullable=True)
    role = Column(String(50), nullable=False, default=UserRole.STAFF.value)
    is_active = Column(Boolean, default=True, nullable=False)
    has_logged_in = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

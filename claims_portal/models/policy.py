from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Date, Boolean, BigInteger, Text

from ..database import Base


class InsurancePolicy(Base):
    __tablename__ = "insurance_policies"

    id = Column(Integer, primary_key=True, index=True)
    policy_number = Column(String(100), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    insurer = Column(String(255), nullable=False)
    coverage_type = Column(String(100), nullable=True)
    excess_pence = Column(BigInteger, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    building_address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

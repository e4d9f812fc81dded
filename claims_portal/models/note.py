from datetime import datetime
from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, Date, Boolean, ForeignKey, Text
from sqlalchemy.orm import relationship

from ..database import Base


class NoteVisibility(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


class NoteType(str, Enum):
    GENERAL = "general"
    FOLLOW_UP = "follow_up"
    CLAIMANT_CONTACT = "claimant_contact"
    INSURER_CONTACT = "insurer_contact"
    ASSESSOR_CONTACT = "assessor_contact"
    CLOSURE = "closure"


class ClaimNote(Base):
    __tablename__ = "claim_notes"

    id = Column(Integer, primary_key=True, index=True)
    claim_id = Column(Integer, ForeignKey("claims.id"), nullable=False, index=True)
    author_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    content = Column(Text, nullable=False)
    note_type = Column(String(50), nullable=False, default=NoteType.GENERAL.value)
    visibility = Column(String(20), nullable=False, default=NoteVisibility.INTERNAL.value)
    follow_up_date = Column(Date, nullable=True)
    auto_chaser_flag = Column(Boolean, nullable=False, default=False)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    author = relationship("User")

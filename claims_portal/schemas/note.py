from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..models.note import NoteType, NoteVisibility


class NoteCreate(BaseModel):
    content: str = Field(min_length=1)
    note_type: NoteType = NoteType.GENERAL
    visibility: NoteVisibility = NoteVisibility.INTERNAL
    follow_up_date: Optional[date] = None
    auto_chaser_flag: bool = False
    expected_version: Optional[int] = None


class NoteUpdate(BaseModel):
    content: Optional[str] = Field(None, min_length=1)
    note_type: Optional[NoteType] = None
    visibility: Optional[NoteVisibility] = None
    follow_up_date: Optional[date] = None
    auto_chaser_flag: Optional[bool] = None
    completed: Optional[bool] = None


class NoteResponse(BaseModel):
    id: int
    claim_id: int
    author_user_id: Optional[int] = None
    content: str
    note_type: str
    visibility: str
    follow_up_date: Optional[date] = None
    auto_chaser_flag: bool
    completed: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

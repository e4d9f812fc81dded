from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.note import NoteCreate, NoteResponse, NoteUpdate
from ..services.claim_store import ClaimStore
from ..services.lifecycle import ClaimLifecycleService
from .auth import require_staff
from .deps import get_claim_store, get_lifecycle_service, unwrap

router = APIRouter(prefix="/api", tags=["notes"])


@router.get("/claims/{claim_id}/notes", response_model=List[NoteResponse])
def list_claim_notes(
    claim_id: int,
    visibility: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    current_user: User = Depends(require_staff),
):
    if not store.get_by_id(db, claim_id):
        raise HTTPException(status_code=404, detail="Claim not found")
    return lifecycle.list_notes(db, claim_id, visibility=visibility)


@router.post("/claims/{claim_id}/notes", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def add_claim_note(
    claim_id: int,
    body: NoteCreate,
    db: Session = Depends(get_db),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    current_user: User = Depends(require_staff),
):
    return unwrap(lifecycle.add_note(
        db, claim_id, body.content,
        actor_user_id=current_user.id,
        note_type=body.note_type.value,
        visibility=body.visibility.value,
        follow_up_date=body.follow_up_date,
        auto_chaser_flag=body.auto_chaser_flag,
        expected_version=body.expected_version,
    ))


@router.patch("/notes/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: int,
    body: NoteUpdate,
    db: Session = Depends(get_db),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    current_user: User = Depends(require_staff),
):
    fields = body.model_dump(exclude_unset=True, mode="json")
    if "follow_up_date" in fields:
        fields["follow_up_date"] = body.follow_up_date
    return unwrap(lifecycle.update_note(db, note_id, actor_user_id=current_user.id, **fields))


@router.delete("/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(
    note_id: int,
    db: Session = Depends(get_db),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    current_user: User = Depends(require_staff),
):
    unwrap(lifecycle.delete_note(db, note_id, actor_user_id=current_user.id))

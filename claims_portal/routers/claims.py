import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Path, Query, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..assembler import assemble_submission
from ..constants import CLAIM_LIST_DEFAULT_LIMIT, CLAIM_LIST_MAX_LIMIT, TOTAL_STEPS
from ..database import get_db
from ..models.claim import ClaimStatus
from ..models.user import User
from ..rules import validate_step
from ..schemas.audit import AuditLogResponse, StatusTransitionResponse
from ..schemas.claim import (
    AllowedTransitionsResponse,
    AssessorAssignRequest,
    ClaimAssignRequest,
    ClaimCloseRequest,
    ClaimCreatedResponse,
    ClaimListPage,
    ClaimPublicSummary,
    ClaimResponse,
    ClaimStatusUpdate,
    ClaimUpdate,
    InsurerDetailsUpdate,
    StageUpdate,
    StepValidationResponse,
)
from ..services.admin_query import claims_to_csv, export_filename, filter_claims
from ..services.claim_store import ClaimFilter, ClaimStore
from ..services.lifecycle import ClaimLifecycleService
from ..services.notifications import ClaimNotifier, get_notifier
from ..state_machine import get_valid_transitions
from .auth import require_staff
from .deps import get_claim_store, get_lifecycle_service, unwrap

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/claims", tags=["claims"])


class StepValidationRequest(BaseModel):
    data: Dict[str, Any]
    context: Dict[str, Any] = {}


def _get_claim_or_404(db: Session, store: ClaimStore, claim_id: int):
    claim = store.get_by_id(db, claim_id)
    if not claim:
        raise HTTPException(status_code=404, detail="Claim not found")
    return claim


def _split_version(body: BaseModel) -> tuple:
    data = body.model_dump(exclude_unset=True)
    expected_version = data.pop("expected_version", None)
    return data, expected_version


@router.post("", response_model=ClaimCreatedResponse, status_code=status.HTTP_201_CREATED)
def submit_claim(
    background_tasks: BackgroundTasks,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
    notifier: ClaimNotifier = Depends(get_notifier),
):
    submission = assemble_submission(payload)
    claim = unwrap(store.create(db, submission))
    background_tasks.add_task(notifier.claim_created, claim.id)
    return claim


@router.post("/validate-step/{step}", response_model=StepValidationResponse)
def validate_claim_step(
    body: StepValidationRequest,
    step: int = Path(..., ge=1, le=TOTAL_STEPS),
):
    model = validate_step(step, body.data, context=body.context)
    return StepValidationResponse(valid=True, step=step, data=model.model_dump(mode="json"))


@router.get("", response_model=ClaimListPage)
def list_claims(
    search: Optional[str] = Query(None, description="Reference, claimant name or address"),
    status: Optional[str] = Query(None, description="Filter by status; 'all' for no filter"),
    limit: int = Query(CLAIM_LIST_DEFAULT_LIMIT, ge=1, le=CLAIM_LIST_MAX_LIMIT),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
    current_user: User = Depends(require_staff),
):
    claim_filter = ClaimFilter(search=search, status=status, limit=limit, offset=offset)
    return ClaimListPage(
        items=store.list(db, claim_filter),
        total=store.count(db, claim_filter),
        limit=limit,
        offset=offset,
    )


@router.get("/export.csv")
def export_claims(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
    current_user: User = Depends(require_staff),
):
    claims = filter_claims(store.list(db, ClaimFilter(limit=None)), search=search, status=status)
    logger.info(f"Claims export: rows={len(claims)} by user={current_user.id}")
    return Response(
        content=claims_to_csv(claims),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(date.today())}"'},
    )


@router.get("/ref/{reference_number}", response_model=ClaimPublicSummary)
def get_claim_by_reference(
    reference_number: str,
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
):
    claim = store.get_by_reference(db, reference_number)
    if not claim:
        raise HTTPException(status_code=404, detail="Claim not found")
    return claim


@router.get("/{claim_id}", response_model=ClaimResponse)
def get_claim(
    claim_id: int,
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
    current_user: User = Depends(require_staff),
):
    return _get_claim_or_404(db, store, claim_id)


@router.patch("/{claim_id}", response_model=ClaimResponse)
def update_claim(
    claim_id: int,
    claim_data: ClaimUpdate,
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
    current_user: User = Depends(require_staff),
):
    fields, expected_version = _split_version(claim_data)
    return unwrap(store.update(
        db, claim_id, fields,
        actor_user_id=current_user.id,
        expected_version=expected_version,
    ))


@router.patch("/{claim_id}/status", response_model=ClaimResponse)
def update_claim_status(
    claim_id: int,
    body: ClaimStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    notifier: ClaimNotifier = Depends(get_notifier),
    current_user: User = Depends(require_staff),
):
    result = lifecycle.transition_status(
        db, claim_id, body.status,
        actor_user_id=current_user.id,
        note=body.note,
        expected_version=body.expected_version,
    )
    claim = unwrap(result)
    background_tasks.add_task(
        notifier.status_changed, claim.id, result.details["from_status"], result.details["to_status"],
    )
    return claim


@router.patch("/{claim_id}/assign", response_model=ClaimResponse)
def assign_claim(
    claim_id: int,
    body: ClaimAssignRequest,
    db: Session = Depends(get_db),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    current_user: User = Depends(require_staff),
):
    data, expected_version = _split_version(body)
    return unwrap(lifecycle.assign(
        db, claim_id,
        actor_user_id=current_user.id,
        expected_version=expected_version,
        **data,
    ))


@router.patch("/{claim_id}/assign-assessor", response_model=ClaimResponse)
def assign_claim_assessor(
    claim_id: int,
    body: AssessorAssignRequest,
    db: Session = Depends(get_db),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    current_user: User = Depends(require_staff),
):
    return unwrap(lifecycle.assign_assessor(
        db, claim_id, body.assessor_id,
        actor_user_id=current_user.id,
        expected_version=body.expected_version,
    ))


@router.patch("/{claim_id}/insurer-details", response_model=ClaimResponse)
def update_insurer_details(
    claim_id: int,
    body: InsurerDetailsUpdate,
    db: Session = Depends(get_db),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    current_user: User = Depends(require_staff),
):
    data, expected_version = _split_version(body)
    return unwrap(lifecycle.update_insurer_details(
        db, claim_id,
        actor_user_id=current_user.id,
        expected_version=expected_version,
        **data,
    ))


@router.patch("/{claim_id}/stage", response_model=ClaimResponse)
def update_claim_stage(
    claim_id: int,
    body: StageUpdate,
    db: Session = Depends(get_db),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    current_user: User = Depends(require_staff),
):
    return unwrap(lifecycle.update_stage(
        db, claim_id, body.stage,
        actor_user_id=current_user.id,
        expected_version=body.expected_version,
    ))


@router.post("/{claim_id}/close", response_model=ClaimResponse)
def close_claim(
    claim_id: int,
    body: ClaimCloseRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    notifier: ClaimNotifier = Depends(get_notifier),
    current_user: User = Depends(require_staff),
):
    result = lifecycle.close_claim(
        db, claim_id, body.reason,
        final_notes=body.final_notes,
        actor_user_id=current_user.id,
        expected_version=body.expected_version,
    )
    claim = unwrap(result)
    background_tasks.add_task(
        notifier.status_changed, claim.id, result.details["from_status"], result.details["to_status"],
    )
    return claim


@router.get("/{claim_id}/audit-logs", response_model=List[AuditLogResponse])
def get_claim_audit_logs(
    claim_id: int,
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    current_user: User = Depends(require_staff),
):
    _get_claim_or_404(db, store, claim_id)
    return lifecycle.list_audit_logs(db, claim_id)


@router.get("/{claim_id}/status-transitions", response_model=List[StatusTransitionResponse])
def get_claim_status_history(
    claim_id: int,
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
    lifecycle: ClaimLifecycleService = Depends(get_lifecycle_service),
    current_user: User = Depends(require_staff),
):
    _get_claim_or_404(db, store, claim_id)
    return lifecycle.list_transitions(db, claim_id)


@router.get("/{claim_id}/transitions", response_model=AllowedTransitionsResponse)
def get_claim_transitions(
    claim_id: int,
    db: Session = Depends(get_db),
    store: ClaimStore = Depends(get_claim_store),
    current_user: User = Depends(require_staff),
):
    claim = _get_claim_or_404(db, store, claim_id)
    valid = get_valid_transitions(ClaimStatus(claim.status))
    return AllowedTransitionsResponse(
        claim_id=claim.id,
        current_status=claim.status,
        valid_transitions=sorted(s.value for s in valid),
    )

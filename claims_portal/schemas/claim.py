from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field

from ..constants import CLOSURE_REASON_MIN, CLAIMANT_NAME_MIN, PHONE_MIN, PROPERTY_ADDRESS_MIN


class ClaimCreatedResponse(BaseModel):
    id: int
    reference_number: str
    status: str
    submitted_at: datetime

    class Config:
        from_attributes = True


class ClaimListResponse(BaseModel):
    id: int
    reference_number: str
    status: str
    stage: str
    claimant_name: str
    claimant_email: str
    claimant_phone: str
    property_address: str
    incident_type: str
    incident_date: date
    assigned_to_user_id: Optional[int] = None
    submitted_at: datetime
    last_updated_at: datetime
    version: int

    class Config:
        from_attributes = True


class ClaimListPage(BaseModel):
    items: List[ClaimListResponse]
    total: int
    limit: int
    offset: int


class ClaimResponse(ClaimListResponse):
    property_block: Optional[str] = None
    property_unit: Optional[str] = None
    property_place_id: Optional[str] = None
    property_construction_age: Optional[str] = None
    property_construction_type: Optional[str] = None

    incident_description: str

    has_building_damage: bool
    building_damage_description: Optional[str] = None
    building_damage_affected_areas: Optional[str] = None

    has_theft: bool
    theft_description: Optional[str] = None
    theft_police_reported: bool
    theft_police_reference: Optional[str] = None

    is_investment_property: bool
    tenant_name: Optional[str] = None
    tenant_phone: Optional[str] = None
    tenant_email: Optional[str] = None

    tenancy_agreements: List[str] = []
    damage_photos: List[str] = []
    repair_quotes: List[str] = []
    invoices: List[str] = []
    police_reports: List[str] = []
    other_documents: List[str] = []

    signature_data: str
    signature_type: str
    declaration_accepted: bool
    fraud_warning_accepted: bool
    contents_exclusion_accepted: bool

    policy_id: Optional[int] = None
    loss_assessor_id: Optional[int] = None
    insurer_claim_ref: Optional[str] = None
    insurer_submitted_at: Optional[datetime] = None
    insurer_response_date: Optional[datetime] = None

    closed_at: Optional[datetime] = None
    closure_reason: Optional[str] = None
    closed_by_user_id: Optional[int] = None


class ClaimPublicSummary(BaseModel):
    """What a claimant can see with only their reference number."""
    reference_number: str
    status: str
    incident_type: str
    submitted_at: datetime
    last_updated_at: datetime

    class Config:
        from_attributes = True


class StepValidationResponse(BaseModel):
    valid: bool
    step: int
    data: Dict[str, Any]


class VersionedRequest(BaseModel):
    expected_version: Optional[int] = None


class ClaimUpdate(VersionedRequest):
    claimant_name: Optional[str] = Field(None, min_length=CLAIMANT_NAME_MIN)
    claimant_email: Optional[EmailStr] = None
    claimant_phone: Optional[str] = Field(None, min_length=PHONE_MIN)
    property_address: Optional[str] = Field(None, min_length=PROPERTY_ADDRESS_MIN)
    property_block: Optional[str] = None
    property_unit: Optional[str] = None
    property_place_id: Optional[str] = None
    property_construction_age: Optional[str] = None
    property_construction_type: Optional[str] = None
    incident_description: Optional[str] = None
    building_damage_description: Optional[str] = None
    building_damage_affected_areas: Optional[str] = None
    theft_description: Optional[str] = None
    theft_police_reference: Optional[str] = None
    tenant_name: Optional[str] = None
    tenant_phone: Optional[str] = None
    tenant_email: Optional[EmailStr] = None
    tenancy_agreements: Optional[List[str]] = None
    damage_photos: Optional[List[str]] = None
    repair_quotes: Optional[List[str]] = None
    invoices: Optional[List[str]] = None
    police_reports: Optional[List[str]] = None
    other_documents: Optional[List[str]] = None


class ClaimStatusUpdate(VersionedRequest):
    status: str
    note: Optional[str] = None


class ClaimAssignRequest(VersionedRequest):
    handler_user_id: Optional[int] = None
    policy_id: Optional[int] = None


class AssessorAssignRequest(VersionedRequest):
    assessor_id: Optional[int] = None


class InsurerDetailsUpdate(VersionedRequest):
    insurer_claim_ref: Optional[str] = None
    insurer_submitted_at: Optional[datetime] = None
    insurer_response_date: Optional[datetime] = None


class StageUpdate(VersionedRequest):
    stage: str = Field(min_length=1, max_length=100)


class ClaimCloseRequest(VersionedRequest):
    reason: str = Field(min_length=CLOSURE_REASON_MIN)
    final_notes: Optional[str] = None


class AllowedTransitionsResponse(BaseModel):
    claim_id: int
    current_status: str
    valid_transitions: List[str]

"""Field shapes of the eight claim-form steps.

Each step model checks only what the step can check on its own. Requirements
that depend on a yes/no answer (possibly given on an earlier step) live in
``claims_portal.rules`` so they can be evaluated against the whole set of
answers.
"""
from datetime import date
from typing import Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictBool, field_validator

from ..constants import (
    CLAIMANT_NAME_MIN,
    INCIDENT_DESCRIPTION_MIN,
    PHONE_MIN,
    PROPERTY_ADDRESS_MIN,
    SIGNATURE_MIN,
)
from ..models.claim import IncidentType, SignatureType


class StepModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class ClaimantStep(StepModel):
    claimant_name: str = Field(min_length=CLAIMANT_NAME_MIN)
    claimant_email: EmailStr
    claimant_phone: str = Field(min_length=PHONE_MIN)


class PropertyStep(StepModel):
    property_address: str = Field(min_length=PROPERTY_ADDRESS_MIN)
    property_block: Optional[str] = None
    property_unit: Optional[str] = None
    property_place_id: Optional[str] = None
    property_construction_age: Optional[str] = None
    property_construction_type: Optional[str] = None


class IncidentStep(StepModel):
    incident_date: date
    incident_type: IncidentType
    incident_description: str = Field(min_length=INCIDENT_DESCRIPTION_MIN)


class BuildingDamageStep(StepModel):
    has_building_damage: StrictBool
    building_damage_description: Optional[str] = None
    building_damage_affected_areas: Optional[str] = None


class TheftStep(StepModel):
    has_theft: StrictBool
    theft_description: Optional[str] = None
    theft_police_reported: StrictBool = False
    theft_police_reference: Optional[str] = None


class OccupancyStep(StepModel):
    is_investment_property: StrictBool
    tenant_name: Optional[str] = None
    tenant_phone: Optional[str] = None
    tenant_email: Optional[str] = None
    tenancy_agreements: List[str] = Field(default_factory=list)


class UploadsStep(StepModel):
    damage_photos: List[str] = Field(default_factory=list)
    repair_quotes: List[str] = Field(default_factory=list)
    invoices: List[str] = Field(default_factory=list)
    police_reports: List[str] = Field(default_factory=list)
    other_documents: List[str] = Field(default_factory=list)


class DeclarationStep(StepModel):
    signature_data: str = Field(min_length=SIGNATURE_MIN)
    signature_type: SignatureType
    declaration_accepted: StrictBool
    fraud_warning_accepted: StrictBool
    contents_exclusion_accepted: StrictBool

    @field_validator("declaration_accepted", "fraud_warning_accepted", "contents_exclusion_accepted")
    @classmethod
    def must_be_accepted(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("must be accepted")
        return v


class ClaimSubmission(
    ClaimantStep,
    PropertyStep,
    IncidentStep,
    BuildingDamageStep,
    TheftStep,
    OccupancyStep,
    UploadsStep,
    DeclarationStep,
):
    """All eight steps together: the shape of a complete submission."""


STEP_MODELS: Dict[int, Type[StepModel]] = {
    1: ClaimantStep,
    2: PropertyStep,
    3: IncidentStep,
    4: BuildingDamageStep,
    5: TheftStep,
    6: OccupancyStep,
    7: UploadsStep,
    8: DeclarationStep,
}

FIELD_STEPS: Dict[str, int] = {
    name: step for step, model in STEP_MODELS.items() for name in model.model_fields
}

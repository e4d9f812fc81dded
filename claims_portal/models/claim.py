import secrets
import time
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Boolean, Text, JSON
from sqlalchemy.orm import relationship

from ..database import Base


class ClaimStatus(str, Enum):
    SUBMITTED = "submitted"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CLOSED = "closed"


# CLOSED is listed as a target so close_claim can validate against the same
# table; transition_status refuses it and routes callers to close_claim.
CLAIM_STATUS_TRANSITIONS = {
    ClaimStatus.SUBMITTED: frozenset({ClaimStatus.PENDING, ClaimStatus.APPROVED, ClaimStatus.REJECTED, ClaimStatus.CLOSED}),
    ClaimStatus.PENDING: frozenset({ClaimStatus.APPROVED, ClaimStatus.REJECTED, ClaimStatus.CLOSED}),
    ClaimStatus.APPROVED: frozenset({ClaimStatus.PENDING, ClaimStatus.CLOSED}),
    ClaimStatus.REJECTED: frozenset({ClaimStatus.PENDING, ClaimStatus.CLOSED}),
    ClaimStatus.CLOSED: frozenset(),
}

TERMINAL_STATUSES = frozenset({ClaimStatus.CLOSED})

INITIAL_STAGE = "new"


class IncidentType(str, Enum):
    FIRE = "fire"
    LIGHTNING = "lightning"
    EXPLOSION = "explosion"
    AIRCRAFT = "aircraft"
    RIOT = "riot"
    CIVIL_COMMOTION = "civil_commotion"
    STRIKERS_LOCKED_OUT_WORKERS = "strikers_locked_out_workers"
    MALICIOUS_PERSONS = "malicious_persons"
    THEFT_OR_ATTEMPTED_THEFT = "theft_or_attempted_theft"
    EARTHQUAKE = "earthquake"
    STORM = "storm"
    FLOOD = "flood"
    ESCAPE_OF_WATER = "escape_of_water"
    ESCAPE_OF_OIL = "escape_of_oil"
    IMPACT_BY_VEHICLE_OR_ANIMAL = "impact_by_vehicle_or_animal"
    LEAKAGE_OF_OIL_FROM_HEATING = "leakage_of_oil_from_heating"


class SignatureType(str, Enum):
    DRAWN = "drawn"
    TYPED = "typed"
    UPLOADED = "uploaded"


BASE36_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


class Claim(Base):
    __tablename__ = "claims"

    id = Column(Integer, primary_key=True, index=True)
    reference_number = Column(String(50), unique=True, index=True, nullable=False)

    status = Column(String(50), nullable=False, default=ClaimStatus.SUBMITTED.value, index=True)
    stage = Column(String(100), nullable=False, default=INITIAL_STAGE)
    version = Column(Integer, nullable=False)

    claimant_name = Column(String(255), nullable=False)
    claimant_email = Column(String(255), nullable=False)
    claimant_phone = Column(String(50), nullable=False)

    property_address = Column(Text, nullable=False)
    property_block = Column(String(255), nullable=True)
    property_unit = Column(String(100), nullable=True)
    property_place_id = Column(String(500), nullable=True)
    property_construction_age = Column(String(100), nullable=True)
    property_construction_type = Column(String(255), nullable=True)

    incident_date = Column(Date, nullable=False)
    incident_type = Column(String(100), nullable=False)
    incident_description = Column(Text, nullable=False)

    has_building_damage = Column(Boolean, nullable=False, default=False)
    building_damage_description = Column(Text, nullable=True)
    building_damage_affected_areas = Column(Text, nullable=True)

    has_theft = Column(Boolean, nullable=False, default=False)
    theft_description = Column(Text, nullable=True)
    theft_police_reported = Column(Boolean, nullable=False, default=False)
    theft_police_reference = Column(String(100), nullable=True)

    is_investment_property = Column(Boolean, nullable=False, default=False)
    tenant_name = Column(String(255), nullable=True)
    tenant_phone = Column(String(50), nullable=True)
    tenant_email = Column(String(255), nullable=True)

    tenancy_agreements = Column(JSON, nullable=False, default=list)
    damage_photos = Column(JSON, nullable=False, default=list)
    repair_quotes = Column(JSON, nullable=False, default=list)
    invoices = Column(JSON, nullable=False, default=list)
    police_reports = Column(JSON, nullable=False, default=list)
    other_documents = Column(JSON, nullable=False, default=list)

    signature_data = Column(Text, nullable=False)
    signature_type = Column(String(20), nullable=False)
    declaration_accepted = Column(Boolean, nullable=False)
    fraud_warning_accepted = Column(Boolean, nullable=False)
    contents_exclusion_accepted = Column(Boolean, nullable=False)

    assigned_to_user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    policy_id = Column(Integer, ForeignKey("insurance_policies.id"), nullable=True, index=True)
    loss_assessor_id = Column(Integer, ForeignKey("loss_assessors.id"), nullable=True, index=True)

    insurer_claim_ref = Column(String(255), nullable=True)
    insurer_submitted_at = Column(DateTime, nullable=True)
    insurer_response_date = Column(DateTime, nullable=True)

    closed_at = Column(DateTime, nullable=True)
    closure_reason = Column(Text, nullable=True)
    closed_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    assigned_to = relationship("User", foreign_keys=[assigned_to_user_id])
    policy = relationship("InsurancePolicy")
    loss_assessor = relationship("LossAssessor")

    __mapper_args__ = {"version_id_col": version}

    @staticmethod
    def generate_reference_number(prefix: str = "MEI") -> str:
        """Generate a human-quotable claim reference.

        Format: <PREFIX>-<base36 ms timestamp>-<6 random base36 chars>
        Example: MEI-LZ3K9Q1A-7F2KQX
        """
        timestamp = _to_base36(int(time.time() * 1000))
        suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(6))
        return f"{prefix}-{timestamp}-{suffix}"

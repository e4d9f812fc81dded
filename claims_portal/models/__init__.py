from .user import User, UserRole
from .policy import InsurancePolicy
from .assessor import LossAssessor
from .claim import Claim, ClaimStatus, IncidentType, SignatureType, CLAIM_STATUS_TRANSITIONS, TERMINAL_STATUSES
from .audit import AuditLog, ClaimStatusTransition
from .note import ClaimNote, NoteType, NoteVisibility
from .payment import ClaimPayment, PaymentType, PaymentStatus, PAYMENT_STATUS_TRANSITIONS, TERMINAL_PAYMENT_STATUSES

__all__ = [
    "User",
    "UserRole",
    "InsurancePolicy",
    "LossAssessor",
    "Claim",
    "ClaimStatus",
    "IncidentType",
    "SignatureType",
    "CLAIM_STATUS_TRANSITIONS",
    "TERMINAL_STATUSES",
    "AuditLog",
    "ClaimStatusTransition",
    "ClaimNote",
    "NoteType",
    "NoteVisibility",
    "ClaimPayment",
    "PaymentType",
    "PaymentStatus",
    "PAYMENT_STATUS_TRANSITIONS",
    "TERMINAL_PAYMENT_STATUSES",
]

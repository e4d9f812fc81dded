from .assembler import SubmissionRejected, assemble_submission
from .form_session import FormSession
from .rules import ClaimValidationError, validate_step, validate_submission

__all__ = [
    "FormSession",
    "SubmissionRejected",
    "assemble_submission",
    "ClaimValidationError",
    "validate_step",
    "validate_submission",
]

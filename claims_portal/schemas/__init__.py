from .user import UserCreate, UserResponse
from .claim import ClaimCreatedResponse, ClaimUpdate, ClaimResponse, ClaimListResponse, ClaimListPage, ClaimStatusUpdate
from .auth import Token
from .steps import ClaimSubmission, STEP_MODELS

__all__ = [
    "UserCreate",
    "UserResponse",
    "ClaimCreatedResponse",
    "ClaimUpdate",
    "ClaimResponse",
    "ClaimListResponse",
    "ClaimListPage",
    "ClaimStatusUpdate",
    "Token",
    "ClaimSubmission",
    "STEP_MODELS",
]

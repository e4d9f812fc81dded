from .auth import router as auth_router
from .claims import router as claims_router
from .notes import router as notes_router
from .payments import router as payments_router
from .users import router as users_router
from .policies import router as policies_router
from .assessors import router as assessors_router
from .uploads import router as uploads_router
from .assist import router as assist_router

__all__ = [
    "auth_router",
    "claims_router",
    "notes_router",
    "payments_router",
    "users_router",
    "policies_router",
    "assessors_router",
    "uploads_router",
    "assist_router",
]

from .auth import AuthService
from .audit import AuditService
from .claim_store import ClaimStore, ClaimFilter
from .lifecycle import ClaimLifecycleService
from .results import WriteResult, WriteStatus

__all__ = [
    "AuthService",
    "AuditService",
    "ClaimStore",
    "ClaimFilter",
    "ClaimLifecycleService",
    "WriteResult",
    "WriteStatus",
]

from fastapi import HTTPException, status

from ..providers import UploadSlotProvider, get_upload_provider
from ..services.claim_store import ClaimStore
from ..services.lifecycle import ClaimLifecycleService
from ..services.payments import PaymentService
from ..services.results import WriteResult, WriteStatus

RESULT_HTTP_STATUS = {
    WriteStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    WriteStatus.INVALID_TRANSITION: status.HTTP_400_BAD_REQUEST,
    WriteStatus.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    WriteStatus.CONFLICT: status.HTTP_409_CONFLICT,
    WriteStatus.WRITE_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}

claim_store = ClaimStore()
lifecycle_service = ClaimLifecycleService()
payment_service = PaymentService()


def get_claim_store() -> ClaimStore:
    return claim_store


def get_lifecycle_service() -> ClaimLifecycleService:
    return lifecycle_service


def get_payment_service() -> PaymentService:
    return payment_service


def get_upload_slot_provider() -> UploadSlotProvider:
    return get_upload_provider()


def unwrap(result: WriteResult):
    """Return the written value or raise the HTTP error matching the result status."""
    if result.ok:
        return result.value
    raise HTTPException(
        status_code=RESULT_HTTP_STATUS.get(result.status, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=result.message,
    )

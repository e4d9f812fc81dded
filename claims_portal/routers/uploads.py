import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..providers import UploadSlotError, UploadSlotProvider
from ..schemas.assist import UploadSlotRequest, UploadSlotResponse
from .deps import get_upload_slot_provider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.post("/slot", response_model=UploadSlotResponse)
def request_upload_slot(
    body: UploadSlotRequest,
    provider: UploadSlotProvider = Depends(get_upload_slot_provider),
):
    """Issue a signed URL the claimant's browser uploads one file to."""
    try:
        slot = provider.issue_slot(body.category, body.filename, body.content_type)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UploadSlotError as e:
        logger.error(f"Upload slot request failed: category={body.category} error={e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Upload service unavailable")
    return UploadSlotResponse(
        upload_url=slot.upload_url,
        object_path=slot.object_path,
        expires_in=slot.expires_in,
    )

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..schemas.assist import ConstructionDetailsRequest, EnhanceRequest, EnhanceResponse
from ..services.address import AddressLookupError, AddressLookupUnavailable, AddressService, get_address_service
from ..services.enhancement import DescriptionEnhancer, EnhancementInputError, get_enhancer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["assist"])


def _lookup(call, *args) -> Dict[str, Any]:
    try:
        return call(*args)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AddressLookupUnavailable as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except AddressLookupError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Address lookup failed")


@router.get("/address/autocomplete")
def address_autocomplete(
    input: str = Query(..., description="Partial UK address"),
    addresses: AddressService = Depends(get_address_service),
):
    return _lookup(addresses.autocomplete, input)


@router.get("/address/details/{place_id}")
def address_details(
    place_id: str,
    addresses: AddressService = Depends(get_address_service),
):
    return _lookup(addresses.place_details, place_id)


@router.post("/address/construction-details")
def construction_details(
    body: ConstructionDetailsRequest,
    addresses: AddressService = Depends(get_address_service),
):
    return _lookup(addresses.construction_details, body.address)


@router.post("/ai/enhance-description", response_model=EnhanceResponse)
def enhance_description(
    body: EnhanceRequest,
    enhancer: DescriptionEnhancer = Depends(get_enhancer),
):
    """Rewrite an incident description; falls back to simple formatting when the AI call fails."""
    try:
        result = enhancer.enhance(body.text)
    except EnhancementInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return EnhanceResponse(enhanced_text=result.text, source=result.source, warning=result.warning)

from typing import Literal, Optional

from pydantic import BaseModel, Field

FileCategory = Literal[
    "damage_photos",
    "repair_quotes",
    "invoices",
    "police_reports",
    "other_documents",
    "tenancy_agreements",
]


class UploadSlotRequest(BaseModel):
    category: FileCategory
    filename: str = Field(min_length=1, max_length=255)
    content_type: str = "application/octet-stream"


class UploadSlotResponse(BaseModel):
    upload_url: str
    object_path: str
    expires_in: int


class EnhanceRequest(BaseModel):
    text: str


class EnhanceResponse(BaseModel):
    enhanced_text: str
    source: str
    warning: Optional[str] = None


class ConstructionDetailsRequest(BaseModel):
    address: str

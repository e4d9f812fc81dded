import logging
import uuid
from typing import Dict

from .base import UploadSlot, UploadSlotProvider, build_object_path

logger = logging.getLogger(__name__)


class LocalStorageProvider(UploadSlotProvider):
    """Simulated storage for development and tests: issues URLs without contacting any service."""

    def __init__(self, base_url: str = "http://localhost:8000/local-uploads", expires_in: int = 3600):
        self.base_url = base_url.rstrip("/")
        self.expires_in = expires_in
        self.issued: Dict[str, str] = {}

    def issue_slot(self, category: str, filename: str, content_type: str) -> UploadSlot:
        object_path = build_object_path(category, filename)
        token = uuid.uuid4().hex
        self.issued[object_path] = content_type
        logger.info(f"Simulated upload slot: path={object_path} content_type={content_type}")
        return UploadSlot(
            upload_url=f"{self.base_url}/{object_path}?token={token}",
            object_path=object_path,
            expires_in=self.expires_in,
        )

    def reset(self) -> None:
        self.issued.clear()

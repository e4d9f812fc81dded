import logging
from typing import Optional

import httpx

from .base import UploadSlot, UploadSlotError, UploadSlotProvider, build_object_path

logger = logging.getLogger(__name__)


class SupabaseStorageProvider(UploadSlotProvider):
    """Signed upload URLs from Supabase storage; the browser uploads directly."""

    def __init__(
        self,
        url: str,
        service_role_key: str,
        bucket: str,
        expires_in: int = 3600,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url.rstrip("/")
        self.base_api_url = f"{self.url}/storage/v1"
        self.bucket = bucket
        self.expires_in = expires_in
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {service_role_key}",
            "apikey": service_role_key,
        }

    def issue_slot(self, category: str, filename: str, content_type: str) -> UploadSlot:
        object_path = build_object_path(category, filename)
        sign_url = f"{self.base_api_url}/object/upload/sign/{self.bucket}/{object_path}"

        try:
            with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
                response = client.post(sign_url, headers=self.headers, json={"expiresIn": self.expires_in})
        except httpx.HTTPError as e:
            logger.error(f"Error requesting signed upload URL: {e}")
            raise UploadSlotError(f"Storage unavailable: {e}") from e

        if response.status_code != 200:
            logger.error(
                f"Failed to generate signed upload URL: status={response.status_code} "
                f"bucket={self.bucket} path={object_path} body={response.text}"
            )
            raise UploadSlotError("Signed upload URL generation failed")

        signed_path = response.json().get("url")
        if not signed_path:
            raise UploadSlotError("Storage response did not contain an upload url")

        # Supabase returns a path relative to /storage/v1
        upload_url = signed_path if signed_path.startswith("http") else f"{self.base_api_url}{signed_path}"
        logger.info(f"Issued upload slot: bucket={self.bucket} path={object_path} content_type={content_type}")
        return UploadSlot(upload_url=upload_url, object_path=f"{self.bucket}/{object_path}", expires_in=self.expires_in)

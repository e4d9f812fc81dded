from ..config import get_settings
from .base import UploadSlot, UploadSlotError, UploadSlotProvider
from .local import LocalStorageProvider
from .supabase import SupabaseStorageProvider


def get_upload_provider() -> UploadSlotProvider:
    settings = get_settings()
    if settings.supabase_url and settings.supabase_service_role_key:
        return SupabaseStorageProvider(
            url=settings.supabase_url,
            service_role_key=settings.supabase_service_role_key,
            bucket=settings.storage_bucket,
            expires_in=settings.upload_url_expires_in,
            timeout=settings.http_timeout,
        )
    return LocalStorageProvider(expires_in=settings.upload_url_expires_in)


__all__ = [
    "UploadSlot",
    "UploadSlotError",
    "UploadSlotProvider",
    "LocalStorageProvider",
    "SupabaseStorageProvider",
    "get_upload_provider",
]

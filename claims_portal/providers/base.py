import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..constants import FILE_CATEGORIES


class UploadSlotError(Exception):
    pass


@dataclass
class UploadSlot:
    upload_url: str
    object_path: str
    expires_in: int


def build_object_path(category: str, filename: str) -> str:
    """Storage key for a new upload: <category>/<random id>/<sanitised filename>."""
    if category not in FILE_CATEGORIES:
        raise ValueError(f"Unknown file category: {category}")
    safe_name = re.sub(r"[^A-Za-z0-9._-]", "_", (filename or "").strip()) or "file"
    return f"{category}/{uuid.uuid4().hex}/{safe_name[:200]}"


class UploadSlotProvider(ABC):
    @abstractmethod
    def issue_slot(self, category: str, filename: str, content_type: str) -> UploadSlot:
        pass

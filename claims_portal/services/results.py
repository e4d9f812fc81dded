from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class WriteStatus(str, Enum):
    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_INPUT = "INVALID_INPUT"
    CONFLICT = "CONFLICT"
    WRITE_FAILED = "WRITE_FAILED"


@dataclass
class WriteResult(Generic[T]):
    status: WriteStatus
    value: Optional[T] = None
    message: Optional[str] = None
    details: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == WriteStatus.OK

    @classmethod
    def success(cls, value: Any) -> "WriteResult":
        return cls(WriteStatus.OK, value=value)

    @classmethod
    def failure(cls, status: WriteStatus, message: str, **details: Any) -> "WriteResult":
        return cls(status, message=message, details=details)

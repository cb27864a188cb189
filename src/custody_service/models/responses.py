"""
API Response Models

Every JSON response shares one envelope.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ApiResponse(BaseModel):
    """Standard response envelope"""

    success: bool = Field(default=True)
    message: str = Field(default="Success")
    data: Optional[Any] = None
    meta: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=_now)

    @classmethod
    def ok(cls, data: Any = None, message: str = "Success", meta: Optional[Dict[str, Any]] = None) -> "ApiResponse":
        return cls(success=True, message=message, data=data, meta=meta)

    @classmethod
    def listing(cls, key: str, items: list, message: str = "Success", **meta: Any) -> "ApiResponse":
        """Wrap a list under `data[key]` with its count in `meta`"""
        return cls(success=True, message=message, data={key: items}, meta={"count": len(items), **meta})

    @classmethod
    def fail(cls, message: str, data: Any = None) -> "ApiResponse":
        return cls(success=False, message=message, data=data)


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(default="healthy")
    service: str = Field(default="malkhana-custody-service")
    timestamp: datetime = Field(default_factory=_now)
    storage_available: bool = Field(default=True)
    database_available: bool = Field(default=True)

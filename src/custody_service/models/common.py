"""
Shared value types
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OfficerSnapshot(BaseModel):
    """Name and badge of an officer, copied at write time.

    Snapshots are never re-resolved against the staff directory, so later
    changes to a staff record do not rewrite history.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Officer name")
    badge_number: str = Field(..., min_length=1, max_length=50, description="Officer badge number")

    @classmethod
    def from_columns(cls, name: Optional[str], badge_number: Optional[str]) -> Optional["OfficerSnapshot"]:
        if not name and not badge_number:
            return None
        return cls(name=name or "-", badge_number=badge_number or "-")


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise an incoming timestamp to the naive-UTC storage convention"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

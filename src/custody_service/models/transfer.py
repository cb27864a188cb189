"""
Custody Transfer Data Models

One transfer is one movement or handling event of an evidence item. The
ordered sequence of transfers for an item is its chain of custody.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import OfficerSnapshot, to_naive_utc


class TransferPurpose(str, Enum):
    """Reason for moving an evidence item"""
    STORAGE = "STORAGE"
    COURT_PRODUCTION = "COURT_PRODUCTION"
    FORENSIC_LAB = "FORENSIC_LAB"
    EXAMINATION = "EXAMINATION"
    RELOCATION = "RELOCATION"


class CustodyTransfer(BaseModel):
    """Recorded custody transfer"""

    transfer_id: str
    evidence_id: str
    source_location: Optional[str] = None
    releasing_officer: Optional[OfficerSnapshot] = None
    destination_location: str
    receiving_officer: Optional[OfficerSnapshot] = None
    transfer_purpose: TransferPurpose
    transfer_timestamp: datetime
    notes: Optional[str] = None
    recorded_at: datetime

    @classmethod
    def from_db(cls, row) -> "CustodyTransfer":
        return cls(
            transfer_id=row.transfer_id,
            evidence_id=row.evidence_id,
            source_location=row.source_location,
            releasing_officer=OfficerSnapshot.from_columns(row.releasing_officer_name, row.releasing_officer_badge),
            destination_location=row.destination_location,
            receiving_officer=OfficerSnapshot.from_columns(row.receiving_officer_name, row.receiving_officer_badge),
            transfer_purpose=TransferPurpose(row.transfer_purpose),
            transfer_timestamp=row.transfer_timestamp,
            notes=row.notes,
            recorded_at=row.recorded_at,
        )


class TransferCreateRequest(BaseModel):
    """Request to record a custody transfer.

    The releasing officer is stamped from the authenticated caller.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "evidence_id": "550e8400-e29b-41d4-a716-446655440000",
                "source_location": "Malkhana Room 2",
                "destination_location": "State Forensic Lab",
                "transfer_purpose": "FORENSIC_LAB",
                "receiving_officer": {"name": "Dr. A. Iyer", "badge_number": "FSL-77"},
                "notes": "Sealed, seal #4471 intact"
            }
        }
    )

    evidence_id: str = Field(..., min_length=1, description="Evidence item being moved")
    source_location: Optional[str] = Field(None, max_length=255)
    destination_location: str = Field(..., min_length=1, max_length=255)
    transfer_purpose: TransferPurpose
    receiving_officer: Optional[OfficerSnapshot] = None
    transfer_timestamp: Optional[datetime] = Field(
        None, description="When the transfer happened (defaults to the time of recording)"
    )
    notes: Optional[str] = None

    @field_validator("transfer_timestamp")
    @classmethod
    def normalise_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

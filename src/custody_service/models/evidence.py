"""
Evidence Data Models

Core domain models for seized evidence items.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

EVIDENCE_ROUTE = "/api/v1/evidence"


class AssociatedParty(str, Enum):
    """Whom the seized item is attributed to"""
    SUSPECT = "SUSPECT"
    VICTIM = "VICTIM"
    UNIDENTIFIED = "UNIDENTIFIED"


class Quantity(BaseModel):
    amount: float = Field(..., ge=0, description="Quantity seized")
    measurement_unit: str = Field(default="piece", description="Unit of measurement")


class StorageDetails(BaseModel):
    """Physical location in the malkhana (evidence store room)"""
    room_number: Optional[str] = None
    rack_number: Optional[str] = None
    compartment_id: Optional[str] = None


class EvidenceItem(BaseModel):
    """Evidence item as exposed by the API"""

    evidence_id: str = Field(..., description="Unique evidence identifier")
    incident_id: str = Field(..., description="Owning incident")
    item_category: str
    associated_party: AssociatedParty
    item_description: str
    item_quantity: Quantity
    storage_details: StorageDetails = Field(default_factory=StorageDetails)
    remarks: Optional[str] = None
    photograph_url: Optional[str] = Field(None, description="Route serving the evidence photograph")
    tracking_qr_code: Optional[str] = Field(None, description="Route serving the tracking QR image")
    tracking_payload: Optional[str] = Field(None, description="Text encoded in the tracking QR")
    created_at: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "evidence_id": "550e8400-e29b-41d4-a716-446655440000",
                "incident_id": "0b7c9a50-5d0e-4c1b-9a3c-5b5f1f7c2d11",
                "item_category": "ELECTRONICS",
                "associated_party": "SUSPECT",
                "item_description": "Black smartphone, cracked screen",
                "item_quantity": {"amount": 1, "measurement_unit": "piece"},
                "storage_details": {"room_number": "2", "rack_number": "R4", "compartment_id": "C17"},
                "remarks": "Sealed in evidence bag #4471",
                "photograph_url": "/api/v1/evidence/550e8400-e29b-41d4-a716-446655440000/photograph",
                "tracking_qr_code": "/api/v1/evidence/550e8400-e29b-41d4-a716-446655440000/qrcode",
                "tracking_payload": "EVIDENCE:550e8400-e29b-41d4-a716-446655440000",
                "created_at": "2025-03-03T10:30:00"
            }
        }
    )


class EvidenceRegistration(BaseModel):
    """Fields supplied when registering an evidence item"""

    model_config = ConfigDict(str_strip_whitespace=True)

    incident_id: str = Field(..., min_length=1)
    item_category: str = Field(..., min_length=1, max_length=100)
    associated_party: AssociatedParty
    item_description: str = Field(..., min_length=1)
    quantity: float = Field(..., ge=0)
    measurement_unit: str = Field(default="piece", min_length=1, max_length=50)
    room_number: Optional[str] = None
    rack_number: Optional[str] = None
    compartment_id: Optional[str] = None
    remarks: Optional[str] = None


class PhotoUpload(BaseModel):
    """An uploaded photograph, already read into memory"""

    content: bytes
    content_type: str
    filename: Optional[str] = None

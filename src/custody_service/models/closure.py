"""
Case Closure Data Models
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DispositionMethod(str, Enum):
    """Final disposition of an incident's evidence"""
    RETURNED_TO_OWNER = "RETURNED_TO_OWNER"
    DESTROYED = "DESTROYED"
    SOLD_AT_AUCTION = "SOLD_AT_AUCTION"
    COURT_RETENTION = "COURT_RETENTION"


class CaseClosure(BaseModel):
    """Terminal disposition record of an incident"""

    model_config = ConfigDict(from_attributes=True)

    closure_id: str
    incident_id: str
    disposition_method: DispositionMethod
    court_order_number: Optional[str] = None
    closure_date: date
    closure_remarks: Optional[str] = None
    created_at: datetime


class ClosureCreateRequest(BaseModel):
    """Request to close an incident"""

    model_config = ConfigDict(str_strip_whitespace=True)

    incident_id: str = Field(..., min_length=1)
    disposition_method: DispositionMethod
    court_order_number: Optional[str] = Field(None, max_length=100)
    closure_date: date
    closure_remarks: Optional[str] = None

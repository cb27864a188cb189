"""
Incident Data Models

An incident is a registered case (FIR) that evidence is attached to. Its
lifecycle has two states: ACTIVE (initial) and CLOSED (terminal).
"""

from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import OfficerSnapshot


class IncidentStatus(str, Enum):
    """Incident lifecycle state"""
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


# Lifecycle state machine: the only legal move is ACTIVE -> CLOSED, and only
# a case closure performs it. Nothing reopens a CLOSED incident.
ALLOWED_TRANSITIONS: Dict[IncidentStatus, Set[IncidentStatus]] = {
    IncidentStatus.ACTIVE: {IncidentStatus.CLOSED},
    IncidentStatus.CLOSED: set(),
}

MIN_REGISTRATION_YEAR = 1900


class Incident(BaseModel):
    """Registered incident"""

    incident_id: str
    registration_station: str
    fir_number: str
    registration_year: int
    assigned_investigator: Optional[OfficerSnapshot] = None
    fir_filing_date: date
    evidence_seizure_date: date
    applicable_sections: str
    current_status: IncidentStatus = IncidentStatus.ACTIVE
    created_at: datetime
    updated_at: datetime
    closed_at: Optional[datetime] = None

    @classmethod
    def from_db(cls, row) -> "Incident":
        return cls(
            incident_id=row.incident_id,
            registration_station=row.registration_station,
            fir_number=row.fir_number,
            registration_year=row.registration_year,
            assigned_investigator=OfficerSnapshot.from_columns(row.investigator_name, row.investigator_badge),
            fir_filing_date=row.fir_filing_date,
            evidence_seizure_date=row.evidence_seizure_date,
            applicable_sections=row.applicable_sections,
            current_status=IncidentStatus(row.current_status),
            created_at=row.created_at,
            updated_at=row.updated_at,
            closed_at=row.closed_at,
        )


class IncidentCreateRequest(BaseModel):
    """Fields supplied when registering an incident.

    The investigating officer is not part of the request; it is stamped from
    the authenticated caller.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "registration_station": "Central",
                "fir_number": "12/2025",
                "registration_year": 2025,
                "fir_filing_date": "2025-03-02",
                "evidence_seizure_date": "2025-03-03",
                "applicable_sections": "IPC 379, 411"
            }
        }
    )

    registration_station: str = Field(..., min_length=1, max_length=150, description="Registering police station")
    fir_number: str = Field(..., min_length=1, max_length=100, description="FIR / case registration number")
    registration_year: int = Field(..., ge=MIN_REGISTRATION_YEAR, description="Year of registration")
    fir_filing_date: date = Field(..., description="Date the FIR was filed")
    evidence_seizure_date: date = Field(..., description="Date the evidence was seized")
    applicable_sections: str = Field(..., min_length=1, description="Legal sections invoked")

    @field_validator("registration_year")
    @classmethod
    def year_not_in_future(cls, value: int) -> int:
        latest = date.today().year + 1
        if value > latest:
            raise ValueError(f"Year cannot be later than {latest}")
        return value


class IncidentMetrics(BaseModel):
    """Dashboard counters.

    The three numbers come from independent count queries; under concurrent
    writes total may briefly differ from active + closed.
    """

    total_incidents: int = Field(..., ge=0)
    active_incidents: int = Field(..., ge=0)
    closed_incidents: int = Field(..., ge=0)

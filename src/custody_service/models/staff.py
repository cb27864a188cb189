"""
Staff Data Models
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Designation(str, Enum):
    """Role within the system; determines access levels"""
    OFFICER = "OFFICER"
    ADMIN = "ADMIN"


class StaffMember(BaseModel):
    """Staff member as exposed by the API (password hash never included)"""

    model_config = ConfigDict(from_attributes=True)

    staff_id: str
    full_name: str
    badge_number: str
    designation: Designation
    station_assignment: str
    created_at: datetime


class StaffRegisterRequest(BaseModel):
    """Request to create a staff account"""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "full_name": "Inspector R. Sharma",
                "badge_number": "mh-1042",
                "station_assignment": "Central",
                "password": "s3cure-pass",
                "designation": "OFFICER"
            }
        }
    )

    full_name: str = Field(..., min_length=1, max_length=100, description="Staff name")
    badge_number: str = Field(..., min_length=1, max_length=50, description="Unique badge number")
    station_assignment: str = Field(..., min_length=1, max_length=100, description="Assigned station")
    password: str = Field(..., min_length=6, max_length=72, description="Initial password")
    designation: Designation = Field(default=Designation.OFFICER)

    @field_validator("badge_number")
    @classmethod
    def normalise_badge(cls, value: str) -> str:
        return value.upper()


class LoginRequest(BaseModel):
    """Credentials for staff login"""

    badge_number: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

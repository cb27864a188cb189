"""Database layer"""

from .client import DatabaseClient, get_db
from .models import (
    Base,
    CaseClosureDB,
    CustodyTransferDB,
    EvidenceItemDB,
    IncidentDB,
    StaffMemberDB,
    utcnow,
)

__all__ = [
    "DatabaseClient",
    "get_db",
    "Base",
    "CaseClosureDB",
    "CustodyTransferDB",
    "EvidenceItemDB",
    "IncidentDB",
    "StaffMemberDB",
    "utcnow",
]

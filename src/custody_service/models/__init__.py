"""Data models for Custody Service"""

from .common import OfficerSnapshot
from .staff import Designation, LoginRequest, StaffMember, StaffRegisterRequest
from .incident import (
    ALLOWED_TRANSITIONS,
    Incident,
    IncidentCreateRequest,
    IncidentMetrics,
    IncidentStatus,
)
from .evidence import (
    AssociatedParty,
    EvidenceItem,
    EvidenceRegistration,
    PhotoUpload,
    Quantity,
    StorageDetails,
)
from .transfer import CustodyTransfer, TransferCreateRequest, TransferPurpose
from .closure import CaseClosure, ClosureCreateRequest, DispositionMethod
from .report import CategoryCount, OfficerWorkload, OverviewReport, TimelinePoint
from .responses import ApiResponse, HealthResponse

__all__ = [
    "OfficerSnapshot",
    "Designation",
    "LoginRequest",
    "StaffMember",
    "StaffRegisterRequest",
    "ALLOWED_TRANSITIONS",
    "Incident",
    "IncidentCreateRequest",
    "IncidentMetrics",
    "IncidentStatus",
    "AssociatedParty",
    "EvidenceItem",
    "EvidenceRegistration",
    "PhotoUpload",
    "Quantity",
    "StorageDetails",
    "CustodyTransfer",
    "TransferCreateRequest",
    "TransferPurpose",
    "CaseClosure",
    "ClosureCreateRequest",
    "DispositionMethod",
    "CategoryCount",
    "OfficerWorkload",
    "OverviewReport",
    "TimelinePoint",
    "ApiResponse",
    "HealthResponse",
]

"""
Incident API Routes
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.api.dependencies import get_current_staff, get_services, snapshot_of
from custody_service.core.services import ServiceContainer
from custody_service.infrastructure.database.client import get_db
from custody_service.models import ApiResponse, IncidentCreateRequest, IncidentStatus, StaffMember

router = APIRouter(
    prefix="/api/v1/incidents",
    tags=["incidents"],
    dependencies=[Depends(get_current_staff)],
)
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=ApiResponse,
    status_code=201,
    summary="Register Incident",
    description="""
Register a new incident (FIR).

**Workflow**:
1. Request fields are validated (year between 1900 and next year, non-blank station, FIR number and sections)
2. The caller is stamped as assigned investigator (name and badge copied onto the record)
3. The incident is stored with status ACTIVE

**Authorization**: Any authenticated staff member
    """,
    responses={
        201: {"description": "Incident registered"},
        400: {"description": "Validation failed"},
        409: {"description": "Duplicate FIR number (only when unique FIR numbers are enforced)"}
    }
)
async def create_incident(
    request: IncidentCreateRequest,
    staff: StaffMember = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    incident = await services.incidents.create(request, snapshot_of(staff), db)
    return ApiResponse.ok(data={"incident": incident}, message="Incident registered successfully")


@router.get("", response_model=ApiResponse, summary="List Incidents")
async def list_incidents(
    status: Optional[IncidentStatus] = Query(None, description="Filter by lifecycle status"),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    """All incidents, newest first"""
    incidents = await services.incidents.list_all(db, status=status)
    return ApiResponse.listing("incidents", incidents)


@router.get(
    "/search",
    response_model=ApiResponse,
    summary="Search Incidents",
    description="""
Search incidents. Filters combine with AND.

**Query Parameters**:
- station: case-insensitive substring of the registering station
- fir_number: exact FIR number
- year: registration year
- status: ACTIVE or CLOSED
- q: keyword, case-insensitive substring of station, FIR number or applicable sections

Results are not paginated and are ordered newest first. No match returns an empty list.
    """
)
async def search_incidents(
    station: Optional[str] = Query(None),
    fir_number: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    status: Optional[IncidentStatus] = Query(None),
    q: Optional[str] = Query(None, description="Keyword"),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    incidents = await services.incidents.search(
        db,
        station=station,
        fir_number=fir_number,
        year=year,
        status=status,
        keyword=q,
    )
    return ApiResponse.listing("incidents", incidents)


@router.get("/metrics", response_model=ApiResponse, summary="Incident Metrics")
async def incident_metrics(
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    metrics = await services.incidents.metrics(db)
    return ApiResponse.ok(data={"metrics": metrics})


@router.get(
    "/alerts/pending",
    response_model=ApiResponse,
    summary="Long-Pending Incidents",
    description="ACTIVE incidents registered at least `days` days ago, oldest first."
)
async def pending_alerts(
    days: Optional[int] = Query(None, ge=1, description="Age threshold in days"),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    threshold = days or services.settings.pending_threshold_days
    incidents = await services.incidents.list_long_pending(db, threshold_days=threshold)
    return ApiResponse.listing(
        "incidents",
        incidents,
        message=f"Incidents pending more than {threshold} days",
        threshold_days=threshold,
    )


@router.get(
    "/{incident_id}",
    response_model=ApiResponse,
    summary="Get Incident",
    responses={
        200: {"description": "Incident returned"},
        400: {"description": "Malformed incident id"},
        404: {"description": "Incident not found"}
    }
)
async def get_incident(
    incident_id: str,
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    incident = await services.incidents.get(incident_id, db)
    return ApiResponse.ok(data={"incident": incident})

"""
Case Closure API Routes
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.api.dependencies import get_current_staff, get_services, require_admin
from custody_service.core.services import ServiceContainer
from custody_service.infrastructure.database.client import get_db
from custody_service.models import ApiResponse, ClosureCreateRequest, StaffMember

router = APIRouter(prefix="/api/v1/closures", tags=["closures"])
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=ApiResponse,
    status_code=201,
    summary="Close Incident",
    description="""
Record the final disposition of an incident and mark it CLOSED.

**Workflow**:
1. The incident must exist
2. A closure record is written and the incident moves ACTIVE -> CLOSED in one transaction
3. Once closed, no further evidence or transfers can be recorded against it

**Authorization**: ADMIN only
    """,
    responses={
        201: {"description": "Incident closed"},
        400: {"description": "Validation failed"},
        403: {"description": "Caller is not an ADMIN"},
        404: {"description": "Incident not found"},
        409: {"description": "Incident already closed"}
    }
)
async def close_incident(
    request: ClosureCreateRequest,
    admin: StaffMember = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    closure = await services.closures.close(request, db)
    logger.info(f"Admin {admin.badge_number} closed incident {closure.incident_id}")
    return ApiResponse.ok(data={"closure": closure}, message="Case closed successfully")


@router.get("/incident/{incident_id}", response_model=ApiResponse, summary="Closure of an Incident")
async def get_closure(
    incident_id: str,
    staff: StaffMember = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    """Closure record of an incident; `closure` is null while the incident is open"""
    closure = await services.closures.get_by_incident(incident_id, db)
    if closure is None:
        return ApiResponse.ok(data={"closure": None}, message="No closure record found for this incident")
    return ApiResponse.ok(data={"closure": closure})

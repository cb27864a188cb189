"""
Report API Routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.api.dependencies import get_services, require_admin
from custody_service.core.services import ServiceContainer
from custody_service.infrastructure.database.client import get_db
from custody_service.models import ApiResponse

router = APIRouter(
    prefix="/api/v1/reports",
    tags=["reports"],
    dependencies=[Depends(require_admin)],
)


@router.get(
    "/overview",
    response_model=ApiResponse,
    summary="Dashboard Overview",
    description="""
Aggregates for the admin dashboard.

**Response Fields**:
- incidents_timeline: incidents registered per month (latest 12 months with data, ascending)
- closures_timeline: incidents closed per month (same window rule)
- evidence_distribution: top 10 item categories by count
- officer_workload: top 10 investigators by number of incidents
- metrics: total, active and closed incident counts

**Authorization**: ADMIN only
    """
)
async def overview(
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    report = await services.reports.overview(db)
    return ApiResponse.ok(data={"report": report})

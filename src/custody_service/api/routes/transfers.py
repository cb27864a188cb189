"""
Custody Transfer API Routes
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.api.dependencies import get_current_staff, get_services, snapshot_of
from custody_service.core.services import ServiceContainer
from custody_service.infrastructure.database.client import get_db
from custody_service.models import ApiResponse, StaffMember, TransferCreateRequest

router = APIRouter(
    prefix="/api/v1/transfers",
    tags=["transfers"],
    dependencies=[Depends(get_current_staff)],
)
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=ApiResponse,
    status_code=201,
    summary="Record Custody Transfer",
    description="""
Append a movement of an evidence item to its chain of custody.

**Workflow**:
1. The evidence item must exist and its incident must still be ACTIVE
2. The caller is stamped as releasing officer (name and badge copied onto the record)
3. `transfer_timestamp` defaults to the time of recording

Transfers are never edited or deleted.

**Authorization**: Any authenticated staff member
    """,
    responses={
        201: {"description": "Transfer recorded"},
        400: {"description": "Validation failed"},
        404: {"description": "Evidence item not found"},
        409: {"description": "Incident is closed"}
    }
)
async def record_transfer(
    request: TransferCreateRequest,
    staff: StaffMember = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    transfer = await services.transfers.record(request, snapshot_of(staff), db)
    return ApiResponse.ok(data={"transfer": transfer}, message="Custody transfer recorded successfully")


@router.get(
    "/evidence/{evidence_id}",
    response_model=ApiResponse,
    summary="Chain of Custody",
    description="All transfers of an evidence item, oldest first by transfer time. Unknown items return an empty chain."
)
async def chain_of_custody(
    evidence_id: str,
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    transfers = await services.transfers.history(evidence_id, db)
    return ApiResponse.listing("transfers", transfers)

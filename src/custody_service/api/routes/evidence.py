"""
Evidence API Routes

RESTful endpoints for registering and looking up seized evidence items.
"""

import logging
from io import BytesIO
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.api.dependencies import get_current_staff, get_services
from custody_service.core.services import ServiceContainer
from custody_service.infrastructure.database.client import get_db
from custody_service.models import (
    ApiResponse,
    AssociatedParty,
    EvidenceRegistration,
    PhotoUpload,
    StaffMember,
)

router = APIRouter(
    prefix="/api/v1/evidence",
    tags=["evidence"],
    dependencies=[Depends(get_current_staff)],
)
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=ApiResponse,
    status_code=201,
    summary="Register Evidence Item",
    description="""
Register a seized evidence item under an incident, with an optional photograph.

**Workflow**:
1. Client sends multipart/form-data with the item fields and an optional `photograph` file
2. Service checks the incident exists and is still ACTIVE
3. Photograph is validated (image type, size limit) and stored
4. A tracking QR code encoding `EVIDENCE:{evidence_id}` is generated and stored
5. The item is persisted in a single write carrying both references
6. If any step fails, stored files are removed and nothing is persisted

**Request Format**:
- Content-Type: multipart/form-data
- incident_id, item_category, associated_party, item_description, quantity (required)
- measurement_unit (default "piece"), room_number, rack_number, compartment_id, remarks (optional)
- photograph: image file (optional; JPEG, PNG, GIF, WEBP)

**Authorization**: Any authenticated staff member
**File Size Limit**: Configured via MAX_PHOTO_SIZE_MB (default 10MB)
    """,
    responses={
        201: {"description": "Evidence item registered"},
        400: {"description": "Validation failed or photograph rejected"},
        404: {"description": "Incident not found"},
        409: {"description": "Incident is closed"},
        500: {"description": "Storage or database failure"}
    }
)
async def register_evidence(
    incident_id: Optional[str] = Form(None, description="Owning incident"),
    item_category: Optional[str] = Form(None),
    associated_party: Optional[str] = Form(None, description="SUSPECT, VICTIM or UNIDENTIFIED"),
    item_description: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    measurement_unit: Optional[str] = Form(None),
    room_number: Optional[str] = Form(None),
    rack_number: Optional[str] = Form(None),
    compartment_id: Optional[str] = Form(None),
    remarks: Optional[str] = Form(None),
    photograph: Optional[UploadFile] = File(None, description="Photograph of the item"),
    staff: StaffMember = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    fields = {
        "incident_id": incident_id,
        "item_category": item_category,
        "associated_party": associated_party,
        "item_description": item_description,
        "quantity": quantity,
        "measurement_unit": measurement_unit,
        "room_number": room_number,
        "rack_number": rack_number,
        "compartment_id": compartment_id,
        "remarks": remarks,
    }
    # Omitted form fields fall back to the model defaults
    try:
        registration = EvidenceRegistration.model_validate({k: v for k, v in fields.items() if v is not None})
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors(include_url=False)]
        ) from exc

    photo = None
    if photograph is not None and photograph.filename:
        photo = PhotoUpload(
            content=await photograph.read(),
            content_type=photograph.content_type or "application/octet-stream",
            filename=photograph.filename,
        )

    item = await services.evidence.register(registration, db, photo=photo)

    logger.info(f"Staff {staff.badge_number} registered evidence {item.evidence_id}")
    return ApiResponse.ok(data={"evidence_item": item}, message="Evidence registered successfully")


@router.get(
    "/search",
    response_model=ApiResponse,
    summary="Search Evidence",
    description="""
Search evidence items. Filters combine with AND; results are newest first.

**Query Parameters**:
- incident_id: items of one incident
- category: case-insensitive substring of the item category
- party: SUSPECT, VICTIM or UNIDENTIFIED
- q: keyword, case-insensitive substring of category or description
    """
)
async def search_evidence(
    incident_id: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    party: Optional[AssociatedParty] = Query(None),
    q: Optional[str] = Query(None, description="Keyword"),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    items = await services.evidence.search(
        db,
        incident_id=incident_id,
        category=category,
        associated_party=party,
        keyword=q,
    )
    return ApiResponse.listing("evidence_items", items)


@router.get("/incident/{incident_id}", response_model=ApiResponse, summary="Evidence of an Incident")
async def get_incident_evidence(
    incident_id: str,
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    """All items registered under an incident, newest first"""
    items = await services.evidence.get_by_incident(incident_id, db)
    return ApiResponse.listing("evidence_items", items)


@router.get(
    "/tracking/{payload}",
    response_model=ApiResponse,
    summary="Resolve Tracking Code",
    description="""
Resolve the text read from a scanned tracking QR code (`EVIDENCE:{evidence_id}`) to its evidence item.

**Responses**:
- 400 if the text is not an evidence tracking code
- 404 if no item carries that id
    """
)
async def resolve_tracking_code(
    payload: str,
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    item = await services.evidence.resolve_tracking_code(payload, db)
    return ApiResponse.ok(data={"evidence_item": item})


@router.get(
    "/{evidence_id}",
    response_model=ApiResponse,
    summary="Get Evidence Item",
    responses={
        200: {"description": "Evidence item returned"},
        400: {"description": "Malformed evidence id"},
        404: {"description": "Evidence item not found"}
    }
)
async def get_evidence(
    evidence_id: str,
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    item = await services.evidence.get(evidence_id, db)
    return ApiResponse.ok(data={"evidence_item": item})


@router.get(
    "/{evidence_id}/photograph",
    summary="Download Evidence Photograph",
    responses={
        200: {"description": "Photograph content"},
        404: {"description": "Item not found or has no photograph"}
    }
)
async def download_photograph(
    evidence_id: str,
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
):
    content, content_type = await services.evidence.open_photograph(evidence_id, db)
    return StreamingResponse(BytesIO(content), media_type=content_type)


@router.get(
    "/{evidence_id}/qrcode",
    summary="Download Tracking QR Code",
    responses={
        200: {"description": "PNG image of the tracking QR code"},
        404: {"description": "Item not found"}
    }
)
async def download_tracking_code(
    evidence_id: str,
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
):
    content = await services.evidence.open_tracking_code(evidence_id, db)
    return StreamingResponse(
        BytesIO(content),
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename={evidence_id}.png"}
    )

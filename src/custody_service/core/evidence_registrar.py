"""
Evidence Registrar

Core business logic for registering and looking up seized evidence items.
"""

import logging
import mimetypes
from typing import List, Optional, Tuple
from uuid import uuid4

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.config.settings import Settings
from custody_service.core.errors import BadRequestError, NotFoundError, ensure_valid_id
from custody_service.core.incident_registry import IncidentRegistry, contains
from custody_service.core.tracking import TrackingCodes
from custody_service.infrastructure.database.models import EvidenceItemDB, utcnow
from custody_service.infrastructure.storage import StorageProvider
from custody_service.models.evidence import (
    EVIDENCE_ROUTE,
    AssociatedParty,
    EvidenceItem,
    EvidenceRegistration,
    PhotoUpload,
    Quantity,
    StorageDetails,
)

logger = logging.getLogger(__name__)

PHOTO_FOLDER = "evidence_photos"
QR_FOLDER = "evidence_qrcodes"


class EvidenceRegistrar:
    """Business logic for evidence items"""

    def __init__(
        self,
        settings: Settings,
        storage: StorageProvider,
        incidents: IncidentRegistry,
        tracking: TrackingCodes
    ):
        self.settings = settings
        self.storage = storage
        self.incidents = incidents
        self.tracking = tracking

    def _to_item(self, row: EvidenceItemDB) -> EvidenceItem:
        base = f"{EVIDENCE_ROUTE}/{row.evidence_id}"
        return EvidenceItem(
            evidence_id=row.evidence_id,
            incident_id=row.incident_id,
            item_category=row.item_category,
            associated_party=AssociatedParty(row.associated_party),
            item_description=row.item_description,
            item_quantity=Quantity(amount=row.quantity_amount, measurement_unit=row.measurement_unit),
            storage_details=StorageDetails(
                room_number=row.room_number,
                rack_number=row.rack_number,
                compartment_id=row.compartment_id,
            ),
            remarks=row.remarks,
            photograph_url=f"{base}/photograph" if row.photograph_key else None,
            tracking_qr_code=f"{base}/qrcode" if row.tracking_qr_key else None,
            tracking_payload=self.tracking.payload_for(row.evidence_id) if row.tracking_qr_key else None,
            created_at=row.created_at,
        )

    def _validate_photo(self, photo: PhotoUpload) -> None:
        """
        Validate a photograph before upload

        Raises:
            BadRequestError: If the file is empty, too large or not an allowed image type
        """
        if not photo.content:
            raise BadRequestError("Uploaded photograph is empty")

        if len(photo.content) > self.settings.max_photo_size_bytes:
            raise BadRequestError(
                f"Photograph too large: {len(photo.content)} bytes (max: {self.settings.max_photo_size_mb}MB)"
            )

        if photo.content_type not in self.settings.allowed_photo_mime_types:
            raise BadRequestError("Only image files (JPEG, PNG, GIF, WEBP) are allowed")

    async def register(
        self,
        registration: EvidenceRegistration,
        db: AsyncSession,
        photo: Optional[PhotoUpload] = None
    ) -> EvidenceItem:
        """
        Register an evidence item

        The id is generated before anything is written, so the tracking QR can
        be derived and uploaded up front and the row is inserted once, already
        carrying both blob keys. If any step fails, blobs uploaded so far are
        deleted and no row is left behind.

        Args:
            registration: Validated item fields
            db: Database session
            photo: Optional photograph

        Returns:
            The persisted item, with its tracking code

        Raises:
            NotFoundError: If the incident does not exist
            ConflictError: If the incident is closed and closed incidents are locked
            BadRequestError: If the photograph is rejected
        """
        incident = await self.incidents.ensure_open(registration.incident_id, db)

        if photo is not None:
            self._validate_photo(photo)

        evidence_id = str(uuid4())
        uploaded: List[str] = []

        try:
            photograph_key = None
            if photo is not None:
                extension = mimetypes.guess_extension(photo.content_type) or ""
                photograph_key = await self.storage.put_bytes(
                    photo.content, f"{PHOTO_FOLDER}/{evidence_id}{extension}", photo.content_type
                )
                uploaded.append(photograph_key)

            qr_png = self.tracking.render(self.tracking.payload_for(evidence_id))
            tracking_qr_key = await self.storage.put_bytes(qr_png, f"{QR_FOLDER}/{evidence_id}.png", "image/png")
            uploaded.append(tracking_qr_key)

            evidence_db = EvidenceItemDB(
                evidence_id=evidence_id,
                incident_id=incident.incident_id,
                item_category=registration.item_category,
                associated_party=registration.associated_party.value,
                item_description=registration.item_description,
                quantity_amount=registration.quantity,
                measurement_unit=registration.measurement_unit,
                room_number=registration.room_number,
                rack_number=registration.rack_number,
                compartment_id=registration.compartment_id,
                remarks=registration.remarks,
                photograph_key=photograph_key,
                tracking_qr_key=tracking_qr_key,
                created_at=utcnow(),
            )
            db.add(evidence_db)
            await db.commit()

        except Exception:
            await db.rollback()
            for key in uploaded:
                await self.storage.delete(key)
            logger.error(f"Evidence registration {evidence_id} failed; removed {len(uploaded)} uploaded blob(s)")
            raise

        logger.info(f"Registered evidence {evidence_id} under incident {incident.incident_id}")
        return self._to_item(evidence_db)

    async def _load(self, evidence_id: str, db: AsyncSession) -> EvidenceItemDB:
        evidence_db = await db.get(EvidenceItemDB, ensure_valid_id(evidence_id))
        if not evidence_db:
            raise NotFoundError("Evidence item not found")
        return evidence_db

    async def get(self, evidence_id: str, db: AsyncSession) -> EvidenceItem:
        """
        Raises:
            NotFoundError: If the item does not exist
        """
        return self._to_item(await self._load(evidence_id, db))

    async def get_by_incident(self, incident_id: str, db: AsyncSession) -> List[EvidenceItem]:
        """Items registered under an incident, newest first"""
        return await self.search(db, incident_id=incident_id)

    async def resolve_tracking_code(self, payload: str, db: AsyncSession) -> EvidenceItem:
        """
        Look up the item a scanned tracking payload points to

        Raises:
            BadRequestError: If the payload is not a tracking code
            NotFoundError: If no item has that id
        """
        return await self.get(self.tracking.parse(payload), db)

    async def search(
        self,
        db: AsyncSession,
        incident_id: Optional[str] = None,
        category: Optional[str] = None,
        associated_party: Optional[AssociatedParty] = None,
        keyword: Optional[str] = None,
    ) -> List[EvidenceItem]:
        """
        Search evidence items

        Category is a case-insensitive substring; the keyword matches category
        or description. Results are newest first.
        """
        conditions = []

        if incident_id:
            conditions.append(EvidenceItemDB.incident_id == ensure_valid_id(incident_id))
        if category:
            conditions.append(contains(EvidenceItemDB.item_category, category))
        if associated_party:
            conditions.append(EvidenceItemDB.associated_party == associated_party.value)
        if keyword:
            conditions.append(
                or_(
                    contains(EvidenceItemDB.item_category, keyword),
                    contains(EvidenceItemDB.item_description, keyword),
                )
            )

        stmt = select(EvidenceItemDB).where(and_(True, *conditions)).order_by(EvidenceItemDB.created_at.desc())
        result = await db.execute(stmt)
        return [self._to_item(row) for row in result.scalars().all()]

    async def open_photograph(self, evidence_id: str, db: AsyncSession) -> Tuple[bytes, str]:
        """
        Returns:
            Tuple of (photograph bytes, content type)

        Raises:
            NotFoundError: If the item does not exist or has no photograph
        """
        evidence_db = await self._load(evidence_id, db)
        if not evidence_db.photograph_key:
            raise NotFoundError("No photograph recorded for this evidence item")

        content_type, _ = mimetypes.guess_type(evidence_db.photograph_key)
        return await self.storage.read_bytes(evidence_db.photograph_key), content_type or "application/octet-stream"

    async def open_tracking_code(self, evidence_id: str, db: AsyncSession) -> bytes:
        """
        Returns:
            The tracking QR code as PNG bytes

        Raises:
            NotFoundError: If the item does not exist or has no tracking code
        """
        evidence_db = await self._load(evidence_id, db)
        if not evidence_db.tracking_qr_key:
            raise NotFoundError("No tracking code recorded for this evidence item")
        return await self.storage.read_bytes(evidence_db.tracking_qr_key)

"""
Custody Ledger

Append-only record of custody transfers. The ledger has no update or delete
path; the chain of custody for an item is its transfers in transfer_timestamp
order.
"""

import logging
from typing import List
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.core.errors import NotFoundError, ensure_valid_id
from custody_service.core.incident_registry import IncidentRegistry
from custody_service.infrastructure.database.models import CustodyTransferDB, EvidenceItemDB, utcnow
from custody_service.models.common import OfficerSnapshot
from custody_service.models.transfer import CustodyTransfer, TransferCreateRequest

logger = logging.getLogger(__name__)


class CustodyLedger:
    """Business logic for the chain of custody"""

    def __init__(self, incidents: IncidentRegistry):
        self.incidents = incidents

    async def record(
        self,
        request: TransferCreateRequest,
        releasing_officer: OfficerSnapshot,
        db: AsyncSession
    ) -> CustodyTransfer:
        """
        Append a transfer to an item's chain of custody

        Args:
            request: Validated transfer fields
            releasing_officer: Snapshot of the officer recording the transfer
            db: Database session

        Raises:
            NotFoundError: If the evidence item does not exist
            ConflictError: If the item's incident is closed and closed incidents are locked
        """
        evidence_db = await db.get(EvidenceItemDB, ensure_valid_id(request.evidence_id))
        if not evidence_db:
            raise NotFoundError("Evidence item not found")

        await self.incidents.ensure_open(evidence_db.incident_id, db)

        recorded_at = utcnow()
        receiving = request.receiving_officer
        transfer_db = CustodyTransferDB(
            transfer_id=str(uuid4()),
            evidence_id=evidence_db.evidence_id,
            source_location=request.source_location,
            releasing_officer_name=releasing_officer.name,
            releasing_officer_badge=releasing_officer.badge_number,
            destination_location=request.destination_location,
            receiving_officer_name=receiving.name if receiving else None,
            receiving_officer_badge=receiving.badge_number if receiving else None,
            transfer_purpose=request.transfer_purpose.value,
            transfer_timestamp=request.transfer_timestamp or recorded_at,
            notes=request.notes,
            recorded_at=recorded_at,
        )
        db.add(transfer_db)
        await db.commit()

        logger.info(
            f"Recorded transfer {transfer_db.transfer_id} of evidence {evidence_db.evidence_id} "
            f"to {request.destination_location} ({request.transfer_purpose.value})"
        )
        return CustodyTransfer.from_db(transfer_db)

    async def history(self, evidence_id: str, db: AsyncSession) -> List[CustodyTransfer]:
        """
        Chain of custody for an item: oldest transfer first

        Ordering is by transfer_timestamp, not by when a transfer was recorded;
        recording order only breaks ties.
        """
        stmt = (
            select(CustodyTransferDB)
            .where(CustodyTransferDB.evidence_id == ensure_valid_id(evidence_id))
            .order_by(CustodyTransferDB.transfer_timestamp.asc(), CustodyTransferDB.recorded_at.asc())
        )
        result = await db.execute(stmt)
        return [CustodyTransfer.from_db(row) for row in result.scalars().all()]

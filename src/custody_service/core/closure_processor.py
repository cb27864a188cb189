"""
Closure Processor

Records the final disposition of an incident and closes it.
"""

import logging
from typing import Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.core.incident_registry import IncidentRegistry
from custody_service.infrastructure.database.models import CaseClosureDB, utcnow
from custody_service.models.closure import CaseClosure, ClosureCreateRequest

logger = logging.getLogger(__name__)


class ClosureProcessor:
    """Business logic for case closure"""

    def __init__(self, incidents: IncidentRegistry):
        self.incidents = incidents

    async def close(self, request: ClosureCreateRequest, db: AsyncSession) -> CaseClosure:
        """
        Close an incident

        The closure row and the incident's ACTIVE -> CLOSED transition are
        committed together; if either write fails neither is kept.

        Raises:
            NotFoundError: If the incident does not exist
            ConflictError: If the incident is already closed and reclosure is not allowed
        """
        try:
            incident = await self.incidents.close(request.incident_id, db)

            closure_db = CaseClosureDB(
                closure_id=str(uuid4()),
                incident_id=incident.incident_id,
                disposition_method=request.disposition_method.value,
                court_order_number=request.court_order_number,
                closure_date=request.closure_date,
                closure_remarks=request.closure_remarks,
                created_at=utcnow(),
            )
            db.add(closure_db)
            await db.commit()

        except Exception:
            await db.rollback()
            raise

        logger.info(
            f"Closed incident {incident.incident_id} "
            f"(disposition {request.disposition_method.value}, closure {closure_db.closure_id})"
        )
        return CaseClosure.model_validate(closure_db)

    async def get_by_incident(self, incident_id: str, db: AsyncSession) -> Optional[CaseClosure]:
        """
        Current closure of an incident

        Returns:
            The most recent closure, or None if the incident is not closed

        Raises:
            NotFoundError: If the incident itself does not exist
        """
        incident = await self.incidents.get(incident_id, db)

        stmt = (
            select(CaseClosureDB)
            .where(CaseClosureDB.incident_id == incident.incident_id)
            .order_by(CaseClosureDB.created_at.desc())
            .limit(1)
        )
        closure_db = (await db.execute(stmt)).scalar_one_or_none()
        return CaseClosure.model_validate(closure_db) if closure_db else None

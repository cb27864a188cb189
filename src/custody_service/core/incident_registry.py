"""
Incident Registry

Incident records and their lifecycle: every incident starts ACTIVE and moves
to CLOSED exactly once, through a case closure.
"""

import logging
from datetime import timedelta
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.config.settings import Settings
from custody_service.core.errors import ConflictError, NotFoundError, ensure_valid_id
from custody_service.infrastructure.database.models import IncidentDB, utcnow
from custody_service.models.common import OfficerSnapshot
from custody_service.models.incident import (
    ALLOWED_TRANSITIONS,
    Incident,
    IncidentCreateRequest,
    IncidentMetrics,
    IncidentStatus,
)

logger = logging.getLogger(__name__)


def contains(column, term: str):
    """Case-insensitive substring match with LIKE wildcards escaped"""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


class IncidentRegistry:
    """Business logic for incident management"""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def create(
        self,
        request: IncidentCreateRequest,
        investigator: OfficerSnapshot,
        db: AsyncSession
    ) -> Incident:
        """
        Register a new incident

        Args:
            request: Validated incident fields
            investigator: Snapshot of the officer registering the case
            db: Database session

        Returns:
            The persisted incident, always ACTIVE

        Raises:
            ConflictError: If enforce_unique_fir is on and the station already
                has an incident with this FIR number
        """
        if self.settings.enforce_unique_fir:
            stmt = select(func.count()).select_from(IncidentDB).where(
                and_(
                    func.lower(IncidentDB.registration_station) == request.registration_station.lower(),
                    IncidentDB.fir_number == request.fir_number,
                )
            )
            if (await db.execute(stmt)).scalar_one() > 0:
                logger.warning(
                    f"Duplicate FIR {request.fir_number} rejected for station {request.registration_station}"
                )
                raise ConflictError("An incident with this FIR number already exists at this station")

        now = utcnow()
        incident_db = IncidentDB(
            incident_id=str(uuid4()),
            registration_station=request.registration_station,
            fir_number=request.fir_number,
            registration_year=request.registration_year,
            investigator_name=investigator.name,
            investigator_badge=investigator.badge_number,
            fir_filing_date=request.fir_filing_date,
            evidence_seizure_date=request.evidence_seizure_date,
            applicable_sections=request.applicable_sections,
            current_status=IncidentStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        db.add(incident_db)
        await db.commit()

        logger.info(f"Registered incident {incident_db.incident_id} (FIR {request.fir_number})")
        return Incident.from_db(incident_db)

    async def _load(self, incident_id: str, db: AsyncSession) -> IncidentDB:
        incident_db = await db.get(IncidentDB, ensure_valid_id(incident_id))
        if not incident_db:
            raise NotFoundError("Incident not found")
        return incident_db

    async def get(self, incident_id: str, db: AsyncSession) -> Incident:
        """
        Raises:
            NotFoundError: If the incident does not exist
        """
        return Incident.from_db(await self._load(incident_id, db))

    async def list_all(self, db: AsyncSession, status: Optional[IncidentStatus] = None) -> List[Incident]:
        """All incidents, newest first"""
        return await self.search(db, status=status)

    async def search(
        self,
        db: AsyncSession,
        station: Optional[str] = None,
        fir_number: Optional[str] = None,
        year: Optional[int] = None,
        status: Optional[IncidentStatus] = None,
        keyword: Optional[str] = None,
    ) -> List[Incident]:
        """
        Search incidents

        Filters AND together. The keyword is a case-insensitive substring
        matched against station, FIR number or sections (any of them). Results
        are unpaginated and newest first.
        """
        conditions = []

        if status:
            conditions.append(IncidentDB.current_status == status.value)
        if station:
            conditions.append(contains(IncidentDB.registration_station, station))
        if fir_number:
            conditions.append(IncidentDB.fir_number == fir_number)
        if year is not None:
            conditions.append(IncidentDB.registration_year == year)
        if keyword:
            conditions.append(
                or_(
                    contains(IncidentDB.registration_station, keyword),
                    contains(IncidentDB.fir_number, keyword),
                    contains(IncidentDB.applicable_sections, keyword),
                )
            )

        stmt = select(IncidentDB).where(and_(True, *conditions)).order_by(IncidentDB.created_at.desc())
        result = await db.execute(stmt)
        return [Incident.from_db(row) for row in result.scalars().all()]

    async def list_long_pending(self, db: AsyncSession, threshold_days: int = 90) -> List[Incident]:
        """ACTIVE incidents registered at least threshold_days ago, oldest first"""
        cutoff = utcnow() - timedelta(days=threshold_days)
        stmt = (
            select(IncidentDB)
            .where(
                and_(
                    IncidentDB.current_status == IncidentStatus.ACTIVE.value,
                    IncidentDB.created_at <= cutoff,
                )
            )
            .order_by(IncidentDB.created_at.asc())
        )
        result = await db.execute(stmt)
        return [Incident.from_db(row) for row in result.scalars().all()]

    async def metrics(self, db: AsyncSession) -> IncidentMetrics:
        """
        Dashboard counters

        Note:
            Three independent count queries with no shared snapshot; a write
            landing between them can make total differ from active + closed.
        """
        async def count(*conditions) -> int:
            stmt = select(func.count()).select_from(IncidentDB).where(and_(True, *conditions))
            return (await db.execute(stmt)).scalar_one()

        total = await count()
        active = await count(IncidentDB.current_status == IncidentStatus.ACTIVE.value)
        closed = await count(IncidentDB.current_status == IncidentStatus.CLOSED.value)

        return IncidentMetrics(total_incidents=total, active_incidents=active, closed_incidents=closed)

    async def ensure_open(self, incident_id: str, db: AsyncSession) -> Incident:
        """
        Fetch an incident that may still receive evidence and transfers

        Raises:
            NotFoundError: If the incident does not exist
            ConflictError: If lock_closed_incidents is on and the incident is CLOSED
        """
        incident = await self.get(incident_id, db)
        if self.settings.lock_closed_incidents and incident.current_status == IncidentStatus.CLOSED:
            logger.warning(f"Rejected change under closed incident {incident.incident_id}")
            raise ConflictError("Incident is closed; its evidence can no longer be changed")
        return incident

    async def close(self, incident_id: str, db: AsyncSession) -> Incident:
        """
        Move an incident to CLOSED

        The change is flushed but not committed: the caller owns the
        transaction, so the closure record and this transition land together.

        Raises:
            NotFoundError: If the incident does not exist
            ConflictError: If the incident is already CLOSED and reclosure is not allowed
        """
        incident_db = await self._load(incident_id, db)
        current = IncidentStatus(incident_db.current_status)

        if IncidentStatus.CLOSED not in ALLOWED_TRANSITIONS[current]:
            if not self.settings.allow_reclosure:
                raise ConflictError("Incident is already closed")
            logger.warning(f"Recording another closure for already closed incident {incident_id}")

        now = utcnow()
        if self.settings.allow_reclosure:
            incident_db.current_status = IncidentStatus.CLOSED.value
            incident_db.closed_at = now
            incident_db.updated_at = now
            await db.flush()
            return Incident.from_db(incident_db)

        # Compare-and-set: a concurrent closure that committed first leaves no ACTIVE row to match
        stmt = (
            update(IncidentDB)
            .where(
                IncidentDB.incident_id == incident_db.incident_id,
                IncidentDB.current_status == IncidentStatus.ACTIVE.value,
            )
            .values(current_status=IncidentStatus.CLOSED.value, closed_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        if result.rowcount == 0:
            logger.warning(f"Incident {incident_id} was closed concurrently")
            raise ConflictError("Incident is already closed")

        await db.refresh(incident_db)
        return Incident.from_db(incident_db)

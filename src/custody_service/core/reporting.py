"""
Reporting

Read-only aggregates for dashboards.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.core.incident_registry import IncidentRegistry
from custody_service.infrastructure.database.models import EvidenceItemDB, IncidentDB
from custody_service.models.incident import IncidentStatus
from custody_service.models.report import CategoryCount, OfficerWorkload, OverviewReport, TimelinePoint

logger = logging.getLogger(__name__)

TIMELINE_MONTHS = 12
TOP_N = 10


def monthly_timeline(timestamps: Iterable[datetime], months: int = TIMELINE_MONTHS) -> List[TimelinePoint]:
    """Bucket timestamps by calendar month; keep the latest `months` buckets, ascending"""
    counts = Counter(ts.strftime("%Y-%m") for ts in timestamps if ts is not None)
    recent = sorted(counts)[-months:]
    return [TimelinePoint(month=month, count=counts[month]) for month in recent]


class ReportService:
    """Dashboard aggregations over incidents and evidence"""

    def __init__(self, incidents: IncidentRegistry):
        self.incidents = incidents

    async def overview(self, db: AsyncSession) -> OverviewReport:
        # Month bucketing happens here rather than in SQL to stay dialect-neutral
        registered = await db.execute(select(IncidentDB.created_at))
        closed = await db.execute(
            select(IncidentDB.closed_at).where(IncidentDB.current_status == IncidentStatus.CLOSED.value)
        )

        count = func.count().label("count")
        distribution = await db.execute(
            select(EvidenceItemDB.item_category, count)
            .group_by(EvidenceItemDB.item_category)
            .order_by(count.desc(), EvidenceItemDB.item_category)
            .limit(TOP_N)
        )

        case_count = func.count().label("case_count")
        workload = await db.execute(
            select(IncidentDB.investigator_badge, func.max(IncidentDB.investigator_name), case_count)
            .group_by(IncidentDB.investigator_badge)
            .order_by(case_count.desc(), IncidentDB.investigator_badge)
            .limit(TOP_N)
        )

        report = OverviewReport(
            incidents_timeline=monthly_timeline(registered.scalars().all()),
            closures_timeline=monthly_timeline(closed.scalars().all()),
            evidence_distribution=[
                CategoryCount(item_category=category, count=n) for category, n in distribution.all()
            ],
            officer_workload=[
                OfficerWorkload(badge_number=badge, officer_name=name, case_count=n)
                for badge, name, n in workload.all()
            ],
            metrics=await self.incidents.metrics(db),
        )

        logger.debug(f"Overview report built: {report.metrics.total_incidents} incidents")
        return report

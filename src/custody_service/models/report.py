"""
Reporting Models
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .incident import IncidentMetrics


class TimelinePoint(BaseModel):
    month: str = Field(..., description="Calendar month as YYYY-MM")
    count: int


class CategoryCount(BaseModel):
    item_category: str
    count: int


class OfficerWorkload(BaseModel):
    badge_number: Optional[str]
    officer_name: Optional[str]
    case_count: int


class OverviewReport(BaseModel):
    """Aggregates for the admin dashboard"""

    incidents_timeline: List[TimelinePoint] = Field(default_factory=list)
    closures_timeline: List[TimelinePoint] = Field(default_factory=list)
    evidence_distribution: List[CategoryCount] = Field(default_factory=list)
    officer_workload: List[OfficerWorkload] = Field(default_factory=list)
    metrics: IncidentMetrics

"""
Insight Schemas
Pydantic models for insights and adherence
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from models import InsightSeverity


class InsightResponse(BaseModel):
    """Schema for a stored insight"""
    id: str
    resident_id: str
    position: int
    severity: InsightSeverity
    message: str
    evidence_ids: Optional[List[str]] = None
    suggested_action: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InsightList(BaseModel):
    """Schema for a resident's insights, in display order"""
    resident_id: str
    insights: List[InsightResponse]
    total: int


class AdherenceSummary(BaseModel):
    """Adherence rate with dose counts over a window"""
    resident_id: str
    adherence_rate: float
    expected_doses: int
    taken: int
    skipped: int
    delayed: int
    window_days: int

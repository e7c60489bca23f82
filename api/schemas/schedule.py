"""
Schedule Schemas
Pydantic models for the daily schedule and conflict checks
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from models import FoodRequirement, InsightSeverity
from api.schemas.medication import MedicationResponse, TimeOfDay


class ConflictResponse(BaseModel):
    """A conflict among medications sharing a time slot"""
    type: str
    severity: InsightSeverity
    message: str
    medications: List[str]


class ScheduleSlot(BaseModel):
    """Medications due at one time of day"""
    time: str
    medications: List[MedicationResponse]
    conflicts: List[ConflictResponse] = []


class ScheduleResponse(BaseModel):
    """A resident's daily schedule"""
    resident_id: str
    slots: List[ScheduleSlot]


class CandidateMedication(BaseModel):
    """A medication being filled in but not yet saved"""
    name: str = Field(..., min_length=1, max_length=255)
    times: List[TimeOfDay] = Field(default_factory=list)
    food: FoodRequirement = FoodRequirement.NONE


class ConflictCheckRequest(BaseModel):
    """Request for an ad-hoc slot conflict check"""
    time_slot: TimeOfDay
    medications: List[CandidateMedication] = Field(default_factory=list)


class ConflictCheckResponse(BaseModel):
    """Conflicts found for a slot"""
    resident_id: str
    time_slot: str
    conflicts: List[ConflictResponse]
    has_critical: bool


class AutoOffsetRequest(BaseModel):
    """Request to resolve a slot's food conflict"""
    time_slot: TimeOfDay
    offset_minutes: int = Field(default=30, ge=-1440, le=1440)


class AutoOffsetResponse(BaseModel):
    """Result of an auto-offset"""
    moved: bool
    medication: Optional[MedicationResponse] = None
    message: str

"""
Medication Schemas
Pydantic models for medication-related API requests and responses
"""

from typing import Optional, List, Annotated
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from models import FoodRequirement
from tools.scheduler import TIME_PATTERN


TimeOfDay = Annotated[str, Field(pattern=TIME_PATTERN, description="24-hour HH:MM")]


# ==================== BASE SCHEMAS ====================

class MedicationBase(BaseModel):
    """Base medication schema"""
    name: str = Field(..., min_length=1, max_length=255)
    strength: str = Field(default="", max_length=100)
    dose: str = Field(default="", max_length=100)
    frequency: int = Field(default=1, ge=1, le=24)


# ==================== REQUEST SCHEMAS ====================

class MedicationCreate(MedicationBase):
    """Schema for creating a new medication

    `times` defaults to the standard times for `frequency` when omitted.
    """
    resident_id: str
    times: Optional[List[TimeOfDay]] = None
    food: FoodRequirement = FoodRequirement.NONE
    prescriber: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class MedicationUpdate(BaseModel):
    """Schema for updating medication"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    strength: Optional[str] = Field(None, max_length=100)
    dose: Optional[str] = Field(None, max_length=100)
    frequency: Optional[int] = Field(None, ge=1, le=24)
    times: Optional[List[TimeOfDay]] = None
    food: Optional[FoodRequirement] = None
    prescriber: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


# ==================== RESPONSE SCHEMAS ====================

class MedicationResponse(MedicationBase):
    """Schema for medication response"""
    id: str
    resident_id: str
    frequency: int = 1
    times: List[str] = []
    food: FoodRequirement
    prescriber: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MedicationList(BaseModel):
    """Schema for list of medications"""
    medications: List[MedicationResponse]
    total: int


class DefaultTimesResponse(BaseModel):
    """Standard dosing times for a daily frequency"""
    frequency: int
    times: List[str]

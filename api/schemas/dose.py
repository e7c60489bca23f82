"""
Dose Schemas
Pydantic models for dose logging and history
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from models import DoseStatus
from api.schemas.medication import TimeOfDay


# ==================== REQUEST SCHEMAS ====================

class DoseRecordRequest(BaseModel):
    """Schema for logging a dose at one of today's slots"""
    resident_id: str
    medication_id: str
    status: DoseStatus
    time_slot: TimeOfDay
    override: bool = Field(
        default=False,
        description="Confirm a taken dose despite a critical interaction"
    )
    note: Optional[str] = Field(None, max_length=1000)


# ==================== RESPONSE SCHEMAS ====================

class DoseEventResponse(BaseModel):
    """Schema for a stored dose event"""
    id: str
    resident_id: str
    medication_id: str
    scheduled_time: datetime
    recorded_time: datetime
    status: DoseStatus
    note: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DoseHistoryItem(BaseModel):
    """A dose event joined with its medication"""
    id: str
    medication_id: str
    medication_name: str
    strength: Optional[str] = None
    status: DoseStatus
    scheduled_time: Optional[str] = None
    recorded_time: Optional[str] = None
    note: Optional[str] = None


class DoseHistory(BaseModel):
    """Schema for a resident's dose history"""
    resident_id: str
    events: List[DoseHistoryItem]
    total: int

"""
Resident Schemas
Pydantic models for resident-related API requests and responses
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


# ==================== BASE SCHEMAS ====================

class ResidentBase(BaseModel):
    """Base resident schema with common fields"""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=0, le=150)
    physician: Optional[str] = Field(None, max_length=255)


# ==================== REQUEST SCHEMAS ====================

class ResidentCreate(ResidentBase):
    """Schema for creating a new resident"""
    allergies: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)


class ResidentUpdate(BaseModel):
    """Schema for updating resident information"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=150)
    allergies: Optional[List[str]] = None
    conditions: Optional[List[str]] = None
    physician: Optional[str] = Field(None, max_length=255)


# ==================== RESPONSE SCHEMAS ====================

class ResidentResponse(ResidentBase):
    """Schema for resident response"""
    id: str
    allergies: List[str] = []
    conditions: List[str] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ResidentList(BaseModel):
    """Schema for list of residents"""
    residents: List[ResidentResponse]
    total: int

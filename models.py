"""
Database Models
SQLAlchemy ORM models for Medlas
"""

import uuid
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Enum, Index, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum

from database import Base


def new_id(prefix: str) -> str:
    """Generate an opaque record identifier"""
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


# ==================== ENUMS ====================

class FoodRequirement(str, PyEnum):
    """How a medication relates to meals"""
    WITH = "with"
    WITHOUT = "without"
    NONE = "none"


class DoseStatus(str, PyEnum):
    """Outcome logged for a scheduled dose"""
    TAKEN = "taken"
    SKIPPED = "skipped"
    DELAYED = "delayed"


class InsightSeverity(str, PyEnum):
    """Severity of an advisory insight or schedule conflict"""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


# ==================== MODELS ====================

class Resident(Base):
    """Senior-care resident profile"""
    __tablename__ = "residents"

    id = Column(String(64), primary_key=True, default=lambda: new_id("res"))

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    age = Column(Integer, nullable=False)

    allergies = Column(JSON, default=list)
    conditions = Column(JSON, default=list)
    physician = Column(String(255))

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    medications = relationship("Medication", back_populates="resident", cascade="all, delete-orphan")
    dose_events = relationship("DoseEvent", back_populates="resident", cascade="all, delete-orphan")
    insights = relationship("Insight", back_populates="resident", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Medication(Base):
    """Prescribed medication with its daily dosing times"""
    __tablename__ = "medications"

    id = Column(String(64), primary_key=True, default=lambda: new_id("med"))
    resident_id = Column(String(64), ForeignKey("residents.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(255), nullable=False)
    strength = Column(String(100), nullable=False, default="")
    dose = Column(String(100), nullable=False, default="")

    # Doses per day; edited independently of `times`
    frequency = Column(Integer, nullable=False, default=1)
    # Ordered list of "HH:MM" strings
    times = Column(JSON, default=list)
    food = Column(Enum(FoodRequirement), nullable=False, default=FoodRequirement.NONE)

    prescriber = Column(String(255))
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    resident = relationship("Resident", back_populates="medications")
    dose_events = relationship("DoseEvent", back_populates="medication", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_medications_resident", "resident_id"),
    )


class DoseEvent(Base):
    """Append-only log entry for a single dose"""
    __tablename__ = "dose_events"

    id = Column(String(64), primary_key=True, default=lambda: new_id("dose"))
    resident_id = Column(String(64), ForeignKey("residents.id", ondelete="CASCADE"), nullable=False)
    medication_id = Column(String(64), ForeignKey("medications.id", ondelete="CASCADE"), nullable=False)

    # Intended dose time for a specific day, and when it was logged
    scheduled_time = Column(DateTime, nullable=False)
    recorded_time = Column(DateTime, nullable=False, default=datetime.utcnow)

    status = Column(Enum(DoseStatus), nullable=False)
    note = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    resident = relationship("Resident", back_populates="dose_events")
    medication = relationship("Medication", back_populates="dose_events")

    __table_args__ = (
        Index("ix_dose_events_resident_recorded", "resident_id", "recorded_time"),
        Index("ix_dose_events_medication", "medication_id"),
    )


class Insight(Base):
    """Derived advisory message; recomputed and replaced per resident"""
    __tablename__ = "insights"

    id = Column(String(64), primary_key=True, default=lambda: new_id("ins"))
    resident_id = Column(String(64), ForeignKey("residents.id", ondelete="CASCADE"), nullable=False)

    # Position within the resident's current insight list
    position = Column(Integer, nullable=False, default=0)

    severity = Column(Enum(InsightSeverity), nullable=False)
    message = Column(Text, nullable=False)
    evidence_ids = Column(JSON)
    suggested_action = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    resident = relationship("Resident", back_populates="insights")

    __table_args__ = (
        Index("ix_insights_resident_position", "resident_id", "position"),
    )

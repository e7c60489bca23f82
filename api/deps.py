"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from typing import Generator
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import SessionLocal
import models


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency
    Yields a SQLAlchemy session and ensures cleanup
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_current_resident(
    resident_id: str,
    db: Session = Depends(get_db)
) -> models.Resident:
    """
    Resolve the resident in the path or raise 404
    """
    resident = await services.get_resident_service().get_resident(resident_id, db=db)
    if not resident:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resident {resident_id} not found"
        )
    return resident


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_resident_service():
        from services.resident_service import resident_service
        return resident_service

    @staticmethod
    def get_medication_service():
        from services.medication_service import medication_service
        return medication_service

    @staticmethod
    def get_dose_service():
        from services.dose_service import dose_service
        return dose_service

    @staticmethod
    def get_insight_service():
        from services.insight_service import insight_service
        return insight_service

    @staticmethod
    def get_adherence_service():
        from services.adherence_service import adherence_service
        return adherence_service

    @staticmethod
    def get_schedule_service():
        from services.schedule_service import schedule_service
        return schedule_service

    @staticmethod
    def get_assistant_service():
        from services.assistant_service import assistant_service
        return assistant_service

    @staticmethod
    def get_insights_engine():
        from actions.insights_engine import insights_engine
        return insights_engine


# Service dependency instances
services = ServiceDependency()

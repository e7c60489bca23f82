"""
Doses API Router
Endpoints for dose logging and dose history
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_resident, services
from api.schemas.dose import (
    DoseRecordRequest,
    DoseEventResponse,
    DoseHistoryItem,
    DoseHistory,
)
import models
from models import DoseStatus
from services.schedule_service import CriticalInteractionError


router = APIRouter(prefix="/doses", tags=["doses"])


@router.post("/", response_model=DoseEventResponse, status_code=status.HTTP_201_CREATED)
async def record_dose(
    dose_data: DoseRecordRequest,
    db: Session = Depends(get_db)
):
    """
    Log a dose for today's occurrence of a slot

    Recording a taken dose that hits a critical interaction in its slot
    returns 409 unless **override** is set. Insights are refreshed after
    every recorded dose.
    """
    resident_service = services.get_resident_service()
    schedule_service = services.get_schedule_service()

    if not await resident_service.get_resident(dose_data.resident_id, db=db):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resident {dose_data.resident_id} not found"
        )

    try:
        return await schedule_service.record_dose(
            resident_id=dose_data.resident_id,
            medication_id=dose_data.medication_id,
            status=dose_data.status,
            time_slot=dose_data.time_slot,
            override=dose_data.override,
            note=dose_data.note,
            db=db
        )
    except CriticalInteractionError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/{resident_id}/history", response_model=DoseHistory)
async def get_dose_history(
    status_filter: Optional[DoseStatus] = Query(None, alias="status"),
    resident: models.Resident = Depends(get_current_resident),
    db: Session = Depends(get_db)
):
    """
    Get a resident's dose history, newest first
    """
    dose_service = services.get_dose_service()

    events = await dose_service.get_dose_history(resident.id, status=status_filter, db=db)
    return DoseHistory(
        resident_id=resident.id,
        events=[DoseHistoryItem(**e) for e in events],
        total=len(events)
    )

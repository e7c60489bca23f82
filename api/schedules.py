"""
Schedules API Router
Endpoints for the daily medication schedule and slot conflicts
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_resident, services
from api.schemas.medication import MedicationResponse
from api.schemas.schedule import (
    ConflictResponse,
    ScheduleSlot,
    ScheduleResponse,
    ConflictCheckRequest,
    ConflictCheckResponse,
    AutoOffsetRequest,
    AutoOffsetResponse,
)
import models
from models import InsightSeverity


router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.get("/{resident_id}", response_model=ScheduleResponse)
async def get_schedule(
    resident: models.Resident = Depends(get_current_resident),
    db: Session = Depends(get_db)
):
    """
    Get a resident's medications grouped by time of day, with conflicts
    """
    schedule_service = services.get_schedule_service()

    slots = await schedule_service.build_daily_schedule(resident.id, db=db)
    return ScheduleResponse(
        resident_id=resident.id,
        slots=[
            ScheduleSlot(
                time=slot["time"],
                medications=[MedicationResponse.model_validate(m) for m in slot["medications"]],
                conflicts=[ConflictResponse(**c.to_dict()) for c in slot["conflicts"]]
            )
            for slot in slots
        ]
    )


@router.post("/{resident_id}/conflicts", response_model=ConflictCheckResponse)
async def check_conflicts(
    request: ConflictCheckRequest,
    resident: models.Resident = Depends(get_current_resident),
    db: Session = Depends(get_db)
):
    """
    Check a slot for conflicts, optionally including unsaved medications

    - **time_slot**: HH:MM
    - **medications**: Candidate medications (name, times, food)
    """
    schedule_service = services.get_schedule_service()

    conflicts = await schedule_service.preview_conflicts(
        resident.id,
        request.time_slot,
        candidates=[m.model_dump() for m in request.medications],
        db=db
    )
    return ConflictCheckResponse(
        resident_id=resident.id,
        time_slot=request.time_slot,
        conflicts=[ConflictResponse(**c.to_dict()) for c in conflicts],
        has_critical=any(c.severity == InsightSeverity.CRITICAL for c in conflicts)
    )


@router.post(
    "/{resident_id}/auto-offset",
    response_model=AutoOffsetResponse,
    status_code=status.HTTP_200_OK
)
async def auto_offset(
    request: AutoOffsetRequest,
    resident: models.Resident = Depends(get_current_resident),
    db: Session = Depends(get_db)
):
    """
    Resolve a food conflict by moving one medication later in the day
    """
    schedule_service = services.get_schedule_service()

    medication = await schedule_service.auto_offset(
        resident.id,
        request.time_slot,
        offset_minutes=request.offset_minutes,
        db=db
    )
    if not medication:
        return AutoOffsetResponse(
            moved=False,
            message=f"No food conflict to resolve at {request.time_slot}"
        )

    return AutoOffsetResponse(
        moved=True,
        medication=MedicationResponse.model_validate(medication),
        message=f"Moved {medication.name} to {', '.join(medication.times or [])}"
    )

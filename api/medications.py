"""
Medications API Router
Endpoints for medication management
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.medication import (
    MedicationCreate,
    MedicationUpdate,
    MedicationResponse,
    MedicationList,
    DefaultTimesResponse,
)
from tools.scheduler import default_times_for_frequency


router = APIRouter(prefix="/medications", tags=["medications"])


@router.post("/", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    medication_data: MedicationCreate,
    db: Session = Depends(get_db)
):
    """
    Add a new medication for a resident

    - **resident_id**: Resident ID
    - **name**: Medication name
    - **frequency**: Doses per day
    - **times**: Dose times as HH:MM (defaults from frequency)
    - **food**: with / without / none
    """
    medication_service = services.get_medication_service()

    try:
        return await medication_service.create_medication(
            resident_id=medication_data.resident_id,
            name=medication_data.name,
            strength=medication_data.strength,
            dose=medication_data.dose,
            frequency=medication_data.frequency,
            times=medication_data.times,
            food=medication_data.food,
            prescriber=medication_data.prescriber,
            notes=medication_data.notes,
            db=db
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/", response_model=MedicationList)
async def list_medications(
    resident_id: Optional[str] = Query(None, description="Only this resident's medications"),
    db: Session = Depends(get_db)
):
    """
    List medications, optionally for one resident
    """
    medication_service = services.get_medication_service()

    medications = await medication_service.list_medications(resident_id, db=db)
    return MedicationList(
        medications=[MedicationResponse.model_validate(m) for m in medications],
        total=len(medications)
    )


@router.get("/default-times/{frequency}", response_model=DefaultTimesResponse)
async def get_default_times(frequency: int):
    """
    Standard dose times for a number of doses per day
    """
    return DefaultTimesResponse(
        frequency=frequency,
        times=default_times_for_frequency(frequency)
    )


@router.get("/{medication_id}", response_model=MedicationResponse)
async def get_medication(
    medication_id: str,
    db: Session = Depends(get_db)
):
    """
    Get medication by ID
    """
    medication_service = services.get_medication_service()

    medication = await medication_service.get_medication(medication_id, db=db)
    if not medication:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medication {medication_id} not found"
        )
    return medication


@router.put("/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    medication_id: str,
    update_data: MedicationUpdate,
    db: Session = Depends(get_db)
):
    """
    Update medication details or dose times
    """
    medication_service = services.get_medication_service()

    medication = await medication_service.update_medication(
        medication_id,
        update_data.model_dump(exclude_unset=True),
        db=db
    )
    if not medication:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medication {medication_id} not found"
        )
    return medication


@router.delete("/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medication(
    medication_id: str,
    db: Session = Depends(get_db)
):
    """
    Delete a medication and its dose events
    """
    medication_service = services.get_medication_service()

    if not await medication_service.delete_medication(medication_id, db=db):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medication {medication_id} not found"
        )

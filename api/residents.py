"""
Residents API Router
Endpoints for resident profiles
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.resident import (
    ResidentCreate,
    ResidentUpdate,
    ResidentResponse,
    ResidentList,
)


router = APIRouter(prefix="/residents", tags=["residents"])


@router.post("/", response_model=ResidentResponse, status_code=status.HTTP_201_CREATED)
async def create_resident(
    resident_data: ResidentCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new resident

    - **first_name** / **last_name**: Resident's name
    - **age**: Age in years
    - **allergies**, **conditions**: Free-text lists
    """
    resident_service = services.get_resident_service()

    return await resident_service.create_resident(
        first_name=resident_data.first_name,
        last_name=resident_data.last_name,
        age=resident_data.age,
        allergies=resident_data.allergies,
        conditions=resident_data.conditions,
        physician=resident_data.physician,
        db=db
    )


@router.get("/", response_model=ResidentList)
async def list_residents(db: Session = Depends(get_db)):
    """
    List all residents
    """
    resident_service = services.get_resident_service()

    residents = await resident_service.list_residents(db=db)
    return ResidentList(
        residents=[ResidentResponse.model_validate(r) for r in residents],
        total=len(residents)
    )


@router.get("/{resident_id}", response_model=ResidentResponse)
async def get_resident(
    resident_id: str,
    db: Session = Depends(get_db)
):
    """
    Get resident by ID
    """
    resident_service = services.get_resident_service()

    resident = await resident_service.get_resident(resident_id, db=db)
    if not resident:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resident {resident_id} not found"
        )
    return resident


@router.put("/{resident_id}", response_model=ResidentResponse)
async def update_resident(
    resident_id: str,
    update_data: ResidentUpdate,
    db: Session = Depends(get_db)
):
    """
    Update resident information
    """
    resident_service = services.get_resident_service()

    resident = await resident_service.update_resident(
        resident_id,
        update_data.model_dump(exclude_unset=True),
        db=db
    )
    if not resident:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resident {resident_id} not found"
        )
    return resident


@router.delete("/{resident_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resident(
    resident_id: str,
    db: Session = Depends(get_db)
):
    """
    Delete a resident together with their medications, dose events and insights
    """
    resident_service = services.get_resident_service()

    if not await resident_service.delete_resident(resident_id, db=db):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resident {resident_id} not found"
        )

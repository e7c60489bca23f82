"""
Medication Service
Business logic for medication management
"""

import logging
from typing import Dict, List, Optional, Any, Union
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from database import get_db_context, commit_or_raise
import models
from models import FoodRequirement
from tools.scheduler import default_times_for_frequency


logger = logging.getLogger(__name__)


class MedicationService:
    """
    Service for medication-related operations
    """

    UPDATABLE_FIELDS = {
        "name", "strength", "dose", "frequency", "times", "food", "prescriber", "notes"
    }

    async def list_medications(
        self,
        resident_id: Optional[str] = None,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """
        List medications, optionally for one resident

        Read failures are logged and yield an empty list.
        """
        def _list(session: Session) -> List[models.Medication]:
            try:
                query = session.query(models.Medication)
                if resident_id is not None:
                    query = query.filter(models.Medication.resident_id == resident_id)
                return query.order_by(models.Medication.created_at).all()
            except SQLAlchemyError as e:
                logger.error(f"Failed to read medications: {e}")
                return []

        if db:
            return _list(db)

        with get_db_context() as session:
            return _list(session)

    async def get_medication(
        self,
        medication_id: str,
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """Get medication by ID"""
        def _get(session: Session) -> Optional[models.Medication]:
            try:
                return session.query(models.Medication).filter(
                    models.Medication.id == medication_id
                ).first()
            except SQLAlchemyError as e:
                logger.error(f"Failed to read medication {medication_id}: {e}")
                return None

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def create_medication(
        self,
        resident_id: str,
        name: str,
        strength: str = "",
        dose: str = "",
        frequency: int = 1,
        times: Optional[List[str]] = None,
        food: Union[FoodRequirement, str] = FoodRequirement.NONE,
        prescriber: Optional[str] = None,
        notes: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """
        Add a medication for a resident

        Args:
            resident_id: Owning resident
            name: Medication name
            strength: Strength (e.g., "81mg")
            dose: Dose description (e.g., "1 tablet")
            frequency: Doses per day
            times: "HH:MM" dose times; defaults from frequency when omitted
            food: Food requirement
            prescriber: Prescribing clinician
            notes: Free-text notes
            db: Database session

        Returns:
            Created Medication object

        Raises:
            ValueError: if the resident does not exist
            StorageError: if the record could not be saved
        """
        def _create(session: Session) -> models.Medication:
            resident = session.query(models.Resident).filter(
                models.Resident.id == resident_id
            ).first()

            if not resident:
                raise ValueError(f"Resident {resident_id} not found")

            medication = models.Medication(
                resident_id=resident_id,
                name=name,
                strength=strength,
                dose=dose,
                frequency=frequency,
                times=list(times) if times is not None else default_times_for_frequency(frequency),
                food=FoodRequirement(food),
                prescriber=prescriber,
                notes=notes
            )

            session.add(medication)
            commit_or_raise(session, "medications")
            session.refresh(medication)

            logger.info(f"Added medication {name} for resident {resident_id}")
            return medication

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def update_medication(
        self,
        medication_id: str,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """
        Apply a partial update to a medication

        Returns None if the medication does not exist.
        """
        def _update(session: Session) -> Optional[models.Medication]:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

            if not medication:
                return None

            for field, value in updates.items():
                if field not in self.UPDATABLE_FIELDS:
                    continue
                if field == "times":
                    value = list(value or [])
                elif field == "food":
                    value = FoodRequirement(value) if value is not None else FoodRequirement.NONE
                setattr(medication, field, value)

            commit_or_raise(session, "medications")
            session.refresh(medication)

            logger.info(f"Updated medication {medication_id}")
            return medication

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_medication(
        self,
        medication_id: str,
        db: Optional[Session] = None
    ) -> bool:
        """
        Delete a medication and its dose events

        Returns:
            False if the medication does not exist
        """
        def _delete(session: Session) -> bool:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

            if not medication:
                return False

            session.delete(medication)
            commit_or_raise(session, "medications")

            logger.info(f"Deleted medication {medication_id}")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)


# Singleton instance
medication_service = MedicationService()

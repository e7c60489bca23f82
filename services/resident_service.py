"""
Resident Service
Business logic for resident profile management
"""

import logging
from typing import Dict, List, Optional, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from database import get_db_context, commit_or_raise
import models


logger = logging.getLogger(__name__)


class ResidentService:
    """
    Service for resident-related operations
    """

    UPDATABLE_FIELDS = {
        "first_name", "last_name", "age", "allergies", "conditions", "physician"
    }

    async def list_residents(self, db: Optional[Session] = None) -> List[models.Resident]:
        """List all residents, oldest first. Read failures yield an empty list."""
        def _list(session: Session) -> List[models.Resident]:
            try:
                return session.query(models.Resident).order_by(
                    models.Resident.created_at
                ).all()
            except SQLAlchemyError as e:
                logger.error(f"Failed to read residents: {e}")
                return []

        if db:
            return _list(db)

        with get_db_context() as session:
            return _list(session)

    async def get_resident(
        self,
        resident_id: str,
        db: Optional[Session] = None
    ) -> Optional[models.Resident]:
        """Get resident by ID"""
        def _get(session: Session) -> Optional[models.Resident]:
            try:
                return session.query(models.Resident).filter(
                    models.Resident.id == resident_id
                ).first()
            except SQLAlchemyError as e:
                logger.error(f"Failed to read resident {resident_id}: {e}")
                return None

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def create_resident(
        self,
        first_name: str,
        last_name: str,
        age: int,
        allergies: Optional[List[str]] = None,
        conditions: Optional[List[str]] = None,
        physician: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.Resident:
        """
        Create a new resident profile

        Args:
            first_name: First name
            last_name: Last name
            age: Age in years
            allergies: Known allergies
            conditions: Chronic conditions
            physician: Primary physician
            db: Database session (optional)

        Returns:
            Created Resident object

        Raises:
            StorageError: if the record could not be saved
        """
        def _create(session: Session) -> models.Resident:
            resident = models.Resident(
                first_name=first_name,
                last_name=last_name,
                age=age,
                allergies=list(allergies or []),
                conditions=list(conditions or []),
                physician=physician
            )

            session.add(resident)
            commit_or_raise(session, "residents")
            session.refresh(resident)

            logger.info(f"Created resident: {resident.id} - {resident.full_name}")
            return resident

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def update_resident(
        self,
        resident_id: str,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> Optional[models.Resident]:
        """
        Apply a partial update to a resident

        Unknown fields are ignored. Returns None if the resident does not exist.
        """
        def _update(session: Session) -> Optional[models.Resident]:
            resident = session.query(models.Resident).filter(
                models.Resident.id == resident_id
            ).first()

            if not resident:
                return None

            for field, value in updates.items():
                if field not in self.UPDATABLE_FIELDS:
                    continue
                # JSON columns only track reassignment
                if field in ("allergies", "conditions"):
                    value = list(value or [])
                setattr(resident, field, value)

            commit_or_raise(session, "residents")
            session.refresh(resident)

            logger.info(f"Updated resident: {resident_id}")
            return resident

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_resident(
        self,
        resident_id: str,
        db: Optional[Session] = None
    ) -> bool:
        """
        Delete a resident with all of its medications, dose events and insights

        Returns:
            False if the resident does not exist
        """
        def _delete(session: Session) -> bool:
            resident = session.query(models.Resident).filter(
                models.Resident.id == resident_id
            ).first()

            if not resident:
                return False

            session.delete(resident)
            commit_or_raise(session, "residents")

            logger.info(f"Deleted resident {resident_id} and related records")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)


# Singleton instance
resident_service = ResidentService()

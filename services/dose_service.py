"""
Dose Service
Append-only dose event log and dose history views
"""

import logging
from typing import Dict, List, Optional, Any, Union
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import desc

from database import get_db_context, commit_or_raise
import models
from models import DoseStatus


logger = logging.getLogger(__name__)


class DoseService:
    """
    Service for logging doses and reading dose history
    """

    async def list_dose_events(
        self,
        resident_id: Optional[str] = None,
        recorded_since: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> List[models.DoseEvent]:
        """
        List dose events in recording order

        Args:
            resident_id: Only events for this resident
            recorded_since: Only events recorded at or after this time
            db: Database session

        Returns:
            Dose events; empty on read failure
        """
        def _list(session: Session) -> List[models.DoseEvent]:
            try:
                query = session.query(models.DoseEvent)
                if resident_id is not None:
                    query = query.filter(models.DoseEvent.resident_id == resident_id)
                if recorded_since is not None:
                    query = query.filter(models.DoseEvent.recorded_time >= recorded_since)
                return query.order_by(models.DoseEvent.recorded_time).all()
            except SQLAlchemyError as e:
                logger.error(f"Failed to read dose events: {e}")
                return []

        if db:
            return _list(db)

        with get_db_context() as session:
            return _list(session)

    async def record_dose_event(
        self,
        resident_id: str,
        medication_id: str,
        scheduled_time: datetime,
        status: Union[DoseStatus, str],
        recorded_time: Optional[datetime] = None,
        note: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.DoseEvent:
        """
        Append a dose event

        The medication is assumed to belong to the resident; this is not checked.

        Raises:
            StorageError: if the event could not be saved
        """
        def _record(session: Session) -> models.DoseEvent:
            event = models.DoseEvent(
                resident_id=resident_id,
                medication_id=medication_id,
                scheduled_time=scheduled_time,
                recorded_time=recorded_time or datetime.utcnow(),
                status=DoseStatus(status),
                note=note
            )

            session.add(event)
            commit_or_raise(session, "dose events")
            session.refresh(event)

            logger.info(
                f"Recorded dose for resident {resident_id}, "
                f"medication {medication_id}: {event.status.value}"
            )
            return event

        if db:
            return _record(db)

        with get_db_context() as session:
            return _record(session)

    async def get_dose_history(
        self,
        resident_id: str,
        status: Optional[Union[DoseStatus, str]] = None,
        db: Optional[Session] = None
    ) -> List[Dict[str, Any]]:
        """
        Dose history for a resident, newest recording first

        Events whose medication no longer exists are dropped.
        """
        def _get(session: Session) -> List[Dict[str, Any]]:
            try:
                query = session.query(models.DoseEvent, models.Medication).join(
                    models.Medication,
                    models.DoseEvent.medication_id == models.Medication.id
                ).filter(models.DoseEvent.resident_id == resident_id)

                if status is not None:
                    query = query.filter(models.DoseEvent.status == DoseStatus(status))

                rows = query.order_by(desc(models.DoseEvent.recorded_time)).all()
            except SQLAlchemyError as e:
                logger.error(f"Failed to read dose history for {resident_id}: {e}")
                return []

            return [
                {
                    "id": event.id,
                    "medication_id": med.id,
                    "medication_name": med.name,
                    "strength": med.strength,
                    "status": event.status.value,
                    "scheduled_time": event.scheduled_time.isoformat(),
                    "recorded_time": event.recorded_time.isoformat(),
                    "note": event.note
                }
                for event, med in rows
            ]

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
dose_service = DoseService()

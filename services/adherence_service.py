"""
Adherence Service
Business logic for medication adherence calculation
"""

import logging
from typing import Dict, List, Optional, Any, Tuple
from datetime import datetime, timedelta
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import and_

from config import care_config
from database import get_db_context
import models
from models import DoseStatus


logger = logging.getLogger(__name__)


class AdherenceService:
    """
    Service for adherence tracking and analysis
    """

    def _load_window(
        self,
        session: Session,
        resident_id: str,
        window_days: int,
        now: Optional[datetime]
    ) -> Tuple[List[models.Medication], List[models.DoseEvent]]:
        """Medications of a resident and their dose events recorded in the window"""
        start = (now or datetime.utcnow()) - timedelta(days=window_days)
        try:
            medications = session.query(models.Medication).filter(
                models.Medication.resident_id == resident_id
            ).all()

            medication_ids = [m.id for m in medications]
            if not medication_ids:
                return medications, []

            events = session.query(models.DoseEvent).filter(
                and_(
                    models.DoseEvent.resident_id == resident_id,
                    models.DoseEvent.medication_id.in_(medication_ids),
                    models.DoseEvent.recorded_time >= start
                )
            ).all()
            return medications, events
        except SQLAlchemyError as e:
            logger.error(f"Failed to read adherence data for {resident_id}: {e}")
            return [], []

    @staticmethod
    def _rate(medications: List[models.Medication], events: List[models.DoseEvent], window_days: int) -> float:
        expected = sum(len(m.times or []) for m in medications) * window_days
        if expected == 0:
            # No medications is a perfect score by convention
            return 100.0
        taken = sum(1 for e in events if e.status == DoseStatus.TAKEN)
        return taken / expected * 100

    async def calculate_adherence(
        self,
        resident_id: str,
        window_days: int = care_config.ADHERENCE_WINDOW_DAYS,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> float:
        """
        Percentage of expected doses logged as taken in a trailing window

        Expected doses assume every current medication was due on every day of
        the window. Taken doses are filtered by when they were recorded, not
        when they were scheduled.

        Args:
            resident_id: Resident ID
            window_days: Trailing window length in days
            now: End of the window (default: current UTC time)
            db: Database session

        Returns:
            Adherence percentage; 100 when nothing is expected
        """
        def _calculate(session: Session) -> float:
            medications, events = self._load_window(session, resident_id, window_days, now)
            return self._rate(medications, events, window_days)

        if db:
            return _calculate(db)

        with get_db_context() as session:
            return _calculate(session)

    async def get_adherence_summary(
        self,
        resident_id: str,
        window_days: int = care_config.ADHERENCE_WINDOW_DAYS,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """Adherence rate together with the dose counts behind it"""
        def _summary(session: Session) -> Dict[str, Any]:
            medications, events = self._load_window(session, resident_id, window_days, now)
            return {
                "resident_id": resident_id,
                "adherence_rate": round(self._rate(medications, events, window_days), 1),
                "expected_doses": sum(len(m.times or []) for m in medications) * window_days,
                "taken": sum(1 for e in events if e.status == DoseStatus.TAKEN),
                "skipped": sum(1 for e in events if e.status == DoseStatus.SKIPPED),
                "delayed": sum(1 for e in events if e.status == DoseStatus.DELAYED),
                "window_days": window_days
            }

        if db:
            return _summary(db)

        with get_db_context() as session:
            return _summary(session)


# Singleton instance
adherence_service = AdherenceService()

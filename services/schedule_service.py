"""
Schedule Service
Daily schedule view, conflict resolution and dose recording
"""

import logging
from typing import Dict, List, Optional, Any, Union
from datetime import datetime
from collections import defaultdict
from sqlalchemy.orm import Session

from config import care_config
from database import StorageError
import models
from models import DoseStatus, InsightSeverity
from services.dose_service import dose_service
from services.medication_service import medication_service
from actions.insights_engine import insights_engine
from tools.scheduler import (
    ConflictInfo,
    ConflictType,
    check_time_slot_conflicts,
    is_valid_time,
    offset_time,
    time_to_minutes,
)


logger = logging.getLogger(__name__)


class CriticalInteractionError(Exception):
    """Recording a taken dose needs confirmation because of a critical interaction"""

    def __init__(self, conflict: ConflictInfo):
        self.conflict = conflict
        super().__init__(conflict.message)


class ScheduleService:
    """
    Service for the per-resident time-slot schedule
    """

    async def build_daily_schedule(
        self,
        resident_id: str,
        db: Optional[Session] = None
    ) -> List[Dict[str, Any]]:
        """
        Group a resident's medications by dose time

        Slots are keyed by exact time string and sorted lexically, which is
        chronological for zero-padded 24-hour times.

        Returns:
            [{"time", "medications", "conflicts"}] per slot
        """
        medications = await medication_service.list_medications(resident_id, db=db)

        by_time: Dict[str, List[models.Medication]] = defaultdict(list)
        for med in medications:
            for t in med.times or []:
                if not is_valid_time(t):
                    logger.warning(f"Skipping malformed time {t!r} on medication {med.id}")
                    continue
                by_time[t].append(med)

        return [
            {
                "time": slot,
                "medications": by_time[slot],
                "conflicts": check_time_slot_conflicts(by_time[slot], slot),
            }
            for slot in sorted(by_time)
        ]

    async def get_slot_conflicts(
        self,
        resident_id: str,
        time_slot: str,
        db: Optional[Session] = None
    ) -> List[ConflictInfo]:
        """Conflicts among medications scheduled exactly at a slot"""
        medications = await medication_service.list_medications(resident_id, db=db)
        slot_meds = [m for m in medications if time_slot in (m.times or [])]
        return check_time_slot_conflicts(slot_meds, time_slot)

    async def preview_conflicts(
        self,
        resident_id: str,
        time_slot: str,
        candidates: Optional[List[Dict[str, Any]]] = None,
        db: Optional[Session] = None
    ) -> List[ConflictInfo]:
        """
        Conflicts near a slot if unsaved candidate medications were added

        Unlike `get_slot_conflicts`, medications within the slot tolerance
        count, which is what a caregiver sees while filling in a new
        medication.
        """
        medications: List[Any] = list(
            await medication_service.list_medications(resident_id, db=db)
        )
        medications.extend(candidates or [])
        return check_time_slot_conflicts(medications, time_slot)

    async def auto_offset(
        self,
        resident_id: str,
        time_slot: str,
        offset_minutes: int = care_config.FOOD_SEPARATION_MINUTES,
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """
        Resolve a slot's food conflict by moving one medication later

        The second medication named in the first food conflict has every
        occurrence of `time_slot` in its times replaced by the shifted time.

        Returns:
            The updated medication, or None if there was nothing to move
        """
        conflicts = await self.get_slot_conflicts(resident_id, time_slot, db=db)
        food_conflict = next((c for c in conflicts if c.type == ConflictType.FOOD), None)
        if not food_conflict or len(food_conflict.medications) < 2:
            return None

        target_name = food_conflict.medications[1]
        medications = await medication_service.list_medications(resident_id, db=db)
        target = next((m for m in medications if m.name == target_name), None)
        if not target:
            return None

        new_time = offset_time(time_slot, offset_minutes)
        updated_times = [new_time if t == time_slot else t for t in target.times or []]

        logger.info(f"Moving {target.name} from {time_slot} to {new_time} for resident {resident_id}")
        return await medication_service.update_medication(
            target.id, {"times": updated_times}, db=db
        )

    async def record_dose(
        self,
        resident_id: str,
        medication_id: str,
        status: Union[DoseStatus, str],
        time_slot: str,
        now: Optional[datetime] = None,
        override: bool = False,
        note: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.DoseEvent:
        """
        Log a dose for today's occurrence of a slot and refresh insights

        Raises:
            ValueError: if the medication is unknown
            CriticalInteractionError: if a taken dose hits a critical
                interaction in its slot and `override` is not set
        """
        status = DoseStatus(status)
        now = now or datetime.utcnow()

        medication = await medication_service.get_medication(medication_id, db=db)
        if not medication:
            raise ValueError(f"Medication {medication_id} not found")

        if status == DoseStatus.TAKEN and not override:
            conflicts = await self.get_slot_conflicts(resident_id, time_slot, db=db)
            critical = next(
                (
                    c for c in conflicts
                    if c.severity == InsightSeverity.CRITICAL and medication.name in c.medications
                ),
                None
            )
            if critical:
                raise CriticalInteractionError(critical)

        slot_minutes = time_to_minutes(time_slot)
        scheduled = now.replace(
            hour=slot_minutes // 60, minute=slot_minutes % 60, second=0, microsecond=0
        )

        event = await dose_service.record_dose_event(
            resident_id=resident_id,
            medication_id=medication_id,
            scheduled_time=scheduled,
            status=status,
            recorded_time=now,
            note=note,
            db=db
        )

        # The dose is already stored; a failed refresh keeps the previous insights
        try:
            await insights_engine.generate_insights(resident_id, now=now, db=db)
        except StorageError as e:
            logger.error(f"Insight refresh failed after recording dose {event.id}: {e}")

        return event


# Singleton instance
schedule_service = ScheduleService()

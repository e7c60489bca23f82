"""
Insights Engine
Derives advisory insights from a resident's medications and dose history
"""

import logging
from typing import Any, Callable, Dict, List, Optional
from datetime import datetime, timedelta
from collections import defaultdict
import asyncio

from sqlalchemy.orm import Session

from config import settings, care_config
import models
from models import DoseStatus, InsightSeverity
from services.adherence_service import adherence_service
from services.dose_service import dose_service
from services.insight_service import insight_service
from services.llm_service import llm_service
from services.medication_service import medication_service
from services.resident_service import resident_service
from tools.network import is_network_available


logger = logging.getLogger(__name__)

MISSED_STATUSES = (DoseStatus.SKIPPED, DoseStatus.DELAYED)


def _insight(
    severity: InsightSeverity,
    message: str,
    suggested_action: Optional[str] = None,
    evidence_ids: Optional[List[str]] = None
) -> Dict[str, Any]:
    return {
        "severity": severity,
        "message": message,
        "suggested_action": suggested_action,
        "evidence_ids": evidence_ids,
    }


class InsightsEngine:
    """
    Engine for generating insights from medication adherence data

    Each run recomputes a resident's full insight list and replaces the
    stored one. Rule-based insights come first, in a fixed order:
    polypharmacy, adherence, missed-dose patterns. Insights from the AI
    collaborator are appended when it is reachable and answers sensibly.
    """

    def __init__(
        self,
        llm=None,
        network_probe: Optional[Callable[[], bool]] = None,
        ai_timeout: Optional[float] = None
    ):
        self.llm = llm or llm_service
        self.network_probe = network_probe or is_network_available
        self.ai_timeout = ai_timeout if ai_timeout is not None else settings.LLM_TIMEOUT_SECONDS

    def polypharmacy_insights(self, medications: List[models.Medication]) -> List[Dict[str, Any]]:
        threshold = care_config.POLYPHARMACY_THRESHOLD
        if len(medications) <= threshold:
            return []
        return [_insight(
            InsightSeverity.INFO,
            f"Polypharmacy: more than {threshold} active medications",
            "Review with physician for possible medication reduction",
            [m.id for m in medications],
        )]

    def adherence_insights(self, adherence: float) -> List[Dict[str, Any]]:
        threshold = care_config.ADHERENCE_WARNING_THRESHOLD
        if adherence >= threshold:
            return []
        return [_insight(
            InsightSeverity.WARNING,
            f"Adherence below {threshold:.0f}% in the last {care_config.ADHERENCE_WINDOW_DAYS} days",
            "Review medication schedule and barriers to adherence",
        )]

    def miss_pattern_insights(self, dose_events: List[models.DoseEvent]) -> List[Dict[str, Any]]:
        """One insight per scheduled hour with repeated skipped or delayed doses"""
        by_hour: Dict[int, List[str]] = defaultdict(list)
        for event in dose_events:
            if event.status in MISSED_STATUSES:
                by_hour[event.scheduled_time.hour].append(event.id)

        insights = []
        for hour in sorted(by_hour):
            event_ids = by_hour[hour]
            if len(event_ids) >= care_config.MISS_PATTERN_MIN_COUNT:
                insights.append(_insight(
                    InsightSeverity.INFO,
                    f"Multiple missed doses at {hour}:00",
                    f"Consider adjusting medication time from {hour}:00 to better fit routine",
                    event_ids,
                ))
        return insights

    async def _is_online(self) -> bool:
        try:
            loop = asyncio.get_event_loop()
            return bool(await loop.run_in_executor(None, self.network_probe))
        except Exception as e:
            logger.warning(f"Network probe failed: {e}")
            return False

    async def ai_insights(
        self,
        resident_id: str,
        medications: List[models.Medication],
        dose_events: List[models.DoseEvent],
        now: datetime,
        db: Optional[Session] = None
    ) -> List[Dict[str, Any]]:
        """
        Best-effort insights from the AI collaborator

        Returns an empty list when unconfigured or offline, on timeout, and
        on any error.
        """
        if not self.llm.is_configured:
            return []

        if not await self._is_online():
            logger.info("Device is offline, skipping AI insights")
            return []

        try:
            resident = await resident_service.get_resident(resident_id, db=db)
            if not resident:
                return []

            since = now - timedelta(days=care_config.ADHERENCE_WINDOW_DAYS)
            recent = [e for e in dose_events if e.recorded_time >= since]

            result = await asyncio.wait_for(
                self.llm.generate_resident_insights(resident, medications, recent),
                timeout=self.ai_timeout,
            )
            if not isinstance(result, list):
                return []
            return [
                _insight(
                    InsightSeverity(item["severity"]),
                    item["message"],
                    item.get("suggested_action"),
                )
                for item in result
            ]
        except asyncio.TimeoutError:
            logger.warning(f"AI insights timed out for resident {resident_id}")
            return []
        except Exception as e:
            logger.warning(f"AI insights failed for resident {resident_id}: {e}")
            return []

    async def generate_insights(
        self,
        resident_id: str,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> List[models.Insight]:
        """
        Recompute and replace the stored insights of a resident

        Args:
            resident_id: Resident ID
            now: Reference time (default: current UTC time)
            db: Database session

        Returns:
            The newly stored insights, in display order

        Raises:
            StorageError: if the new list could not be saved
        """
        now = now or datetime.utcnow()

        medications = await medication_service.list_medications(resident_id, db=db)
        dose_events = await dose_service.list_dose_events(resident_id, db=db)
        adherence = await adherence_service.calculate_adherence(
            resident_id, care_config.ADHERENCE_WINDOW_DAYS, now=now, db=db
        )

        insights: List[Dict[str, Any]] = []
        insights.extend(self.polypharmacy_insights(medications))
        insights.extend(self.adherence_insights(adherence))
        insights.extend(self.miss_pattern_insights(dose_events))
        insights.extend(await self.ai_insights(resident_id, medications, dose_events, now, db=db))

        logger.info(f"Generated {len(insights)} insight(s) for resident {resident_id}")
        return await insight_service.replace_insights(resident_id, insights, db=db)


# Singleton instance
insights_engine = InsightsEngine()

"""
Tests for Insights Engine
Tests rule-based insights, AI augmentation and replacement semantics
"""

import asyncio
import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

from sqlalchemy.orm import Session

from actions.insights_engine import InsightsEngine
from models import DoseStatus, InsightSeverity
from services.insight_service import insight_service


@pytest.fixture
def engine(mock_llm_service):
    """Engine that is online and talks to a mock collaborator"""
    return InsightsEngine(llm=mock_llm_service, network_probe=lambda: True, ai_timeout=1.0)


def full_week_taken(medication, make_dose_event, now):
    for day in range(7):
        for _ in medication.times:
            make_dose_event(medication, DoseStatus.TAKEN, now - timedelta(days=day, minutes=5))


class TestRuleBasedInsights:
    """Tests for the rule-based steps"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_healthy_resident_has_no_insights(self, engine, make_medication, make_dose_event,
                                                    test_resident, db_session: Session, fixed_now):
        medication = make_medication("Metformin", ["09:00"])
        full_week_taken(medication, make_dose_event, fixed_now)

        insights = await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)
        assert insights == []

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_rule_order(self, engine, make_medication, make_dose_event,
                              test_resident, db_session: Session, fixed_now):
        medications = [make_medication(f"Med {i}", ["09:00"]) for i in range(6)]
        for day in (1, 2, 3):
            make_dose_event(
                medications[0], DoseStatus.SKIPPED,
                recorded_time=fixed_now - timedelta(days=day),
                scheduled_time=datetime(2024, 3, 15 - day, 21, 0)
            )
        for day in (1, 2, 3):
            make_dose_event(
                medications[1], DoseStatus.DELAYED,
                recorded_time=fixed_now - timedelta(days=day),
                scheduled_time=datetime(2024, 3, 15 - day, 8, 0)
            )

        insights = await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)

        assert [(i.severity, i.message) for i in insights] == [
            (InsightSeverity.INFO, "Polypharmacy: more than 5 active medications"),
            (InsightSeverity.WARNING, "Adherence below 80% in the last 7 days"),
            (InsightSeverity.INFO, "Multiple missed doses at 8:00"),
            (InsightSeverity.INFO, "Multiple missed doses at 21:00"),
        ]
        assert insights[0].evidence_ids == [m.id for m in medications]
        assert insights[0].suggested_action == "Review with physician for possible medication reduction"
        assert insights[1].suggested_action == "Review medication schedule and barriers to adherence"
        assert insights[2].suggested_action == "Consider adjusting medication time from 8:00 to better fit routine"
        assert len(insights[3].evidence_ids) == 3
        assert [i.position for i in insights] == [0, 1, 2, 3]

    @pytest.mark.unit
    def test_polypharmacy_threshold(self, engine):
        assert engine.polypharmacy_insights([object()] * 5) == []

    @pytest.mark.unit
    def test_adherence_threshold(self, engine):
        assert engine.adherence_insights(80.0) == []
        assert len(engine.adherence_insights(79.9)) == 1

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_two_misses_are_not_a_pattern(self, engine, make_medication, make_dose_event,
                                                test_resident, db_session: Session, fixed_now):
        medication = make_medication("Metformin", ["09:00"])
        full_week_taken(medication, make_dose_event, fixed_now)
        for day in (1, 2):
            make_dose_event(medication, DoseStatus.SKIPPED, fixed_now - timedelta(days=day))

        insights = await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)
        assert insights == []

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_regeneration_replaces(self, engine, make_medication, test_resident,
                                         db_session: Session, fixed_now):
        make_medication("Metformin", ["09:00"])

        await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)
        await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)

        stored = await insight_service.list_insights(test_resident.id, db=db_session)
        assert [i.message for i in stored] == ["Adherence below 80% in the last 7 days"]


class TestAiInsights:
    """Tests for the best-effort AI step"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_ai_insights_are_appended(self, engine, mock_llm_service, make_medication,
                                            test_resident, db_session: Session, fixed_now):
        make_medication("Metformin", ["09:00"])
        mock_llm_service.generate_resident_insights = AsyncMock(return_value=[
            {"severity": InsightSeverity.INFO, "message": "Encourage fluids", "suggested_action": None},
        ])

        insights = await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)

        assert [i.message for i in insights] == [
            "Adherence below 80% in the last 7 days",
            "Encourage fluids",
        ]
        assert insights[1].evidence_ids is None

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_only_recent_events_are_sent(self, engine, mock_llm_service, make_medication,
                                               make_dose_event, test_resident,
                                               db_session: Session, fixed_now):
        medication = make_medication("Metformin", ["09:00"])
        make_dose_event(medication, DoseStatus.TAKEN, fixed_now - timedelta(days=10))
        recent = make_dose_event(medication, DoseStatus.TAKEN, fixed_now - timedelta(days=1))

        await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)

        resident, medications, events = mock_llm_service.generate_resident_insights.call_args.args
        assert resident.id == test_resident.id
        assert [m.id for m in medications] == [medication.id]
        assert [e.id for e in events] == [recent.id]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_offline_skips_ai(self, mock_llm_service, make_medication, test_resident,
                                    db_session: Session, fixed_now):
        engine = InsightsEngine(llm=mock_llm_service, network_probe=lambda: False)
        make_medication("Metformin", ["09:00"])

        insights = await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)

        assert len(insights) == 1
        mock_llm_service.generate_resident_insights.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_failing_probe_counts_as_offline(self, mock_llm_service, make_medication,
                                                   test_resident, db_session: Session, fixed_now):
        def probe():
            raise OSError("no route")

        engine = InsightsEngine(llm=mock_llm_service, network_probe=probe)
        make_medication("Metformin", ["09:00"])

        insights = await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)
        assert len(insights) == 1

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_ai_failure_keeps_rule_insights(self, engine, mock_llm_service, make_medication,
                                                  test_resident, db_session: Session, fixed_now):
        make_medication("Metformin", ["09:00"])
        mock_llm_service.generate_resident_insights = AsyncMock(side_effect=RuntimeError("500"))

        insights = await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)
        assert [i.severity for i in insights] == [InsightSeverity.WARNING]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_ai_timeout_keeps_rule_insights(self, mock_llm_service, make_medication,
                                                  test_resident, db_session: Session, fixed_now):
        async def slow(*args):
            await asyncio.sleep(5)
            return [{"severity": InsightSeverity.INFO, "message": "late", "suggested_action": None}]

        mock_llm_service.generate_resident_insights = slow
        engine = InsightsEngine(llm=mock_llm_service, network_probe=lambda: True, ai_timeout=0.05)
        make_medication("Metformin", ["09:00"])

        insights = await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)
        assert [i.message for i in insights] == ["Adherence below 80% in the last 7 days"]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_malformed_ai_item_discards_ai_step(self, engine, mock_llm_service, make_medication,
                                                      test_resident, db_session: Session, fixed_now):
        make_medication("Metformin", ["09:00"])
        mock_llm_service.generate_resident_insights = AsyncMock(return_value=[{"severity": "bogus"}])

        insights = await engine.generate_insights(test_resident.id, now=fixed_now, db=db_session)
        assert len(insights) == 1

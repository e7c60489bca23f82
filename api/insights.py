"""
Insights API Router
Endpoints for advisory insights and adherence
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_resident, services
from api.schemas.insight import InsightResponse, InsightList, AdherenceSummary
from config import care_config
import models


router = APIRouter(prefix="/insights", tags=["insights"])


def _insight_list(resident_id: str, insights) -> InsightList:
    return InsightList(
        resident_id=resident_id,
        insights=[InsightResponse.model_validate(i) for i in insights],
        total=len(insights)
    )


@router.get("/{resident_id}", response_model=InsightList)
async def get_insights(
    resident: models.Resident = Depends(get_current_resident),
    db: Session = Depends(get_db)
):
    """
    Get the stored insights of a resident, in display order
    """
    insight_service = services.get_insight_service()

    insights = await insight_service.list_insights(resident.id, db=db)
    return _insight_list(resident.id, insights)


@router.post("/{resident_id}/generate", response_model=InsightList)
async def generate_insights(
    resident: models.Resident = Depends(get_current_resident),
    db: Session = Depends(get_db)
):
    """
    Recompute a resident's insights and replace the stored list
    """
    insights_engine = services.get_insights_engine()

    insights = await insights_engine.generate_insights(resident.id, db=db)
    return _insight_list(resident.id, insights)


@router.get("/{resident_id}/adherence", response_model=AdherenceSummary)
async def get_adherence(
    days: int = Query(care_config.ADHERENCE_WINDOW_DAYS, ge=1, le=365),
    resident: models.Resident = Depends(get_current_resident),
    db: Session = Depends(get_db)
):
    """
    Get the adherence rate over the last `days` days
    """
    adherence_service = services.get_adherence_service()

    summary = await adherence_service.get_adherence_summary(resident.id, window_days=days, db=db)
    return AdherenceSummary(**summary)

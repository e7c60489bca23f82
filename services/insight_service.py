"""
Insight Service
Storage for derived insights; each resident's list is replaced wholesale
"""

import logging
from typing import Dict, List, Optional, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from database import get_db_context, commit_or_raise, StorageError
import models
from models import InsightSeverity


logger = logging.getLogger(__name__)


class InsightService:
    """
    Service for the per-resident insight cache
    """

    async def list_insights(
        self,
        resident_id: Optional[str] = None,
        db: Optional[Session] = None
    ) -> List[models.Insight]:
        """List insights in the order they were generated. Empty on read failure."""
        def _list(session: Session) -> List[models.Insight]:
            try:
                query = session.query(models.Insight)
                if resident_id is not None:
                    query = query.filter(models.Insight.resident_id == resident_id)
                return query.order_by(
                    models.Insight.resident_id,
                    models.Insight.position
                ).all()
            except SQLAlchemyError as e:
                logger.error(f"Failed to read insights: {e}")
                return []

        if db:
            return _list(db)

        with get_db_context() as session:
            return _list(session)

    async def replace_insights(
        self,
        resident_id: str,
        insights: List[Dict[str, Any]],
        db: Optional[Session] = None
    ) -> List[models.Insight]:
        """
        Replace all insights of a resident in a single transaction

        Args:
            resident_id: Resident whose insights are replaced
            insights: Dicts with severity, message and optional
                suggested_action / evidence_ids, in display order

        Raises:
            StorageError: if the replacement could not be saved; the previous
                insights are kept in that case
        """
        def _replace(session: Session) -> List[models.Insight]:
            try:
                session.query(models.Insight).filter(
                    models.Insight.resident_id == resident_id
                ).delete(synchronize_session=False)
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Failed to clear insights for {resident_id}: {e}")
                raise StorageError("insights") from e

            rows = []
            for position, data in enumerate(insights):
                row = models.Insight(
                    resident_id=resident_id,
                    position=position,
                    severity=InsightSeverity(data["severity"]),
                    message=data["message"],
                    evidence_ids=data.get("evidence_ids"),
                    suggested_action=data.get("suggested_action")
                )
                session.add(row)
                rows.append(row)

            commit_or_raise(session, "insights")
            for row in rows:
                session.refresh(row)

            logger.info(f"Stored {len(rows)} insight(s) for resident {resident_id}")
            return rows

        if db:
            return _replace(db)

        with get_db_context() as session:
            return _replace(session)

    async def clear_insights(
        self,
        resident_id: str,
        db: Optional[Session] = None
    ) -> None:
        """Remove all insights of a resident"""
        await self.replace_insights(resident_id, [], db=db)


# Singleton instance
insight_service = InsightService()

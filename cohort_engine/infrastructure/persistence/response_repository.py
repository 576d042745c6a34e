"""
SQLAlchemy implementation of the response store.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cohort_engine.domain.models.onboarding import ResponseRecord
from cohort_engine.domain.repositories.response_store import IResponseStore
from cohort_engine.models import GenerationalResponse
from cohort_engine.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


class ResponseRepository(IResponseStore):
    """Writes ResponseRecords to the generational_responses table."""

    def __init__(self, session: Session):
        """
        Initialize the repository.

        Args:
            session: SQLAlchemy session
        """
        self.session = session

    async def save(
        self,
        record: ResponseRecord,
        session_id: Optional[str] = None,
        source: str = "user_input",
    ) -> int:
        try:
            row = GenerationalResponse(
                session_id=session_id,
                slot_id=record.slot_id,
                raw_text=record.raw_text,
                parsed_data=record.signals.model_dump(mode="json"),
                confidence_score=record.confidence,
                source=source,
                created_at=utc_now(),
            )
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
            logger.debug(f"Saved response {row.id} for slot {record.slot_id}")
            return row.id
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error saving response for slot {record.slot_id}: {str(e)}")
            raise

    async def save_all(
        self,
        records: List[ResponseRecord],
        session_id: Optional[str] = None,
        source: str = "user_input",
    ) -> List[int]:
        return [await self.save(record, session_id, source) for record in records]

    def list_for_session(self, session_id: str) -> List[Dict[str, Any]]:
        """Stored rows for one session, oldest first."""
        rows = (
            self.session.query(GenerationalResponse)
            .filter(GenerationalResponse.session_id == session_id)
            .order_by(GenerationalResponse.id)
            .all()
        )
        return [
            {
                "id": row.id,
                "slot_id": row.slot_id,
                "raw_text": row.raw_text,
                "parsed_data": row.parsed_data,
                "confidence_score": row.confidence_score,
                "source": row.source,
                "created_at": row.created_at,
            }
            for row in rows
        ]

"""
Response store interface.

The engine hands every analyzed answer to a store as a ResponseRecord; it
never reads records back.
"""

from abc import ABC, abstractmethod
from typing import Optional

from cohort_engine.domain.models.onboarding import ResponseRecord


class IResponseStore(ABC):
    """Persistence boundary for (slot id, raw text, derived signals) tuples."""

    @abstractmethod
    async def save(
        self,
        record: ResponseRecord,
        session_id: Optional[str] = None,
        source: str = "user_input",
    ) -> int:
        """
        Persist one record.

        Args:
            record: The answer and its derived signals
            session_id: Onboarding session the answer belongs to
            source: "user_input" for the initial form, "follow_up" for follow-up answers

        Returns:
            ID of the stored row
        """
        pass

from sqlalchemy import Column, DateTime, Float, Integer, JSON, String, Text

# Import Base from database.py to ensure we use the same Base instance
from cohort_engine.database import Base

from cohort_engine.utils.timezone_utils import utc_now


class GenerationalResponse(Base):
    """One onboarding answer with the signals derived from it."""

    __tablename__ = "generational_responses"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String, nullable=True, index=True)
    slot_id = Column(String, nullable=False)
    raw_text = Column(Text, nullable=False)
    parsed_data = Column(JSON, nullable=True)
    confidence_score = Column(Float, default=0.0)
    source = Column(String, default="user_input")  # "user_input" | "follow_up"
    created_at = Column(DateTime, default=utc_now)

"""
PyTest configuration and fixtures.
"""

import os

# Tests never reach a real model or the on-disk database
os.environ["LLM_PROVIDER"] = "none"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from unittest.mock import AsyncMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from cohort_engine.database import Base, get_db
from cohort_engine.models import GenerationalResponse  # noqa: F401
from cohort_engine.infrastructure.data.config import OnboardingConfig
from cohort_engine.services.processing.gap_analyzer import GapAnalyzer
from cohort_engine.services.processing.signal_extractor import SignalExtractor

# Create test database engine; one shared in-memory connection
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},  # Needed for SQLite
    poolclass=StaticPool,
)

# Create test database session
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed "now" so year-range checks do not drift
TEST_CURRENT_YEAR = 2025


@pytest.fixture
def db_session():
    """Fresh tables and a session for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    """Create test client with database dependency override."""
    from cohort_engine.api.app import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def extractor():
    return SignalExtractor(year_provider=lambda: TEST_CURRENT_YEAR)


@pytest.fixture
def analyzer(extractor):
    return GapAnalyzer(extractor)


@pytest.fixture
def onboarding_config():
    return OnboardingConfig(
        max_attempts=4, direct_style_attempt=2, similarity_threshold=0.7, llm_timeout=0.5
    )


@pytest.fixture
def mock_llm():
    """LLM provider double; set generate_text.return_value / side_effect per test."""
    provider = AsyncMock()
    provider.generate_text = AsyncMock(
        return_value="What music filled your home when you were small?"
    )
    return provider

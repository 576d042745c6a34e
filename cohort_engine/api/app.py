"""
FastAPI application for generational onboarding.

Available LLM providers for phrasing follow-up questions:
- Google: models/gemini-2.5-flash (default)
- OpenAI: gpt-4o-mini
Set LLM_PROVIDER=none to serve questions from the fallback bank only.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Import centralized settings
from cohort_engine.infrastructure.config.settings import settings
from cohort_engine.database import create_tables

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Import API routers
from cohort_engine.api.onboarding.router import router as onboarding_router

app = FastAPI(
    title="Cohort Engine API",
    description="Generational onboarding: follow-up questions and cohort classification",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=settings.cors_methods,
    allow_headers=settings.cors_headers,
)

app.include_router(onboarding_router)

try:
    create_tables()
    logger.info("✅ Database tables initialized successfully")
except Exception as e:
    logger.warning(f"⚠️ Database initialization failed: {e}")


@app.get("/health")
async def health_check():
    return {"status": "healthy"}

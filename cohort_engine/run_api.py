"""
Run the onboarding API with uvicorn.

Usage:
    python -m cohort_engine.run_api
"""

import logging

import uvicorn

from cohort_engine.infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


def main():
    logger.info(
        f"Starting onboarding API on {settings.uvicorn_host}:{settings.uvicorn_port}"
    )
    uvicorn.run(
        "cohort_engine.api.app:app",
        host=settings.uvicorn_host,
        port=settings.uvicorn_port,
        reload=settings.uvicorn_reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

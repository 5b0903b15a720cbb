#!/usr/bin/env python3
"""
Applicant Tracking Scoring API - entry point.
Serves the FastAPI app with uvicorn.
"""

import logging

import uvicorn

from app.logging import configure_logging
from app.settings import settings

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME} on http://{settings.HOST}:{settings.PORT}")
    logger.info(f"API Docs: http://{settings.HOST}:{settings.PORT}/docs")
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )

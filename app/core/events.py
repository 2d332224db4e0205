"""
Application lifespan
Logging and schema setup on startup, engine disposal on shutdown
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging

from .config import settings
from .database import init_db, close_db
from .logging import setup_logging

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting %s %s (%s)", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)

    try:
        # Tests create their own schema per engine
        if settings.ENVIRONMENT != "test":
            await init_db()

        if not settings.ADMIN_NOTIFICATION_EMAIL:
            logger.warning("ADMIN_NOTIFICATION_EMAIL not set; operator order notices are disabled")

        yield
    finally:
        await close_db()
        logger.info("%s stopped", settings.APP_NAME)

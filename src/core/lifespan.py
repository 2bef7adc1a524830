from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from core.config import settings
from model.database import create_db_and_tables, engine
from service.object_store import S3ObjectStore
from utility.logger import setup_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # === 시작 ===
    setup_logger(settings.LOG_LEVEL, settings.LOG_JSON)
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION}")

    if settings.AUTO_CREATE_TABLES:
        create_db_and_tables()
        logger.info("Tables created")
    logger.info(
        f"Database pool ready ({engine.url.render_as_string(hide_password=True)})"
    )

    app.state.object_store = S3ObjectStore.from_settings(settings)
    logger.info(f"Object store ready (bucket={settings.AWS_S3_BUCKET_NAME})")

    yield

    # === 종료 ===
    engine.dispose()
    logger.info("Shutting down")

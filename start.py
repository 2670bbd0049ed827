#!/usr/bin/env python3
"""
Production entry point: bring the schema to head, then serve the API.
HOST and PORT come from the environment (0.0.0.0:10000 by default).
"""
import os

import uvicorn
from alembic import command
from alembic.config import Config

from core.config import settings
from core.logging import logger

ALEMBIC_INI = os.path.join(os.path.dirname(os.path.abspath(__file__)), "alembic.ini")


def upgrade_schema() -> bool:
    """Apply pending migrations; False when alembic fails"""
    config = Config(ALEMBIC_INI)
    config.set_main_option("sqlalchemy.url", settings.database_url)
    try:
        command.upgrade(config, "head")
    except Exception as e:
        logger.error(f"Migrations failed: {e}")
        return False
    logger.info("Schema is at head")
    return True


if __name__ == "__main__":
    if not upgrade_schema():
        logger.warning("Starting with the current schema; tables missing from it are created at startup")

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 10000)),
        log_level=settings.log_level.lower(),
    )

"""
Create Database Script
Creates the PostgreSQL database named in DATABASE_URL if it is missing
"""
import asyncio

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine

from core.config import settings


async def create_database():
    url = make_url(settings.DATABASE_URL)
    if not url.drivername.startswith("postgresql"):
        logger.info(f"Nothing to create for {url.drivername}")
        return

    target_db = url.database
    # Connect to the maintenance database to issue CREATE DATABASE
    engine = create_async_engine(url.set(database="postgres"), isolation_level="AUTOCOMMIT")

    try:
        async with engine.connect() as conn:
            result = await conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :name"), {"name": target_db}
            )
            if result.scalar():
                logger.info(f"Database {target_db} already exists")
            else:
                await conn.execute(text(f'CREATE DATABASE "{target_db}"'))
                logger.info(f"Database {target_db} created")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(create_database())

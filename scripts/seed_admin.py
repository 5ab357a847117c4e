"""
Seed Admin Script
Creates the administrator account described by ADMIN_EMAIL / ADMIN_PASSWORD

Run with the project installed (pip install -e .):

    python scripts/seed_admin.py

Running it again with an existing account changes nothing.
"""
import asyncio
from datetime import datetime
from uuid import uuid4

from loguru import logger

from core.config import settings
from core.database import get_db_session, init_db, close_db
from core.logging_config import configure_logging
from domain.entities import User
from domain.enums import UserRole, UserStatus
from domain.value_objects import Email
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.security.password_hasher import BcryptPasswordHasher


async def seed_admin() -> User:
    """Create the configured admin unless the email is already registered"""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        raise SystemExit("ADMIN_EMAIL and ADMIN_PASSWORD must be set")

    await init_db()

    async with get_db_session() as session:
        users = SQLAlchemyUserRepository(session)

        existing = await users.get_by_email(settings.ADMIN_EMAIL.lower())
        if existing:
            logger.info(f"Admin already present: {existing.email} ({existing.role.value})")
            return existing

        now = datetime.utcnow()
        admin = await users.create(User(
            id=uuid4(),
            email=Email(settings.ADMIN_EMAIL),
            password_hash=BcryptPasswordHasher().hash_password(settings.ADMIN_PASSWORD),
            full_name=settings.ADMIN_FULL_NAME,
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        ))
        logger.info(f"Admin created: {admin.email} ({admin.id})")
        return admin


async def main():
    configure_logging()
    try:
        await seed_admin()
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())

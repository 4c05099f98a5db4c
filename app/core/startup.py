"""
Startup utilities for the application.
"""
import logging
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError, ProgrammingError

import app.models.registry  # noqa: F401
from app.core.config import settings
from app.core.database import Base, engine, get_async_session_maker_instance
from app.core.security import get_password_hash
from app.models.enums import Role
from app.models.user import User

logger = logging.getLogger(__name__)


async def ensure_tables() -> None:
    """Create missing tables when AUTO_CREATE_TABLES is on; otherwise Alembic owns the schema."""
    if not settings.AUTO_CREATE_TABLES:
        return
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured (AUTO_CREATE_TABLES)")


async def ensure_default_admin():
    """
    Create the configured default admin when no admin user exists yet.
    Never raises: the application should still start if the database is not migrated.
    """
    session_maker = get_async_session_maker_instance()
    async with session_maker() as session:
        try:
            result = await session.execute(
                select(func.count(User.id)).where(User.role == Role.admin.value)
            )
            admin_count = result.scalar() or 0
            if admin_count:
                logger.info("Found %s admin(s) in database. Skipping default admin creation.", admin_count)
                return

            logger.info("No admin found in database. Creating default admin...")
            session.add(
                User(
                    name=settings.DEFAULT_ADMIN_NAME,
                    email=settings.DEFAULT_ADMIN_EMAIL.strip().lower(),
                    password_hash=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
                    role=Role.admin.value,
                    is_active=True,
                )
            )
            await session.commit()
            logger.info("Default admin created with email: %s", settings.DEFAULT_ADMIN_EMAIL)
        except (OperationalError, ProgrammingError) as e:
            logger.warning(
                "Database error during admin check/creation: %s. "
                "Please ensure database is accessible and run 'alembic upgrade head'.",
                e,
            )

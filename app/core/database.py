from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base

from app.core.config import settings


def get_database_url() -> str:
    """DATABASE_URL, with sslmode=require added for Postgres outside development."""
    db_url = settings.DATABASE_URL
    if db_url.startswith("postgresql") and "sslmode" not in db_url and settings.ENVIRONMENT != "development":
        separator = "&" if "?" in db_url else "?"
        return f"{db_url}{separator}sslmode=require"
    return db_url


def _engine_options(db_url: str) -> dict:
    options = {"echo": settings.ENVIRONMENT == "development"}
    if not db_url.startswith("sqlite"):
        # The reminder cron holds connections across a day of idling.
        options["pool_pre_ping"] = True
    return options


DATABASE_URL = get_database_url()
engine = create_async_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
async_session_maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
Base = declarative_base()


def get_async_session_maker_instance():
    """Session maker used by the reminder sweeps; tests pass their own instead."""
    return async_session_maker

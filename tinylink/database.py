import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from .config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.DATABASE_URL, echo=settings.ENVIRONMENT == "development")
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

class Base(DeclarativeBase):
    pass

async def get_db():
    async with AsyncSessionLocal() as session:
        yield session

async def _connect(create_tables: bool):
    async with engine.begin() as conn:
        if create_tables:
            # Import here so the table is registered on Base.metadata
            from . import models  # noqa: F401
            await conn.run_sync(Base.metadata.create_all)
        else:
            await conn.execute(text("SELECT 1"))

async def init_db() -> bool:
    """Open the shared engine once at startup.

    Returns False instead of raising so the server keeps listening when the
    database is unreachable; store-backed endpoints then answer 500.
    """
    try:
        await asyncio.wait_for(
            _connect(settings.DB_CREATE_TABLES),
            timeout=settings.DB_CONNECT_TIMEOUT,
        )
    except Exception:
        logger.exception("Database connection error")
        return False
    logger.info("Database connected")
    return True

async def close_db():
    await engine.dispose()

# app/database/connection.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from config.appconfig import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, future=True)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


# ============================================================
# ✅ Session Dependency
# ============================================================
async def get_db():
    """Yield one AsyncSession per request."""
    async with AsyncSessionLocal() as session:
        yield session


# ============================================================
# ✅ Create Tables
# ============================================================
async def init_models() -> None:
    """Create all registered tables (development / sqlite bootstrap)."""
    import app.model_registry  # noqa: F401  registers every model on Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✅ Database tables ensured")

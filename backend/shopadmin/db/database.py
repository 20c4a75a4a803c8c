import logging
import uuid
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import DeclarativeBase

from shopadmin.config import Config

logger = logging.getLogger(__name__)


# SQLAlchemy Base for ORM models
class Base(DeclarativeBase):
    pass


def get_async_url(url: str, db_type: str) -> str:
    """Convert database URL to async SQLAlchemy format."""
    db_type = db_type.lower()
    if db_type == "postgresql":
        return url.replace("postgresql://", "postgresql+asyncpg://")
    elif db_type == "mysql":
        return url.replace("mysql://", "mysql+aiomysql://")
    elif db_type == "sqlite":
        return url.replace("sqlite://", "sqlite+aiosqlite://")
    return url


class Database:
    """Owns the async engine and the session factory for the remote store."""

    def __init__(self, url: str | None = None, db_type: str | None = None):
        self.url = url or Config.DATABASE_URL
        self.db_type = db_type or Config.DATABASE_TYPE
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    async def connect(self):
        """Create database engine and session factory."""
        self.engine = create_async_engine(
            get_async_url(self.url, self.db_type),
            echo=False
        )
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def create_tables(self):
        """Create any missing tables."""
        # Register models on Base.metadata
        import shopadmin.models  # noqa: F401

        if not self.engine:
            await self.connect()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ready")

    async def disconnect(self):
        """Close database engine."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None


db = Database()


async def get_session() -> AsyncIterator[AsyncSession]:
    if not db.session_factory:
        await db.connect()

    async with db.session_factory() as session:
        yield session


def generate_id() -> str:
    """New UUID4 primary key as a string."""
    return str(uuid.uuid4())

"""Async database manager for quota-gate (single-DB)."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from quota_gate.common.config import QuotaGateSettings, get_settings
from quota_gate.common.models import Base

# Import all model modules so Base.metadata is complete for create_all().
import quota_gate.users.models  # noqa: F401
import quota_gate.usage.models  # noqa: F401
import quota_gate.content.models  # noqa: F401


class DatabaseManager:
    """Manages a single async database engine."""

    def __init__(self, settings: QuotaGateSettings | None = None):
        self._settings = settings or get_settings()
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    async def init(self) -> None:
        url = self._settings.db_url
        database = make_url(url).database
        if url.startswith("sqlite") and database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_async_engine(url, echo=False)
        self._session_factory = async_sessionmaker(
            self.engine, expire_on_commit=False
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        if self._session_factory is None:
            raise RuntimeError("DatabaseManager not initialized, call init() first")
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        if self.engine is None:
            raise RuntimeError("DatabaseManager not initialized, call init() first")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self._session_factory = None

"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* `kv_store` table – the local key-value store behind onboarding state
* `SqlKeyValueStore` implementing `core.persistence.KeyValueStore`
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Mapping

from sqlalchemy import DateTime, LargeBinary, String, delete, func
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from config import settings

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None


def _create_engine(url: str | None = None) -> AsyncEngine:
    return create_async_engine(url or settings.database_url, pool_pre_ping=True)


def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = _create_engine()
    return _ENGINE


# ───────── declarative base ──────────────────────────────────────────
class Base(AsyncAttrs, DeclarativeBase):
    pass


class KeyValueEntry(Base):
    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )


async def init_db(eng: AsyncEngine | None = None) -> None:
    async with (eng or engine()).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ───────── session helper ────────────────────────────────────────────
@asynccontextmanager
async def get_session(eng: AsyncEngine | None = None) -> AsyncIterator[AsyncSession]:
    async_session = async_sessionmaker(eng or engine(), expire_on_commit=False)
    async with async_session() as session:
        yield session


# ───────── key-value store ───────────────────────────────────────────
class SqlKeyValueStore:
    """Last-write-wins store; one row per key, one transaction per call (`write_many` included)."""

    def __init__(self, eng: AsyncEngine | None = None) -> None:
        self._engine = eng

    async def read(self, key: str) -> bytes | None:
        async with get_session(self._engine) as db:
            row = await db.get(KeyValueEntry, key)
            return None if row is None else bytes(row.value)

    async def write(self, key: str, value: bytes) -> None:
        async with get_session(self._engine) as db:
            await db.merge(KeyValueEntry(key=key, value=bytes(value)))
            await db.commit()

    async def write_many(self, entries: Mapping[str, bytes]) -> None:
        async with get_session(self._engine) as db:
            for key, value in entries.items():
                await db.merge(KeyValueEntry(key=key, value=bytes(value)))
            await db.commit()

    async def delete(self, key: str) -> None:
        async with get_session(self._engine) as db:
            await db.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            await db.commit()

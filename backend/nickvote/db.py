from __future__ import annotations
from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
from sqlalchemy.orm import DeclarativeBase

class Base(DeclarativeBase):
    pass

class Database:
    """Engine plus session factory, owned by the application that built it."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, future=True, echo=echo)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def create_all(self) -> None:
        # ensure models are registered
        import nickvote.models.student, nickvote.models.admin, nickvote.models.vote  # noqa: F401
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    db: Database = request.app.state.db
    async with db.session() as session:
        yield session

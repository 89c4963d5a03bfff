"""Async engine, session factory, and the per-request session dependency.

The API process and the maintenance scripts build their engines with the
same helpers so pool behaviour is identical everywhere.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from codenote.core.config import settings


def build_engine(url: str | None = None) -> AsyncEngine:
    """Create an async engine.

    Args:
        url: Database URL. Defaults to ``settings.database_url``.

    Returns:
        Engine with pre-ping enabled so dropped connections are replaced.
    """
    return create_async_engine(
        url or settings.database_url,
        echo=settings.environment == "development",
        pool_pre_ping=True,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Routes serialize rows after committing, so attributes must not expire
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine()
async_session_factory = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request.

    Routes commit explicitly where a write must be durable before a side
    effect (the email after issuing a code, the cookie after redeeming one).
    Whatever is still pending afterwards is committed here, and any exception
    rolls the session back.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

"""Delete expired login codes.

Expired tokens can never be redeemed, so they only take up space. Run
periodically (cron, scheduled job):

    cd backend
    python -m scripts.purge_expired_login_codes
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from codenote.repositories.login_token_repository import LoginTokenRepository

logger = logging.getLogger(__name__)


async def purge_expired(session: AsyncSession) -> int:
    """Delete expired login tokens.

    Args:
        session: Async database session. The caller commits.

    Returns:
        Number of tokens deleted.
    """
    deleted = await LoginTokenRepository.delete_expired(session)
    logger.info("Purged %d expired login codes", deleted)
    return deleted


async def main() -> None:
    """CLI entry point: purge against the configured database."""
    from codenote.core.database import build_engine, build_session_factory

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = build_engine()
    factory = build_session_factory(engine)

    async with factory() as session:
        await purge_expired(session)
        await session.commit()

    await engine.dispose()


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())

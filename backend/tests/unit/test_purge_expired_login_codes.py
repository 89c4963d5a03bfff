"""Tests for the expired login code purge script."""

from datetime import UTC, datetime, timedelta

from codenote.core.hashing import digest
from codenote.repositories.login_token_repository import LoginTokenRepository
from scripts.purge_expired_login_codes import purge_expired
from tests.conftest import TEST_USER_ID, login_tokens_for


async def test_purges_only_expired(db_session, test_user):
    now = datetime.now(UTC)
    await LoginTokenRepository.create(
        db_session,
        user_id=TEST_USER_ID,
        code_hash=digest("111111"),
        expires_at=now - timedelta(minutes=1),
    )
    await LoginTokenRepository.create(
        db_session,
        user_id=TEST_USER_ID,
        code_hash=digest("222222"),
        expires_at=now + timedelta(minutes=15),
    )
    await db_session.commit()

    deleted = await purge_expired(db_session)
    await db_session.commit()

    assert deleted == 1
    remaining = await login_tokens_for(db_session, TEST_USER_ID)
    assert [t.code_hash for t in remaining] == [digest("222222")]


async def test_nothing_to_purge(db_session):
    assert await purge_expired(db_session) == 0

import datetime
import logging
import typing
import sqlalchemy
import sqlalchemy.ext.asyncio
import hoaxify.config
import hoaxify.models.token
import hoaxify.models.user
import hoaxify.utils

logger = logging.getLogger(__name__)

Token = hoaxify.models.token.Token


def expiry_window() -> datetime.timedelta:
    return datetime.timedelta(days=hoaxify.config.settings.token_expiry_days)


def is_expired(token_obj: Token, now: datetime.datetime) -> bool:
    return token_obj.last_used_at < now - expiry_window()


async def issue(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    user: hoaxify.models.user.User,
    now: typing.Optional[datetime.datetime] = None
) -> str:
    token = hoaxify.utils.random_string(hoaxify.config.settings.token_length)
    session.add(Token(
        token=token,
        user_id=user.id,
        last_used_at=now or hoaxify.utils.utcnow()
    ))
    await session.commit()
    return token


async def authenticate(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    token: typing.Optional[str],
    now: typing.Optional[datetime.datetime] = None
) -> typing.Optional[int]:
    """Resolve a bearer token to its owning user id.

    Returns None for unknown and expired tokens instead of raising, so that
    endpoints with optional authentication keep working. Expired tokens are
    left in place; removing them is the cleanup worker's job. A valid token
    gets its last-used timestamp moved to ``now`` (sliding expiration).
    """
    if not token:
        return None

    now = now or hoaxify.utils.utcnow()
    result = await session.execute(
        sqlalchemy.select(Token).where(Token.token == token)
    )
    token_obj = result.scalar_one_or_none()
    if token_obj is None:
        return None

    if is_expired(token_obj, now):
        logger.debug(f"Rejected expired token for user {token_obj.user_id}")
        return None

    token_obj.last_used_at = now
    await session.commit()
    return token_obj.user_id


async def revoke(session: sqlalchemy.ext.asyncio.AsyncSession, token: str) -> None:
    await session.execute(
        sqlalchemy.delete(Token).where(Token.token == token)
    )
    await session.commit()


async def revoke_all_for_user(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    user_id: int,
    commit: bool = True
) -> int:
    result = await session.execute(
        sqlalchemy.delete(Token).where(Token.user_id == user_id)
    )
    if commit:
        await session.commit()
    return result.rowcount


async def sweep_expired(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    now: typing.Optional[datetime.datetime] = None
) -> int:
    cutoff = (now or hoaxify.utils.utcnow()) - expiry_window()
    result = await session.execute(
        sqlalchemy.delete(Token).where(Token.last_used_at < cutoff)
    )
    await session.commit()
    return result.rowcount

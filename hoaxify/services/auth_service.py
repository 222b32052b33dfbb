import typing
import logging
import sqlalchemy
import sqlalchemy.ext.asyncio
from sqlalchemy import select
import hoaxify.errors
import hoaxify.models.user
import hoaxify.services.token_service
import hoaxify.utils

logger = logging.getLogger(__name__)


async def login(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    email: typing.Optional[str],
    password: typing.Optional[str]
) -> typing.Tuple[hoaxify.models.user.User, str]:
    if not email or not password:
        raise hoaxify.errors.Unauthenticated("Incorrect credentials")

    result = await session.execute(
        select(hoaxify.models.user.User).filter(hoaxify.models.user.User.email == email)
    )
    user = result.scalar_one_or_none()

    if not user or not hoaxify.utils.verify_password(password, user.password_hash):
        raise hoaxify.errors.Unauthenticated("Incorrect credentials")

    if user.inactive:
        raise hoaxify.errors.Forbidden("Account is inactive")

    token = await hoaxify.services.token_service.issue(session, user)
    logger.info(f"User {user.id} logged in")
    return user, token


async def logout(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    token: typing.Optional[str]
) -> None:
    if not token:
        return
    await hoaxify.services.token_service.revoke(session, token)

import typing
import logging
import fastapi
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import sqlalchemy.ext.asyncio
import hoaxify.database
import hoaxify.services.token_service

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: typing.Optional[HTTPAuthorizationCredentials] = fastapi.Depends(_bearer_scheme)
) -> typing.Optional[str]:
    if not credentials:
        return None
    return credentials.credentials


async def get_current_user_optional(
    token: typing.Optional[str] = fastapi.Depends(get_bearer_token),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
) -> typing.Optional[int]:
    """Acting user id for the request, or None when unauthenticated.

    Never rejects the request; each route decides how to treat anonymous
    callers. A valid token is refreshed as a side effect.
    """
    if not token:
        return None

    user_id = await hoaxify.services.token_service.authenticate(session, token)
    if user_id is None:
        logger.debug("Request carried an unknown or expired token")
    return user_id

import logging
import typing
import fastapi
import sqlalchemy.ext.asyncio
import hoaxify.database
import hoaxify.middleware.auth
import hoaxify.middleware.rate_limit
import hoaxify.schemas.requests
import hoaxify.schemas.responses
import hoaxify.services.auth_service
import hoaxify.utils.responses

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(prefix="/api/1.0", tags=["Auth"])

limiter = hoaxify.middleware.rate_limit.limiter


@router.post(
    "/auth",
    response_model=hoaxify.schemas.responses.AuthResponse,
    summary="Log in",
    description="""
    Authenticate with email and password and open a new session.

    Every login issues a new opaque token; earlier sessions stay valid. A token
    expires after 7 days without use. Send it as `Authorization: Bearer <token>`.
    """,
    responses={
        401: {"description": "Incorrect credentials"},
        403: {"description": "Account is inactive"},
    }
)
@limiter.limit(hoaxify.middleware.rate_limit.get_auth_limit())
async def login(
    request: fastapi.Request,
    body: hoaxify.schemas.requests.LoginRequest,
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    user, token = await hoaxify.services.auth_service.login(session, body.email, body.password)
    return hoaxify.utils.responses.success_response({
        "id": user.id,
        "username": user.username,
        "image": user.image,
        "token": token,
    })


@router.post(
    "/logout",
    summary="Log out",
    description="Revokes the presented token. Succeeds even when no valid token is sent."
)
async def logout(
    token: typing.Optional[str] = fastapi.Depends(hoaxify.middleware.auth.get_bearer_token),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    await hoaxify.services.auth_service.logout(session, token)
    return hoaxify.utils.responses.success_response({"message": "Logged out"})

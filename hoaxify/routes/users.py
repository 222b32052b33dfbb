import logging
import typing
import fastapi
import sqlalchemy.ext.asyncio
import hoaxify.database
import hoaxify.errors
import hoaxify.middleware.auth
import hoaxify.middleware.pagination
import hoaxify.middleware.rate_limit
import hoaxify.schemas.requests
import hoaxify.schemas.responses
import hoaxify.services.delete_service
import hoaxify.services.user_service
import hoaxify.utils.responses

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(prefix="/api/1.0", tags=["Users"])

limiter = hoaxify.middleware.rate_limit.limiter

current_user_optional = hoaxify.middleware.auth.get_current_user_optional


@router.post(
    "/users",
    summary="Register a new user",
    description="""
    Create an inactive account and e-mail an activation token to it.

    **Constraints:**
    - `username`: 4–32 characters
    - `email`: valid address, not in use
    - `password`: at least 6 characters with one uppercase, one lowercase letter and one digit
    """,
    responses={
        400: {"description": "Validation failure"},
        502: {"description": "Activation e-mail could not be sent, nothing was stored"},
    }
)
async def register(
    body: hoaxify.schemas.requests.RegisterRequest,
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    await hoaxify.services.user_service.register(session, body.username, body.email, body.password)
    return hoaxify.utils.responses.success_response({"message": "User created"})


@router.post("/users/token/{token}", summary="Activate an account")
async def activate(
    token: str,
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    await hoaxify.services.user_service.activate(session, token)
    return hoaxify.utils.responses.success_response({"message": "Account is activated"})


@router.get(
    "/users",
    response_model=hoaxify.schemas.responses.UserPageResponse,
    summary="List active users",
    description="Pages through active users. An authenticated caller is left out of the listing."
)
async def list_users(
    pagination: hoaxify.middleware.pagination.Page = fastapi.Depends(hoaxify.middleware.pagination.get_pagination),
    user_id: typing.Optional[int] = fastapi.Depends(current_user_optional),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    page = await hoaxify.services.user_service.get_users(
        session, pagination.page, pagination.size, exclude_user_id=user_id
    )
    return hoaxify.utils.responses.success_response(page)


@router.get("/users/{user_id}", summary="Get an active user")
async def get_user(
    user_id: int,
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    user = await hoaxify.services.user_service.get_active_user(session, user_id)
    return hoaxify.utils.responses.success_response(hoaxify.services.user_service.to_public_dict(user))


@router.put(
    "/users/{user_id}",
    summary="Update own profile",
    responses={403: {"description": "Not authenticated as this user"}}
)
async def update_user(
    user_id: int,
    body: hoaxify.schemas.requests.UserUpdateRequest,
    requester_id: typing.Optional[int] = fastapi.Depends(current_user_optional),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    user = await hoaxify.services.user_service.update_user(
        session, user_id, requester_id, body.username, body.image
    )
    return hoaxify.utils.responses.success_response(hoaxify.services.user_service.to_public_dict(user))


@router.delete(
    "/users/{user_id}",
    summary="Delete own account",
    description="""
    Removes the account together with its sessions, hoaxes, attachments and
    stored files. Deleting an account that is already gone succeeds.
    """,
    responses={403: {"description": "Not authenticated as this user"}}
)
async def delete_user(
    user_id: int,
    requester_id: typing.Optional[int] = fastapi.Depends(current_user_optional),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    await hoaxify.services.delete_service.delete_user(session, user_id, requester_id)
    return hoaxify.utils.responses.success_response({"message": "User is deleted"})


@router.post(
    "/user/password",
    summary="Request a password reset",
    responses={404: {"description": "Unknown e-mail"}, 502: {"description": "E-mail failure"}}
)
@limiter.limit(hoaxify.middleware.rate_limit.get_auth_limit())
async def password_reset_request(
    request: fastapi.Request,
    body: hoaxify.schemas.requests.PasswordResetRequest,
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    await hoaxify.services.user_service.password_reset_request(session, body.email)
    return hoaxify.utils.responses.success_response({"message": "Check your e-mail for resetting your password"})


@router.put(
    "/user/password",
    summary="Set a new password",
    description="Requires the e-mailed reset token. Activates the account and ends every open session.",
    responses={403: {"description": "Unknown reset token"}}
)
async def update_password(
    body: hoaxify.schemas.requests.PasswordUpdateRequest,
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    await hoaxify.services.user_service.update_password(session, body.password_reset_token, body.password)
    return hoaxify.utils.responses.success_response({"message": "Password updated"})

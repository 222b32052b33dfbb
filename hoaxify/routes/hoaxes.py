import logging
import typing
import fastapi
import sqlalchemy.ext.asyncio
import hoaxify.config
import hoaxify.database
import hoaxify.errors
import hoaxify.middleware.auth
import hoaxify.middleware.pagination
import hoaxify.schemas.requests
import hoaxify.schemas.responses
import hoaxify.services.attachment_service
import hoaxify.services.delete_service
import hoaxify.services.hoax_service
import hoaxify.utils.responses

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(prefix="/api/1.0", tags=["Hoaxes"])

current_user_optional = hoaxify.middleware.auth.get_current_user_optional


@router.post(
    "/hoaxes",
    summary="Submit a hoax",
    description="""
    Posts a hoax for the authenticated user. `file_attachment` may reference an
    id returned by `POST /api/1.0/hoaxes/attachments`; unknown or already used
    ids are ignored.
    """,
    responses={401: {"description": "Authentication required"}}
)
async def submit_hoax(
    body: hoaxify.schemas.requests.HoaxSubmitRequest,
    user_id: typing.Optional[int] = fastapi.Depends(current_user_optional),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    if user_id is None:
        raise hoaxify.errors.Unauthenticated("You are not authorized to post hoax")

    await hoaxify.services.hoax_service.save(session, body.content, user_id, body.file_attachment)
    return hoaxify.utils.responses.success_response({"message": "Hoax is saved"})


@router.get(
    "/hoaxes",
    response_model=hoaxify.schemas.responses.HoaxPageResponse,
    summary="List hoaxes, newest first"
)
async def list_hoaxes(
    pagination: hoaxify.middleware.pagination.Page = fastapi.Depends(hoaxify.middleware.pagination.get_pagination),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    page = await hoaxify.services.hoax_service.get_hoaxes(session, pagination.page, pagination.size)
    return hoaxify.utils.responses.success_response(page)


@router.get(
    "/users/{user_id}/hoaxes",
    response_model=hoaxify.schemas.responses.HoaxPageResponse,
    summary="List a user's hoaxes, newest first",
    responses={404: {"description": "User not found"}}
)
async def list_user_hoaxes(
    user_id: int,
    pagination: hoaxify.middleware.pagination.Page = fastapi.Depends(hoaxify.middleware.pagination.get_pagination),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    page = await hoaxify.services.hoax_service.get_hoaxes(
        session, pagination.page, pagination.size, user_id=user_id
    )
    return hoaxify.utils.responses.success_response(page)


@router.delete(
    "/hoaxes/{hoax_id}",
    summary="Delete own hoax",
    description="Removes the hoax with its attachment row and stored file.",
    responses={403: {"description": "Not the owner, or the hoax does not exist"}}
)
async def delete_hoax(
    hoax_id: int,
    requester_id: typing.Optional[int] = fastapi.Depends(current_user_optional),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    await hoaxify.services.delete_service.delete_hoax(session, hoax_id, requester_id)
    return hoaxify.utils.responses.success_response({"message": "Hoax is deleted"})


@router.post(
    "/hoaxes/attachments",
    response_model=hoaxify.schemas.responses.AttachmentCreatedResponse,
    summary="Upload a hoax attachment",
    description="""
    Stores a file of up to 5MB and returns its id. Attachments that are not
    referenced by a hoax within 24 hours are removed.
    """,
    responses={400: {"description": "File too large"}}
)
async def upload_attachment(
    file: fastapi.UploadFile = fastapi.File(...),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    content = await file.read()
    if len(content) > hoaxify.config.settings.max_attachment_bytes:
        raise hoaxify.errors.ValidationFailed(
            {"file": "Uploaded file cannot be bigger than 5MB"},
            message="Uploaded file cannot be bigger than 5MB"
        )

    attachment_id = await hoaxify.services.attachment_service.save_attachment(session, content)
    return hoaxify.utils.responses.success_response({"id": attachment_id})

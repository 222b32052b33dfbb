import logging
import math
import typing
import sqlalchemy
import sqlalchemy.ext.asyncio
from sqlalchemy import select
import hoaxify.config
import hoaxify.errors
import hoaxify.models.user
import hoaxify.schemas.requests
import hoaxify.services.email_service
import hoaxify.services.storage
import hoaxify.services.token_service
import hoaxify.utils

logger = logging.getLogger(__name__)

User = hoaxify.models.user.User

_TOKEN_LENGTH = 16


def to_public_dict(user: User) -> typing.Dict[str, typing.Any]:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "image": user.image,
    }


def page_dict(content: typing.List[typing.Any], page: int, size: int, total: int) -> typing.Dict[str, typing.Any]:
    return {
        "content": content,
        "page": page,
        "size": size,
        "total_pages": math.ceil(total / size) if size else 0,
    }


async def find_by_email(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    email: str
) -> typing.Optional[User]:
    result = await session.execute(select(User).filter(User.email == email))
    return result.scalar_one_or_none()


async def register(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    username: str,
    email: str,
    password: str
) -> User:
    if await find_by_email(session, email):
        raise hoaxify.errors.ValidationFailed({"email": "E-mail in use"})

    user = User(
        username=username,
        email=email,
        password_hash=hoaxify.utils.hash_password(password),
        inactive=True,
        activation_token=hoaxify.utils.random_string(_TOKEN_LENGTH)
    )
    session.add(user)
    await session.flush()

    try:
        await hoaxify.services.email_service.send_account_activation(user.email, user.activation_token)
    except hoaxify.errors.EmailFailure:
        await session.rollback()
        raise

    await session.commit()
    logger.info(f"Registered user {user.id}")
    return user


async def activate(session: sqlalchemy.ext.asyncio.AsyncSession, token: str) -> None:
    result = await session.execute(select(User).filter(User.activation_token == token))
    user = result.scalar_one_or_none()
    if not user:
        raise hoaxify.errors.InvalidToken("This account is either active or the token is invalid")

    user.inactive = False
    user.activation_token = None
    await session.commit()


async def get_users(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    page: int,
    size: int,
    exclude_user_id: typing.Optional[int] = None
) -> typing.Dict[str, typing.Any]:
    conditions = [User.inactive == False]
    if exclude_user_id is not None:
        conditions.append(User.id != exclude_user_id)

    count_result = await session.execute(
        select(sqlalchemy.func.count()).select_from(User).where(*conditions)
    )
    total = count_result.scalar_one()

    result = await session.execute(
        select(User).where(*conditions).order_by(User.id).limit(size).offset(page * size)
    )
    users = result.scalars().all()

    return page_dict([to_public_dict(u) for u in users], page, size, total)


async def get_active_user(session: sqlalchemy.ext.asyncio.AsyncSession, user_id: int) -> User:
    result = await session.execute(
        select(User).filter(User.id == user_id, User.inactive == False)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise hoaxify.errors.NotFound("User not found")
    return user


async def update_user(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    user_id: int,
    requester_id: typing.Optional[int],
    username: str,
    image: typing.Optional[str] = None
) -> User:
    if requester_id is None or requester_id != user_id:
        raise hoaxify.errors.Forbidden("You are not authorized to update user")

    result = await session.execute(select(User).filter(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise hoaxify.errors.Forbidden("You are not authorized to update user")

    previous_image = None
    if image:
        content = hoaxify.services.storage.decode_base64(image)
        if len(content) > hoaxify.config.settings.max_profile_image_bytes:
            raise hoaxify.errors.ValidationFailed({"image": "Your profile image cannot be bigger than 2MB"})
        if not hoaxify.services.storage.is_supported_image(content):
            raise hoaxify.errors.ValidationFailed({"image": "Only JPEG or PNG files are allowed"})

        previous_image = user.image
        user.image = await hoaxify.services.storage.save_profile_image(content)

    user.username = username
    await session.commit()

    if previous_image:
        await hoaxify.services.storage.discard_file(
            hoaxify.services.storage.profile_folder(),
            previous_image
        )
    return user


async def password_reset_request(session: sqlalchemy.ext.asyncio.AsyncSession, email: str) -> None:
    user = await find_by_email(session, email)
    if not user:
        raise hoaxify.errors.NotFound("E-mail not found")

    user.password_reset_token = hoaxify.utils.random_string(_TOKEN_LENGTH)
    await session.commit()

    await hoaxify.services.email_service.send_password_reset(email, user.password_reset_token)


async def update_password(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    password_reset_token: typing.Optional[str],
    password: typing.Optional[str]
) -> None:
    user = None
    if password_reset_token:
        result = await session.execute(
            select(User).filter(User.password_reset_token == password_reset_token)
        )
        user = result.scalar_one_or_none()
    if not user:
        raise hoaxify.errors.Forbidden(
            "You are not authorized to update your password. Please follow the password reset steps again."
        )

    try:
        hoaxify.schemas.requests.validate_password(password)
    except ValueError as e:
        raise hoaxify.errors.ValidationFailed({"password": str(e)})

    user.password_hash = hoaxify.utils.hash_password(password)
    user.password_reset_token = None
    user.inactive = False
    user.activation_token = None
    revoked = await hoaxify.services.token_service.revoke_all_for_user(session, user.id, commit=False)
    await session.commit()
    logger.info(f"Password reset for user {user.id}, {revoked} sessions revoked")

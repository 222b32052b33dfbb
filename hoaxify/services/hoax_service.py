import logging
import typing
import sqlalchemy
import sqlalchemy.ext.asyncio
from sqlalchemy import select
import hoaxify.models.attachment
import hoaxify.models.hoax
import hoaxify.models.user
import hoaxify.services.attachment_service
import hoaxify.services.user_service
import hoaxify.utils

logger = logging.getLogger(__name__)

Hoax = hoaxify.models.hoax.Hoax
User = hoaxify.models.user.User
FileAttachment = hoaxify.models.attachment.FileAttachment


async def save(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    content: str,
    user_id: int,
    attachment_id: typing.Optional[int] = None
) -> Hoax:
    hoax = Hoax(
        content=content,
        timestamp=hoaxify.utils.epoch_millis(),
        user_id=user_id
    )
    session.add(hoax)
    await session.flush()

    if attachment_id is not None:
        await hoaxify.services.attachment_service.associate(session, attachment_id, hoax.id, commit=False)

    await session.commit()
    return hoax


async def get_hoax(session: sqlalchemy.ext.asyncio.AsyncSession, hoax_id: int) -> typing.Optional[Hoax]:
    result = await session.execute(select(Hoax).filter(Hoax.id == hoax_id))
    return result.scalar_one_or_none()


async def get_hoaxes(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    page: int,
    size: int,
    user_id: typing.Optional[int] = None
) -> typing.Dict[str, typing.Any]:
    conditions = []
    if user_id is not None:
        await hoaxify.services.user_service.get_active_user(session, user_id)
        conditions.append(Hoax.user_id == user_id)

    count_result = await session.execute(
        select(sqlalchemy.func.count()).select_from(Hoax).where(*conditions)
    )
    total = count_result.scalar_one()

    result = await session.execute(
        select(Hoax, User)
        .join(User, User.id == Hoax.user_id)
        .where(*conditions)
        .order_by(Hoax.id.desc())
        .limit(size)
        .offset(page * size)
    )
    rows = result.all()

    attachments: typing.Dict[int, FileAttachment] = {}
    hoax_ids = [hoax.id for hoax, _ in rows]
    if hoax_ids:
        attachment_result = await session.execute(
            select(FileAttachment)
            .where(FileAttachment.hoax_id.in_(hoax_ids))
            .order_by(FileAttachment.id)
        )
        for attachment in attachment_result.scalars().all():
            attachments.setdefault(attachment.hoax_id, attachment)

    content = []
    for hoax, user in rows:
        item = {
            "id": hoax.id,
            "content": hoax.content,
            "timestamp": hoax.timestamp,
            "user": hoaxify.services.user_service.to_public_dict(user),
        }
        attachment = attachments.get(hoax.id)
        if attachment:
            item["file_attachment"] = {
                "filename": attachment.filename,
                "file_type": attachment.file_type,
            }
        content.append(item)

    return hoaxify.services.user_service.page_dict(content, page, size, total)

import datetime
import logging
import typing
import sqlalchemy
import sqlalchemy.ext.asyncio
import hoaxify.errors
import hoaxify.models.attachment
import hoaxify.services.storage
import hoaxify.utils

logger = logging.getLogger(__name__)

FileAttachment = hoaxify.models.attachment.FileAttachment


async def create(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    filename: str,
    file_type: typing.Optional[str],
    upload_date: datetime.datetime
) -> int:
    attachment = FileAttachment(
        filename=filename,
        file_type=file_type,
        upload_date=upload_date
    )
    session.add(attachment)
    await session.commit()
    return attachment.id


async def save_attachment(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    content: bytes,
    now: typing.Optional[datetime.datetime] = None
) -> int:
    filename = hoaxify.utils.random_string(hoaxify.services.storage.STORED_NAME_LENGTH)
    file_type = None
    detected = hoaxify.services.storage.detect_type(content)
    if detected:
        file_type, extension = detected
        filename = f"{filename}.{extension}"

    folder = hoaxify.services.storage.attachment_folder()
    await hoaxify.services.storage.write_file(folder, filename, content)

    try:
        attachment_id = await create(session, filename, file_type, now or hoaxify.utils.utcnow())
    except Exception:
        await session.rollback()
        await hoaxify.services.storage.discard_file(folder, filename)
        raise

    logger.info(f"Stored attachment {attachment_id} as {filename} ({file_type or 'unknown type'})")
    return attachment_id


async def associate(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    attachment_id: int,
    hoax_id: int,
    commit: bool = True
) -> bool:
    """Bind an unassociated attachment to a hoax.

    The update only matches while hoax_id is still NULL, so the first
    association is permanent and a missing attachment id is a no-op.
    """
    result = await session.execute(
        sqlalchemy.update(FileAttachment)
        .where(
            FileAttachment.id == attachment_id,
            FileAttachment.hoax_id.is_(None)
        )
        .values(hoax_id=hoax_id)
        .execution_options(synchronize_session=False)
    )
    if commit:
        await session.commit()

    bound = result.rowcount == 1
    if not bound:
        logger.debug(f"Attachment {attachment_id} not bound to hoax {hoax_id}: missing or already associated")
    return bound


async def find_for_hoax(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    hoax_id: int
) -> typing.List[FileAttachment]:
    result = await session.execute(
        sqlalchemy.select(FileAttachment).where(FileAttachment.hoax_id == hoax_id)
    )
    return list(result.scalars().all())


async def find_orphans_older_than(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    cutoff: datetime.datetime
) -> typing.List[FileAttachment]:
    result = await session.execute(
        sqlalchemy.select(FileAttachment)
        .where(
            FileAttachment.hoax_id.is_(None),
            FileAttachment.upload_date < cutoff
        )
        .order_by(FileAttachment.id)
    )
    return list(result.scalars().all())


async def delete_with_file(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    attachment: FileAttachment,
    commit: bool = True
) -> bool:
    """Remove the stored file, then the row.

    Returns False when the file could not be removed; the row is deleted
    either way. Database errors propagate.
    """
    file_gone = await hoaxify.services.storage.discard_file(
        hoaxify.services.storage.attachment_folder(),
        attachment.filename
    )
    await session.execute(
        sqlalchemy.delete(FileAttachment).where(FileAttachment.id == attachment.id)
    )
    if commit:
        await session.commit()
    return file_gone


async def delete_if_orphaned(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    attachment_id: int,
    filename: str,
    cutoff: datetime.datetime
) -> bool:
    """Delete an attachment only if it is still unassociated and older than cutoff.

    The row goes first through a conditional delete; the file is removed
    only once that delete has committed. An association that lands after
    the orphan query therefore keeps both row and file.
    """
    result = await session.execute(
        sqlalchemy.delete(FileAttachment)
        .where(
            FileAttachment.id == attachment_id,
            FileAttachment.hoax_id.is_(None),
            FileAttachment.upload_date < cutoff
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await session.rollback()
        return False

    await session.commit()
    await hoaxify.services.storage.discard_file(
        hoaxify.services.storage.attachment_folder(),
        filename
    )
    return True

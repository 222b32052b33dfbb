"""Cascading deletes for users and hoaxes.

The database and the upload folders cannot share a transaction. Rows are
authoritative: every database change of one delete is committed together
at the end, and any database error rolls the whole delete back and
propagates. Attachment files are removed along the way, the profile image
only once the commit has succeeded. Both are best-effort: a file that is
already gone counts as removed, any other failure is logged and reported
but never blocks the delete. Dependents are always removed before
their parent row.
"""
import dataclasses
import logging
import typing
import sqlalchemy
import sqlalchemy.exc
import sqlalchemy.ext.asyncio
from sqlalchemy import select
import hoaxify.errors
import hoaxify.models.hoax
import hoaxify.models.user
import hoaxify.services.attachment_service
import hoaxify.services.storage
import hoaxify.services.token_service

logger = logging.getLogger(__name__)

Hoax = hoaxify.models.hoax.Hoax
User = hoaxify.models.user.User


@dataclasses.dataclass
class DeleteReport:
    deleted: bool = False
    hoaxes_removed: int = 0
    attachments_removed: int = 0
    tokens_revoked: int = 0
    files_failed: int = 0


async def _delete_hoax_rows(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    hoax: Hoax,
    report: DeleteReport
) -> None:
    attachments = await hoaxify.services.attachment_service.find_for_hoax(session, hoax.id)
    for attachment in attachments:
        file_gone = await hoaxify.services.attachment_service.delete_with_file(
            session, attachment, commit=False
        )
        report.attachments_removed += 1
        if not file_gone:
            report.files_failed += 1

    await session.execute(sqlalchemy.delete(Hoax).where(Hoax.id == hoax.id))
    report.hoaxes_removed += 1


async def delete_user(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    user_id: int,
    requester_id: typing.Optional[int]
) -> DeleteReport:
    if requester_id is None or requester_id != user_id:
        raise hoaxify.errors.Forbidden("You are not authorized to delete user")

    report = DeleteReport()
    result = await session.execute(select(User).filter(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        logger.info(f"User {user_id} already deleted")
        return report

    image = user.image
    try:
        hoax_result = await session.execute(select(Hoax).filter(Hoax.user_id == user_id))
        for hoax in hoax_result.scalars().all():
            await _delete_hoax_rows(session, hoax, report)

        report.tokens_revoked = await hoaxify.services.token_service.revoke_all_for_user(
            session, user_id, commit=False
        )

        await session.execute(sqlalchemy.delete(User).where(User.id == user_id))
        await session.commit()
    except sqlalchemy.exc.SQLAlchemyError:
        await session.rollback()
        logger.error(f"Deleting user {user_id} failed, database changes rolled back")
        raise

    if image:
        image_gone = await hoaxify.services.storage.discard_file(
            hoaxify.services.storage.profile_folder(),
            image
        )
        if not image_gone:
            report.files_failed += 1

    report.deleted = True
    if report.files_failed:
        logger.warning(f"User {user_id} deleted with {report.files_failed} stored files left behind")
    logger.info(
        f"Deleted user {user_id}: {report.hoaxes_removed} hoaxes, "
        f"{report.attachments_removed} attachments, {report.tokens_revoked} tokens"
    )
    return report


async def delete_hoax(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    hoax_id: int,
    requester_id: typing.Optional[int]
) -> DeleteReport:
    # A missing hoax is reported like a foreign one so existence is not leaked.
    if requester_id is None:
        raise hoaxify.errors.Forbidden("You are not authorized to delete this hoax")

    result = await session.execute(select(Hoax).filter(Hoax.id == hoax_id))
    hoax = result.scalar_one_or_none()
    if hoax is None or hoax.user_id != requester_id:
        raise hoaxify.errors.Forbidden("You are not authorized to delete this hoax")

    report = DeleteReport()
    try:
        await _delete_hoax_rows(session, hoax, report)
        await session.commit()
    except sqlalchemy.exc.SQLAlchemyError:
        await session.rollback()
        logger.error(f"Deleting hoax {hoax_id} failed, database changes rolled back")
        raise

    report.deleted = True
    if report.files_failed:
        logger.warning(f"Hoax {hoax_id} deleted with {report.files_failed} stored files left behind")
    return report

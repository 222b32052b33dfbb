import asyncio
import datetime
import logging
import typing
import sqlalchemy.ext.asyncio
import hoaxify.config
import hoaxify.services.attachment_service
import hoaxify.utils
import hoaxify.workers.periodic

logger = logging.getLogger(__name__)


def retention_cutoff(now: datetime.datetime) -> datetime.datetime:
    return now - datetime.timedelta(hours=hoaxify.config.settings.attachment_retention_hours)


async def reap_orphaned_attachments(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    now: typing.Optional[datetime.datetime] = None
) -> int:
    cutoff = retention_cutoff(now or hoaxify.utils.utcnow())
    # copied out since a lost race rolls back the session and expires loaded rows
    orphans = [
        (attachment.id, attachment.filename)
        for attachment in await hoaxify.services.attachment_service.find_orphans_older_than(session, cutoff)
    ]

    removed = 0
    for attachment_id, filename in orphans:
        if await hoaxify.services.attachment_service.delete_if_orphaned(session, attachment_id, filename, cutoff):
            removed += 1
        else:
            logger.info(f"Attachment {attachment_id} was associated during the sweep, keeping it")
    return removed


async def run_attachment_reaper_loop(
    shutdown_event: asyncio.Event,
    interval_seconds: typing.Optional[float] = None,
    clock: typing.Optional[typing.Callable[[], datetime.datetime]] = None,
    session_factory: typing.Optional[typing.Callable] = None
) -> None:
    if interval_seconds is None:
        interval_seconds = hoaxify.config.settings.attachment_cleanup_interval_hours * 3600

    await hoaxify.workers.periodic.run_periodic(
        "Attachment reaper",
        reap_orphaned_attachments,
        shutdown_event,
        interval_seconds,
        clock=clock,
        session_factory=session_factory
    )

import asyncio
import datetime
import logging
import typing
import sqlalchemy.ext.asyncio
import hoaxify.database
import hoaxify.utils

logger = logging.getLogger(__name__)

Sweep = typing.Callable[
    [sqlalchemy.ext.asyncio.AsyncSession, datetime.datetime],
    typing.Awaitable[int]
]


async def run_periodic(
    name: str,
    sweep: Sweep,
    shutdown_event: asyncio.Event,
    interval_seconds: float,
    clock: typing.Optional[typing.Callable[[], datetime.datetime]] = None,
    session_factory: typing.Optional[typing.Callable] = None
) -> None:
    """Run ``sweep`` every ``interval_seconds`` until shutdown.

    The next wait only starts once the current sweep has returned, so runs
    never overlap. A failing sweep is logged and retried on the next tick.
    """
    clock = clock or hoaxify.utils.utcnow
    logger.info(f"{name} task started (every {interval_seconds:.0f}s)")

    while not shutdown_event.is_set():
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval_seconds)
            break
        except asyncio.TimeoutError:
            pass
        except asyncio.CancelledError:
            break

        try:
            factory = session_factory or hoaxify.database.async_session_maker
            async with factory() as session:
                removed = await sweep(session, clock())
            logger.info(f"{name} done: {removed} removed")
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.error(f"{name} failed: {str(e)}")

    logger.info(f"{name} task stopped")

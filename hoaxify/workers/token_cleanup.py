import asyncio
import datetime
import typing
import hoaxify.config
import hoaxify.services.token_service
import hoaxify.workers.periodic


async def run_token_cleanup_loop(
    shutdown_event: asyncio.Event,
    interval_seconds: typing.Optional[float] = None,
    clock: typing.Optional[typing.Callable[[], datetime.datetime]] = None,
    session_factory: typing.Optional[typing.Callable] = None
) -> None:
    if interval_seconds is None:
        interval_seconds = hoaxify.config.settings.token_cleanup_interval_hours * 3600

    await hoaxify.workers.periodic.run_periodic(
        "Token cleanup",
        hoaxify.services.token_service.sweep_expired,
        shutdown_event,
        interval_seconds,
        clock=clock,
        session_factory=session_factory
    )

import asyncio
import contextlib
import datetime
import logging
import sys
import typing
import fastapi
import fastapi.exceptions
import sqlalchemy.exc
import uvicorn
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import hoaxify.config
import hoaxify.database
import hoaxify.errors
import hoaxify.middleware.logging as logging_middleware
import hoaxify.middleware.rate_limit as rate_limit_middleware
import hoaxify.routes.auth
import hoaxify.routes.health
import hoaxify.routes.hoaxes
import hoaxify.routes.users
import hoaxify.services.storage
import hoaxify.utils.responses
import hoaxify.workers.attachment_reaper
import hoaxify.workers.token_cleanup

settings = hoaxify.config.settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


def start_background_tasks(shutdown_event: asyncio.Event) -> typing.List[asyncio.Task]:
    tasks = []
    if settings.token_cleanup_enabled:
        tasks.append(asyncio.create_task(
            hoaxify.workers.token_cleanup.run_token_cleanup_loop(shutdown_event)
        ))
    if settings.attachment_cleanup_enabled:
        tasks.append(asyncio.create_task(
            hoaxify.workers.attachment_reaper.run_attachment_reaper_loop(shutdown_event)
        ))
    return tasks


async def stop_background_tasks(shutdown_event: asyncio.Event, tasks: typing.List[asyncio.Task]) -> None:
    shutdown_event.set()
    if not tasks:
        return

    _, pending = await asyncio.wait(tasks, timeout=5)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


@contextlib.asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    logger.info("Starting Hoaxify service...")
    await hoaxify.database.init_db()
    hoaxify.services.storage.create_folders()

    shutdown_event = asyncio.Event()
    tasks = start_background_tasks(shutdown_event)
    logger.info("Hoaxify service started successfully")

    yield

    logger.info("Shutting down Hoaxify service...")
    await stop_background_tasks(shutdown_event, tasks)
    await hoaxify.database.close_db()
    logger.info("Hoaxify service shut down successfully")


def _error_details(request: fastapi.Request, extra: typing.Dict[str, typing.Any] = None) -> typing.Dict[str, typing.Any]:
    details = {
        "path": request.url.path,
        "timestamp": int(datetime.datetime.now().timestamp() * 1000),
    }
    if extra:
        details.update(extra)
    return details


async def handle_hoaxify_error(request: fastapi.Request, exc: hoaxify.errors.HoaxifyError):
    return hoaxify.utils.responses.error_response(
        code=exc.code,
        message=exc.message,
        details=_error_details(request, exc.details),
        status_code=exc.status_code
    )


async def handle_validation_error(request: fastapi.Request, exc: fastapi.exceptions.RequestValidationError):
    validation_errors = {}
    for error in exc.errors():
        field = str(error["loc"][-1]) if error.get("loc") else "body"
        validation_errors.setdefault(field, error.get("msg", "Invalid value"))
    return hoaxify.utils.responses.error_response(
        code="VALIDATION_FAILURE",
        message="Validation Failure",
        details=_error_details(request, {"validation_errors": validation_errors}),
        status_code=400
    )


async def handle_database_error(request: fastapi.Request, exc: sqlalchemy.exc.SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {str(exc)}")
    return hoaxify.utils.responses.error_response(
        code="PERSISTENCE_FAILURE",
        message="An unexpected error occurred",
        details=_error_details(request),
        status_code=500
    )


app = fastapi.FastAPI(
    title="Hoaxify API",
    description="""
    ## Hoaxify Service

    Backend for the Hoaxify short-post application.

    ### Features

    - Registration with e-mail activation and password reset
    - Session tokens with sliding 7-day expiry
    - Hoaxes with optional file attachments
    - Account and hoax deletion with cleanup of stored files
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

logging_middleware.setup_logging_middleware(app)

app.state.limiter = rate_limit_middleware.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(hoaxify.errors.HoaxifyError, handle_hoaxify_error)
app.add_exception_handler(fastapi.exceptions.RequestValidationError, handle_validation_error)
app.add_exception_handler(sqlalchemy.exc.SQLAlchemyError, handle_database_error)

app.include_router(hoaxify.routes.health.router)
app.include_router(hoaxify.routes.auth.router)
app.include_router(hoaxify.routes.users.router)
app.include_router(hoaxify.routes.hoaxes.router)


if __name__ == "__main__":
    uvicorn.run(
        "hoaxify.main:app",
        host=settings.http_host,
        port=settings.http_port,
        workers=settings.http_workers,
        log_level=settings.log_level.lower(),
        access_log=True
    )

import asyncio
import logging
import os
import typing
import sqlalchemy.ext.asyncio
import hoaxify.config

logger = logging.getLogger(__name__)

engine: sqlalchemy.ext.asyncio.AsyncEngine = None
async_session_maker: sqlalchemy.ext.asyncio.async_sessionmaker = None


async def run_migrations() -> None:
    from alembic import command
    from alembic.config import Config

    alembic_ini = os.path.join(os.path.dirname(__file__), '..', 'alembic.ini')
    if not os.path.exists(alembic_ini):
        logger.debug("No alembic.ini found, skipping migrations")
        return

    alembic_cfg = Config(alembic_ini)
    alembic_cfg.set_main_option("sqlalchemy.url", hoaxify.config.settings.database_url)

    try:
        await asyncio.get_event_loop().run_in_executor(
            None,
            lambda: command.upgrade(alembic_cfg, "head")
        )
        logger.info("Database migrations completed successfully")
    except Exception as e:
        logger.error(f"Error running migrations: {str(e)}")
        raise


def configure_engine(url: str, **engine_kwargs) -> sqlalchemy.ext.asyncio.AsyncEngine:
    global engine, async_session_maker

    engine = sqlalchemy.ext.asyncio.create_async_engine(url, **engine_kwargs)
    async_session_maker = sqlalchemy.ext.asyncio.async_sessionmaker(
        engine,
        class_=sqlalchemy.ext.asyncio.AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return engine


async def init_db() -> None:
    settings = hoaxify.config.settings

    if settings.run_migrations:
        logger.info("Running database migrations")
        await run_migrations()

    configure_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        echo=settings.debug
    )


async def close_db() -> None:
    global engine
    if engine:
        await engine.dispose()
        engine = None


async def get_db() -> typing.AsyncIterator[sqlalchemy.ext.asyncio.AsyncSession]:
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.logger import logger
from core.settings import Settings, settings as default_settings

from .base import Base
from .errors import translate_store_errors


def engine_options(url: URL, settings: Settings) -> dict:
    """Engine keyword arguments for the configured backend."""
    if url.get_backend_name() == 'sqlite':
        # A single shared connection keeps in-memory databases alive between sessions
        return {'echo': settings.ECHO, 'poolclass': StaticPool}
    return {
        'echo': settings.ECHO,
        'pool_pre_ping': settings.POOL_PRE_PING,
        'pool_size': settings.POOL_SIZE,
        'max_overflow': settings.MAX_OVERFLOW,
        'connect_args': {
            'timeout': settings.DB_CONNECT_TIMEOUT,
            'command_timeout': settings.DB_COMMAND_TIMEOUT,
            'server_settings': {
                'application_name': 'company_hierarchy',
            },
        },
    }


class DataBaseConnection:
    """
    Async connection management for the employees database.

    - Every parameter comes from Settings unless a URL is passed explicitly
    - One engine and one sessionmaker per application
    - Sessions and transactions are scoped with async context managers
    """

    def __init__(self, url: URL | str | None = None, settings: Settings = default_settings):
        self.url = make_url(url) if url is not None else settings.url()

        self.engine = create_async_engine(self.url, **engine_options(self.url, settings))

        self.AsyncSessionLocal = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session and close it afterwards.

        Commit and rollback are the caller's business, see ``transaction``.
        """
        session = self.AsyncSessionLocal()
        try:
            yield session
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session bound to one unit of work: commit on success, rollback on any error.

        Usage:
            async with database.transaction() as session:
                repo = EmployeeRepo(session)
                await repo.reassign_children(employee_id)
                await repo.delete(employee_id)
        """
        async with self.get_session() as session:
            try:
                yield session
                with translate_store_errors('commit'):
                    await session.commit()
            except BaseException:
                await session.rollback()
                raise

    async def connect(self, max_retries: int = 10, retry_delay: float = 3) -> None:
        """Probe the database on startup, retrying while it comes up."""
        safe_url = self.url.render_as_string(hide_password=True)
        logger.info(f'[DATABASE] Connecting to {safe_url}')

        for attempt in range(1, max_retries + 1):
            try:
                logger.info(f'[DATABASE] Connection attempt {attempt}/{max_retries}...')
                async with self.engine.begin() as conn:
                    await conn.execute(text('SELECT 1'))
                logger.info('[DATABASE] Connected')
                return
            except Exception as e:
                if attempt >= max_retries:
                    logger.error(f'[DATABASE] Could not connect after {max_retries} attempts: {e}')
                    raise
                logger.warning(
                    f'[DATABASE] Connection attempt {attempt}/{max_retries} failed: {type(e).__name__}: {e}. '
                    f'Retrying in {retry_delay} s...'
                )
                await asyncio.sleep(retry_delay)
                retry_delay = min(retry_delay * 1.5, 10)

    async def create_schema(self) -> None:
        """Create the employees table when it does not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info('[DATABASE] Schema ready')

    async def is_connected(self) -> bool:
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text('SELECT 1'))
            return True
        except Exception as e:
            logger.warning(f'[DATABASE] Connection check failed: {e}')
            return False

    async def dispose(self) -> None:
        """Close the pool on shutdown."""
        try:
            await self.engine.dispose()
            logger.info('[DATABASE] Connection pool closed')
        except Exception as e:
            logger.error(f'[DATABASE] Error while closing the pool: {e}')
            raise


# Application-wide instance
database = DataBaseConnection()

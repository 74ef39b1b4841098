import logging

import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError

from sqlcron import Cron, AsyncCron


@pytest.fixture
def cron_sqlite(tmp_path):
    logging.getLogger("sqlcron").setLevel(logging.DEBUG)

    # File database, so that scheduler threads share it with the test
    engine = create_engine(f"sqlite:///{tmp_path / 'cron.db'}")
    instance = Cron(engine)
    instance.create_all()
    try:
        yield instance
    finally:
        for scheduler in instance.schedulers:
            scheduler.stop()
            scheduler.join(5)
        engine.dispose()


@pytest_asyncio.fixture
async def cron_aiosqlite(tmp_path):
    logging.getLogger("sqlcron").setLevel(logging.DEBUG)

    instance = AsyncCron(f"sqlite+aiosqlite:///{tmp_path / 'cron.db'}")
    await instance.create_all()
    try:
        yield instance
    finally:
        for scheduler in instance.schedulers:
            scheduler.stop()
            await scheduler.wait()
        await instance.engine.dispose()


@pytest.fixture
def cron_psycopg2(postgres_dsn_sync):
    logging.getLogger("sqlcron").setLevel(logging.DEBUG)

    try:
        instance = Cron(postgres_dsn_sync)
        instance.drop_all()
        instance.create_all()
    except (ImportError, OperationalError) as exc:
        pytest.skip(f"PostgreSQL is not available: {exc}")
    try:
        yield instance
    finally:
        for scheduler in instance.schedulers:
            scheduler.stop()
            scheduler.join(5)
        instance.drop_all()
        instance.engine.dispose()


@pytest_asyncio.fixture
async def cron_asyncpg(postgres_dsn_async):
    logging.getLogger("sqlcron").setLevel(logging.DEBUG)

    try:
        instance = AsyncCron(postgres_dsn_async)
        await instance.drop_all()
        await instance.create_all()
    except (ImportError, OperationalError, OSError) as exc:
        pytest.skip(f"PostgreSQL is not available: {exc}")
    try:
        yield instance
    finally:
        for scheduler in instance.schedulers:
            scheduler.stop()
            await scheduler.wait()
        await instance.drop_all()
        await instance.engine.dispose()

import pytest
from sqlalchemy.engine.url import URL


POSTGRES_OPTIONS = {
    "host": ("localhost", "Host of the PostgreSQL server holding cron_jobs"),
    "port": ("5432", "Port of the PostgreSQL server"),
    "user": ("postgres", "User allowed to create and drop cron_jobs"),
    "password": ("postgres", "Password of that user"),
    "database": ("postgres", "Database where cron_jobs is created"),
}


def pytest_addoption(parser):
    """PostgreSQL tests are skipped when the server can't be reached."""
    group = parser.getgroup("sqlcron", "sqlcron PostgreSQL tests")
    for name, (default, help_text) in POSTGRES_OPTIONS.items():
        group.addoption(
            f"--postgres-{name}",
            action="store",
            default=default,
            help=f"{help_text} (default: {default})",
        )


@pytest.fixture(scope="session")
def postgres_config(request) -> dict[str, str]:
    return {
        name: request.config.getoption(f"--postgres-{name}")
        for name in POSTGRES_OPTIONS
    }


def postgres_url(driver: str, config: dict[str, str]) -> URL:
    return URL.create(
        f"postgresql+{driver}",
        username=config["user"],
        password=config["password"],
        host=config["host"],
        port=int(config["port"]),
        database=config["database"],
    )


@pytest.fixture(scope="session")
def postgres_dsn_sync(postgres_config) -> URL:
    """URL for ``Cron`` through psycopg2."""
    return postgres_url("psycopg2", postgres_config)


@pytest.fixture(scope="session")
def postgres_dsn_async(postgres_config) -> URL:
    """URL for ``AsyncCron`` through asyncpg."""
    return postgres_url("asyncpg", postgres_config)

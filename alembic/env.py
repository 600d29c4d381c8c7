from logging.config import fileConfig
import asyncio
import os
import sys
from pathlib import Path

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine

# ensure src is on sys.path so we can import the app metadata
project_root = Path(__file__).resolve().parents[1]
src_path = str(project_root / "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

# load .env from the project root if present; real env vars win
load_dotenv(dotenv_path=str(project_root / ".env"), override=False)

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

# import the application's metadata so autogenerate can see models
from pastenote.config import Settings  # noqa: E402
from pastenote.core.models import BaseModel, Note  # noqa: E402,F401

target_metadata = BaseModel.metadata


def _database_url() -> str:
    """alembic.ini wins, then DATABASE_URL / .env through the app settings."""
    cfg = context.config.get_section(context.config.config_ini_section) or {}
    url = cfg.get("sqlalchemy.url") or Settings().database_url
    if not (url.startswith("postgresql") or url.startswith("sqlite")):
        raise ValueError(f"Only PostgreSQL and SQLite are supported. Got: {url}")
    return url


def do_run_migrations(connection: Connection) -> None:
    """Run migrations with a bound connection (sync)."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        # sqlite can't ALTER most things in place
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations(url: str) -> None:
    """Run migrations for an async engine."""
    connectable: AsyncEngine = create_async_engine(url, poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


def run_migrations_online() -> None:
    """Entry point used by alembic."""
    url = _database_url()

    # async drivers: asyncpg, aiosqlite
    if "+asyncpg" in url or "+aiosqlite" in url:
        asyncio.run(run_async_migrations(url))
    else:
        connectable = engine_from_config(
            {"sqlalchemy.url": url},
            prefix="sqlalchemy.",
            poolclass=pool.NullPool,
        )
        with connectable.connect() as connection:
            do_run_migrations(connection)


# entrypoint
if context.is_offline_mode():
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()
else:
    run_migrations_online()

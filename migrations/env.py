from __future__ import annotations

import asyncio
import logging
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import create_async_engine

from docvault.db.base import Base
from docvault.db.settings import DBSettings
import docvault.documents.models  # noqa: F401  registers the documents table

logger = logging.getLogger("alembic.env")

# --- App logging unless ALEMBIC_USE_APP_LOGGING=0 ---
config = context.config
if os.getenv("ALEMBIC_USE_APP_LOGGING", "1") == "1":
    from docvault.app.core.logging import setup_logging

    setup_logging(level=os.getenv("LOG_LEVEL"), fmt=os.getenv("LOG_FORMAT"))
elif config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# --- Database URL: explicit option, else DB_DATABASE_URL / DATABASE_URL ---
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", DBSettings().resolved_database_url)

target_metadata = Base.metadata

url_str = config.get_main_option("sqlalchemy.url") or ""
is_async = make_url(url_str).get_dialect().driver in {"asyncpg", "aiosqlite"}


def run_migrations_offline() -> None:
    context.configure(
        url=url_str,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online_async() -> None:
    connectable = create_async_engine(url_str, poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


def run_migrations_online_sync() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section) or {},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        do_run_migrations(connection)
    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
elif is_async:
    asyncio.run(run_migrations_online_async())
else:
    run_migrations_online_sync()

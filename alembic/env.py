"""Alembic environment — applies the surveys/responses/users schema over asyncpg.

DATABASE_URL wins over alembic.ini and goes through the same postgresql://
normalisation as the application settings. Only online migrations are supported.
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

import survey_pulse.models  # noqa: F401  (registers tables on Base.metadata)
from survey_pulse.config import Settings
from survey_pulse.db.base import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _migrate(connection) -> None:
    context.configure(connection=connection, target_metadata=Base.metadata)
    with context.begin_transaction():
        context.run_migrations()


async def _run() -> None:
    url = config.get_main_option("sqlalchemy.url")
    if os.environ.get("DATABASE_URL"):
        url = Settings().database_url
    engine = create_async_engine(url, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(_migrate)
    await engine.dispose()


if context.is_offline_mode():
    raise SystemExit("Offline (--sql) migrations are not supported; run against a database.")
asyncio.run(_run())

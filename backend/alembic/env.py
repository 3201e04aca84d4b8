import os
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

# Model modules must be imported so the analytics tables land on Base.metadata
# before autogenerate compares them with the database.
from db.database import Base          # noqa: F401
from db import models                 # noqa: F401

from config import get_settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _get_sync_url() -> str:
    """Database URL for migrations.

    DATABASE_URL from the environment wins over the settings default.
    Migrations run synchronously, so ``+asyncpg`` becomes ``+psycopg2``.
    """
    url = os.environ.get("DATABASE_URL") or get_settings().database_url
    return url.replace("+asyncpg", "+psycopg2")


def run_migrations_offline() -> None:
    """Emit the migration SQL to the script output without connecting."""
    context.configure(
        url=_get_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a live connection."""
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = _get_sync_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

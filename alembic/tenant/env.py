"""
Alembic environment for the per-tenant schemas.

The target schema comes from ``config.attributes["tenant_schema"]`` when
called by the provisioning service, or from ``-x tenant=<id>`` on the
command line. Migrations create unqualified tables, so ``search_path`` is
pinned to the tenant schema for the duration of the transaction, and the
migrations table lives inside the tenant schema.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from hms.config import settings
from hms.core.tenancy import quote_schema
from hms.models.base import TenantBase

# Import all tenant models so Alembic can detect them
from hms.models.role import Role  # noqa: F401
from hms.models.patient import Patient  # noqa: F401
from hms.models.bed import Bed  # noqa: F401

# Alembic Config object
config = context.config

# Interpret the config file for Python logging, unless called from the app
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name)

# Model metadata for autogenerate support
target_metadata = TenantBase.metadata


def get_tenant_schema() -> str:
    schema = config.attributes.get("tenant_schema")
    if not schema:
        schema = context.get_x_argument(as_dictionary=True).get("tenant")
    if not schema:
        raise RuntimeError("No tenant schema given; pass -x tenant=<tenant id>")
    # Validates the identifier before it reaches SQL
    quote_schema(schema)
    return schema


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Generates SQL script without connecting to database.
    """
    schema = get_tenant_schema()
    context.configure(
        url=settings.async_database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        version_table=settings.migrations_table,
        version_table_schema=schema,
    )

    with context.begin_transaction():
        context.execute(f"SET LOCAL search_path TO {quote_schema(schema)}")
        context.run_migrations()


def do_run_migrations(connection: Connection, schema: str) -> None:
    """Execute migrations against one tenant schema."""
    connection.execute(text(f"SET LOCAL search_path TO {quote_schema(schema)}"))

    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        version_table=settings.migrations_table,
        version_table_schema=schema,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations(schema: str) -> None:
    """Run migrations in 'online' mode with the async engine."""
    connectable = create_async_engine(
        settings.async_database_url,
        poolclass=pool.NullPool,
    )

    async with connectable.begin() as connection:
        await connection.execute(text(f"CREATE SCHEMA IF NOT EXISTS {quote_schema(schema)}"))
        await connection.run_sync(do_run_migrations, schema)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    schema = get_tenant_schema()
    connection = config.attributes.get("connection")

    if connection is None:
        asyncio.run(run_async_migrations(schema))
    else:
        do_run_migrations(connection, schema)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

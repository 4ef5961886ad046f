"""
Alembic integration for the public registry and the per-tenant schemas.

Two migration sets live side by side in ``alembic.ini``:

- ``[public]`` manages the platform registry (``public.tenants`` and
  ``public.user_verification``).
- ``[tenant]`` is replayed into every tenant schema. The target schema is
  handed to ``alembic/tenant/env.py`` through ``Config.attributes`` (or
  ``-x tenant=<id>`` on the command line).

The helpers taking a ``Connection`` are synchronous and are meant to be
called through ``AsyncConnection.run_sync``.
"""

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import text
from sqlalchemy.engine import Connection

from hms.config import settings

PUBLIC_SECTION = "public"
TENANT_SECTION = "tenant"


def build_alembic_config(section: str = TENANT_SECTION) -> Config:
    """
    Load an Alembic config for one of the migration sets.

    Args:
        section: ``"public"`` or ``"tenant"``

    Returns:
        Alembic Config bound to the section
    """
    cfg = Config(settings.alembic_config_path, ini_section=section)
    # Leave the application's logging configuration alone
    cfg.attributes["configure_logger"] = False
    return cfg


def run_tenant_upgrade(
    connection: Connection,
    schema: str,
    revision: str = "head",
) -> None:
    """
    Apply the tenant migration set to a schema on an open connection.

    The caller owns the transaction; nothing is committed here.

    Args:
        connection: Sync connection inside a transaction
        schema: Validated tenant schema name
        revision: Target revision
    """
    cfg = build_alembic_config(TENANT_SECTION)
    cfg.attributes["connection"] = connection
    cfg.attributes["tenant_schema"] = schema
    command.upgrade(cfg, revision)


def get_current_revision(connection: Connection, schema: str) -> str | None:
    """
    Read the revision recorded in a schema's migrations table.

    Returns:
        Revision id, or None when no migration has been applied
    """
    context = MigrationContext.configure(
        connection,
        opts={
            "version_table": settings.migrations_table,
            "version_table_schema": schema,
        },
    )
    return context.get_current_revision()


def get_head_revision(section: str = TENANT_SECTION) -> str | None:
    """Get the latest revision of a migration set."""
    script = ScriptDirectory.from_config(build_alembic_config(section))
    return script.get_current_head()


def schema_exists(connection: Connection, schema: str) -> bool:
    """Check whether a Postgres schema exists."""
    result = connection.execute(
        text(
            "SELECT 1 FROM information_schema.schemata "
            "WHERE schema_name = :schema"
        ),
        {"schema": schema},
    )
    return result.scalar() is not None

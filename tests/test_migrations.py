"""Tenant migration chain rendered to SQL, without a database."""
import io
from pathlib import Path

import pytest
from alembic import command

from hms.config import PROJECT_ROOT, Settings, settings
from hms.core.exceptions import InvalidTenantIdentifierException
from hms.migrations import (
    PUBLIC_SECTION,
    TENANT_SECTION,
    build_alembic_config,
    get_head_revision,
)


def render_tenant_sql(schema: str, revision: str = "head") -> str:
    buffer = io.StringIO()
    cfg = build_alembic_config(TENANT_SECTION)
    cfg.output_buffer = buffer
    cfg.attributes["tenant_schema"] = schema
    command.upgrade(cfg, revision, sql=True)
    return buffer.getvalue()


@pytest.fixture(scope="module")
def tenant_sql() -> str:
    return render_tenant_sql("hosp_a")


def test_search_path_is_pinned_before_any_table(tenant_sql):
    search_path = tenant_sql.index('SET LOCAL search_path TO "hosp_a"')

    assert search_path < tenant_sql.index("CREATE TABLE roles")
    assert search_path < tenant_sql.index("CREATE TABLE patients")
    assert search_path < tenant_sql.index("CREATE TABLE beds")


def test_migrations_table_lives_in_tenant_schema(tenant_sql):
    assert f"CREATE TABLE hosp_a.{settings.migrations_table}" in tenant_sql
    assert "version_num='0003'" in tenant_sql


def test_tables_are_created_unqualified(tenant_sql):
    assert "CREATE TABLE tenant." not in tenant_sql
    assert "REFERENCES patients (id)" in tenant_sql


def test_default_roles_are_seeded_as_jsonb(tenant_sql):
    assert "INSERT INTO roles" in tenant_sql
    assert "CAST('[\"*\"]' AS JSONB)" in tenant_sql
    for role in ("hospital_admin", "doctor", "nurse", "receptionist"):
        assert f"'{role}'" in tenant_sql


def test_partial_upgrade_stops_at_revision():
    sql = render_tenant_sql("hosp_b", revision="0002")

    assert 'SET LOCAL search_path TO "hosp_b"' in sql
    assert "CREATE TABLE patients" in sql
    assert "CREATE TABLE beds" not in sql


def test_unsafe_schema_is_rejected():
    with pytest.raises(InvalidTenantIdentifierException):
        render_tenant_sql("pg_catalog")


def test_head_revisions():
    assert get_head_revision(TENANT_SECTION) == "0003"
    assert get_head_revision(PUBLIC_SECTION) == "0001"


def test_alembic_config_resolves_from_project_root():
    path = Path(settings.alembic_config_path)

    assert path.is_absolute()
    assert path == PROJECT_ROOT / "alembic.ini"
    assert path.is_file()


def test_absolute_alembic_config_path_is_kept(tmp_path):
    custom = tmp_path / "migrations.ini"

    assert Settings(alembic_config_path=str(custom)).alembic_config_path == str(custom)

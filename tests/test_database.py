"""Per-session tenant schema routing and the tenant session lifecycle."""
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.schema import CreateTable

from hms.core.dependencies import get_tenant_db
from hms.database import engine, tenant_engine
from hms.models.base import TENANT_SCHEMA_PLACEHOLDER
from hms.models.bed import Bed
from hms.models.patient import Patient
from hms.models.role import Role


def compile_for(statement, schema: str) -> str:
    return str(
        statement.compile(
            dialect=postgresql.dialect(),
            schema_translate_map={TENANT_SCHEMA_PLACEHOLDER: schema},
            render_schema_translate=True,
        )
    )


@pytest.mark.parametrize(
    "model, table",
    [(Bed, "beds"), (Patient, "patients"), (Role, "roles")],
)
def test_select_targets_tenant_schema(model, table):
    sql = compile_for(select(model), "hosp_a")

    assert f"FROM hosp_a.{table}" in sql
    assert TENANT_SCHEMA_PLACEHOLDER + "." not in sql


def test_two_tenants_share_one_statement():
    statement = select(Patient).where(Patient.patient_number == "P-0001")

    assert "hosp_a.patients" in compile_for(statement, "hosp_a")
    assert "hosp_b.patients" in compile_for(statement, "hosp_b")


def test_update_targets_tenant_schema():
    sql = compile_for(update(Bed).where(Bed.id == 7).values(status="occupied"), "hosp_a")

    assert sql.startswith("UPDATE hosp_a.beds")


def test_bed_foreign_key_stays_inside_tenant_schema():
    ddl = compile_for(CreateTable(Bed.__table__), "hosp_a")

    assert "CREATE TABLE hosp_a.beds" in ddl
    assert "REFERENCES hosp_a.patients (id)" in ddl


def test_tenant_engine_shares_the_pool():
    routed = tenant_engine("hosp_a")

    options = routed.sync_engine.get_execution_options()
    assert options["schema_translate_map"] == {TENANT_SCHEMA_PLACEHOLDER: "hosp_a"}
    assert routed.sync_engine.pool is engine.sync_engine.pool
    assert "schema_translate_map" not in engine.sync_engine.get_execution_options()


@pytest.fixture
def session_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(AsyncSession, "commit", AsyncMock(side_effect=lambda: calls.append("commit")))
    monkeypatch.setattr(AsyncSession, "rollback", AsyncMock(side_effect=lambda: calls.append("rollback")))
    return calls


async def test_tenant_db_commits_after_handler(make_tenant, session_calls):
    dependency = get_tenant_db(make_tenant("hosp_a"))
    session = await dependency.__anext__()

    options = session.bind.sync_engine.get_execution_options()
    assert options["schema_translate_map"] == {TENANT_SCHEMA_PLACEHOLDER: "hosp_a"}

    with pytest.raises(StopAsyncIteration):
        await dependency.__anext__()

    assert session_calls == ["commit"]


async def test_tenant_db_rolls_back_when_handler_raises(make_tenant, session_calls):
    dependency = get_tenant_db(make_tenant("hosp_a"))
    await dependency.__anext__()

    with pytest.raises(RuntimeError, match="handler failed"):
        await dependency.athrow(RuntimeError("handler failed"))

    assert session_calls == ["rollback"]

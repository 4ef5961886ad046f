"""Tenant schema provisioning tests against a recording fake engine."""
import pytest
from sqlalchemy.exc import ProgrammingError

from hms.core.exceptions import InvalidTenantIdentifierException, ProvisioningException
from hms.services import provisioning_service
from hms.services.provisioning_service import ProvisioningService


class FakeConnection:
    """Records statements and forwards run_sync to the callable."""

    def __init__(self, engine):
        self.engine = engine

    async def execute(self, statement, *args):
        self.engine.statements.append(str(statement))

    async def run_sync(self, fn, *args):
        return fn(self, *args)


class FakeTransaction:
    def __init__(self, engine):
        self.engine = engine

    async def __aenter__(self):
        return FakeConnection(self.engine)

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.engine.commits += 1
        else:
            self.engine.rollbacks += 1
        return False


class FakeEngine:
    def __init__(self):
        self.statements = []
        self.commits = 0
        self.rollbacks = 0

    def begin(self):
        return FakeTransaction(self)

    def connect(self):
        return FakeTransaction(self)


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def applied(monkeypatch):
    """Simulated migration state keyed by schema: schema -> revision."""
    state = {}
    monkeypatch.setattr(provisioning_service, "schema_exists", lambda conn, schema: schema in state)
    monkeypatch.setattr(provisioning_service, "get_current_revision", lambda conn, schema: state.get(schema))
    return state


def make_runner(applied, calls):
    def runner(conn, schema):
        calls.append(schema)
        applied[schema] = "0003"

    return runner


async def test_provision_creates_schema_and_migrates_in_one_transaction(engine, applied):
    calls = []
    service = ProvisioningService(engine, runner=make_runner(applied, calls), head_resolver=lambda: "0003")

    status = await service.provision("hosp_a")

    assert engine.statements[0] == 'CREATE SCHEMA IF NOT EXISTS "hosp_a"'
    assert calls == ["hosp_a"]
    assert engine.rollbacks == 0
    assert status.schema_name == "hosp_a"
    assert status.exists
    assert status.current_revision == "0003"
    assert status.is_up_to_date


async def test_reprovisioning_is_idempotent(engine, applied):
    calls = []
    service = ProvisioningService(engine, runner=make_runner(applied, calls), head_resolver=lambda: "0003")

    await service.provision("hosp_a")
    status = await service.provision("hosp_a")

    create_statements = [s for s in engine.statements if s.startswith("CREATE SCHEMA")]
    assert create_statements == ['CREATE SCHEMA IF NOT EXISTS "hosp_a"'] * 2
    assert status.is_up_to_date


async def test_migration_failure_rolls_back_and_raises(engine, applied):
    def failing_runner(conn, schema):
        raise ProgrammingError("CREATE TABLE beds", {}, Exception("relation exists"))

    service = ProvisioningService(engine, runner=failing_runner, head_resolver=lambda: "0003")

    with pytest.raises(ProvisioningException) as exc_info:
        await service.provision("hosp_a")

    assert exc_info.value.status_code == 500
    assert "hosp_a" in exc_info.value.detail
    assert engine.rollbacks == 1
    assert engine.commits == 0


async def test_invalid_identifier_never_reaches_the_database(engine, applied):
    service = ProvisioningService(engine, runner=make_runner(applied, []), head_resolver=lambda: "0003")

    with pytest.raises(InvalidTenantIdentifierException):
        await service.provision('x"; DROP SCHEMA public CASCADE; --')

    assert engine.statements == []


async def test_status_of_missing_schema(engine, applied):
    service = ProvisioningService(engine, head_resolver=lambda: "0003")

    status = await service.status("hosp_b")

    assert not status.exists
    assert status.current_revision is None
    assert status.head_revision == "0003"
    assert not status.is_up_to_date


async def test_status_reports_outdated_schema(engine, applied):
    applied["hosp_a"] = "0002"
    service = ProvisioningService(engine, head_resolver=lambda: "0003")

    status = await service.status("hosp_a")

    assert status.exists
    assert status.current_revision == "0002"
    assert not status.is_up_to_date


async def test_upgrade_all_continues_after_failures(engine, applied):
    calls = []

    def runner(conn, schema):
        calls.append(schema)
        if schema == "hosp_b":
            raise ProgrammingError("ALTER TABLE", {}, Exception("boom"))
        applied[schema] = "0003"

    service = ProvisioningService(engine, runner=runner, head_resolver=lambda: "0003")

    outcomes = await service.upgrade_all(["hosp_a", "hosp_b", "Bad-Id", "hosp_c"])

    assert [o.tenant_id for o in outcomes] == ["hosp_a", "hosp_b", "Bad-Id", "hosp_c"]
    assert [o.success for o in outcomes] == [True, False, False, True]
    assert outcomes[0].revision == "0003"
    assert "hosp_b" in outcomes[1].error
    assert calls == ["hosp_a", "hosp_b", "hosp_c"]


async def test_drop_schema(engine):
    service = ProvisioningService(engine)

    await service.drop("hosp_a")

    assert engine.statements == ['DROP SCHEMA IF EXISTS "hosp_a" CASCADE']
    assert engine.commits == 1

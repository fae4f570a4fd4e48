"""Test configuration for Field Ops Web tests."""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from fieldops_web.main import app
from fieldops_web.schemas import Base
from fieldops_web.dependencies import get_db
from fieldops_web import config
from fieldops_web.models.equipment import EquipmentRow
from fieldops_web.models.job import JobIntake
from fieldops_web.models.test_run import TestType
from fieldops_web.services.job_service import JobService
from fieldops_web.services.test_run_service import TestRunService


@pytest.fixture
def temp_storage(tmp_path):
    """Create temporary storage directory."""
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return storage_dir


@pytest_asyncio.fixture
async def test_db(temp_storage):
    """Create test database."""
    db_path = temp_storage / "test.db"
    db_url = f"sqlite+aiosqlite:///{db_path}"

    engine = create_async_engine(db_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def db(test_db):
    """Session for service-level tests."""
    yield test_db


@pytest_asyncio.fixture
async def client(test_db, temp_storage, monkeypatch):
    """Create test client with mocked dependencies."""
    # Mock storage paths
    monkeypatch.setattr(config.settings, "storage_dir", temp_storage)

    async def override_get_db():
        try:
            yield test_db
            await test_db.commit()
        except Exception:
            await test_db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


PASSING_FORMS = {
    TestType.DUCT_LEAKAGE: {"tonnage": "3", "measured_duct_leakage_cfm": "100"},
    TestType.AIRFLOW: {"tonnage": "3", "measured_total_cfm": "1000"},
    TestType.REFRIGERANT_CHARGE: {
        "lowest_return_air_db_f": "75",
        "outdoor_temp_f": "80",
        "condenser_sat_temp_f": "110",
        "liquid_line_temp_f": "100",
        "target_subcool_f": "10",
        "suction_line_temp_f": "55",
        "evaporator_sat_temp_f": "45",
        "filter_drier_installed": "on",
    },
}

FAILING_AIRFLOW = {"tonnage": "3", "measured_total_cfm": "600"}


@pytest.fixture
def make_job(db):
    """Factory creating a job through intake; one 3-ton system by default."""

    async def _make(**fields):
        values = dict(
            customer_first_name="Dana",
            customer_last_name="Reyes",
            customer_phone="(559) 555-0142",
            address_line1="1200 Olive Ave",
            city="Fresno",
            equipment=[
                EquipmentRow(system_location="Hallway", equipment_role="condenser", tonnage="3"),
            ],
        )
        values.update(fields)
        return await JobService(db).create_from_intake(JobIntake(**values))

    return _make


@pytest.fixture
def run_core_tests(db):
    """
    Factory adding, filling and completing the required tests on a system.

    ``forms`` overrides the passing readings per test type.
    """

    async def _run(job_id, system_id, forms=None):
        service = TestRunService(db)
        readings = {**PASSING_FORMS, **(forms or {})}
        runs = await service.add_core_tests(job_id, system_id)
        completed = []
        for run in runs:
            await service.save_measurements(job_id, run.id, readings[run.test_type])
            completed.append(await service.complete_run(job_id, run.id))
        return completed

    return _run

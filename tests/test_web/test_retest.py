"""Tests for retest jobs and parent reconciliation."""

import pytest
from sqlalchemy import func, select

from fieldops_web.errors import NotFoundError
from fieldops_web.models.ops import OpsStatus
from fieldops_web.models.test_run import TestType
from fieldops_web.models.visit import VisitClose, VisitOutcome
from fieldops_web.schemas.job import Job
from fieldops_web.schemas.system import JobEquipment, JobSystem
from fieldops_web.services.equipment_service import EquipmentService
from fieldops_web.services.job_service import JobService
from fieldops_web.services.ops_status import OpsStatusService
from fieldops_web.services.retest_service import RetestService
from fieldops_web.services.timeline import TimelineService
from fieldops_web.services.visit_service import VisitService

from conftest import FAILING_AIRFLOW


async def failed_parent(db, make_job, run_core_tests):
    parent = await make_job(permit_number="B-2291")
    systems = await EquipmentService(db).list_systems(parent.id)
    await run_core_tests(parent.id, systems[0].id, forms={TestType.AIRFLOW: FAILING_AIRFLOW})
    return parent


@pytest.mark.asyncio
async def test_create_retest_copies_context(db, make_job, run_core_tests):
    parent = await failed_parent(db, make_job, run_core_tests)

    child = await RetestService(db, actor_id="user-1").create_retest(parent.id)

    assert child.parent_job_id == parent.id
    assert child.title == f"Retest - {parent.title}"
    assert child.ops_status == OpsStatus.NEED_TO_SCHEDULE
    assert child.customer_id == parent.customer_id
    assert child.permit_number == "B-2291"

    systems = await EquipmentService(db).list_systems(child.id)
    assert [s.name for s in systems] == ["Hallway"]
    assert systems[0].equipment[0].tonnage == 3.0

    # Parent status is not touched by creating the retest
    assert (await JobService(db).get_job(parent.id)).ops_status == OpsStatus.FAILED
    parent_events = await TimelineService(db).list_events(parent.id, event_type="retest_created")
    assert parent_events[0].meta["child_job_id"] == child.id


@pytest.mark.asyncio
async def test_create_retest_without_equipment(db, make_job):
    parent = await make_job()

    child = await RetestService(db).create_retest(parent.id, copy_equipment=False)

    assert await EquipmentService(db).list_systems(child.id) == []
    assert [job.id for job in await RetestService(db).list_retests(parent.id)] == [child.id]


@pytest.mark.asyncio
async def test_create_retest_missing_parent(db):
    with pytest.raises(NotFoundError):
        await RetestService(db).create_retest("missing")


@pytest.mark.asyncio
async def test_create_retest_is_all_or_nothing(db, make_job, monkeypatch):
    parent = await make_job()

    async def clone_then_fail(self, parent_id, child_id):
        self.db.add(JobSystem(job_id=child_id, name="Hallway"))
        await self.db.flush()
        raise RuntimeError("equipment copy failed")

    monkeypatch.setattr(RetestService, "_clone_equipment", clone_then_fail)

    with pytest.raises(RuntimeError):
        await RetestService(db).create_retest(parent.id)

    assert await RetestService(db).list_retests(parent.id) == []
    assert await db.scalar(select(func.count(Job.id))) == 1
    assert await db.scalar(select(func.count(JobSystem.id))) == 1
    assert await db.scalar(select(func.count(JobEquipment.id))) == 1
    events = await TimelineService(db).list_events(parent.id, event_type="retest_created")
    assert events == []


@pytest.mark.asyncio
async def test_passing_retest_closes_failed_parent(db, make_job, run_core_tests):
    parent = await failed_parent(db, make_job, run_core_tests)
    child = await RetestService(db).create_retest(parent.id)
    child_system = (await EquipmentService(db).list_systems(child.id))[0]

    await run_core_tests(child.id, child_system.id)

    jobs = JobService(db)
    assert (await jobs.get_job(child.id)).ops_status == OpsStatus.PAPERWORK_REQUIRED
    assert (await jobs.get_job(parent.id)).ops_status == OpsStatus.CLOSED

    timeline = TimelineService(db)
    passed = await timeline.list_events(parent.id, event_type="retest_passed")
    assert passed[0].meta == {"child_job_id": child.id, "outcome": "pass"}
    result = await timeline.list_events(child.id, event_type="retest_result")
    assert result[0].meta["parent_job_id"] == parent.id


@pytest.mark.asyncio
async def test_passing_retest_closes_parent_awaiting_retest(db, make_job, run_core_tests):
    parent = await make_job()
    await OpsStatusService(db).force_set(parent.id, OpsStatus.RETEST_NEEDED, "test_setup")
    child = await RetestService(db).create_retest(parent.id)
    child_system = (await EquipmentService(db).list_systems(child.id))[0]

    await run_core_tests(child.id, child_system.id)

    assert (await JobService(db).get_job(parent.id)).ops_status == OpsStatus.CLOSED


@pytest.mark.asyncio
async def test_passing_retest_leaves_other_parent_status(db, make_job, run_core_tests):
    parent = await make_job()
    await OpsStatusService(db).force_set(parent.id, OpsStatus.ON_HOLD, "test_setup")
    child = await RetestService(db).create_retest(parent.id)
    child_system = (await EquipmentService(db).list_systems(child.id))[0]

    await run_core_tests(child.id, child_system.id)

    assert (await JobService(db).get_job(parent.id)).ops_status == OpsStatus.ON_HOLD
    passed = await TimelineService(db).list_events(parent.id, event_type="retest_passed")
    assert len(passed) == 1


@pytest.mark.asyncio
async def test_failing_retest_records_on_parent(db, make_job, run_core_tests):
    parent = await failed_parent(db, make_job, run_core_tests)
    child = await RetestService(db).create_retest(parent.id)
    child_system = (await EquipmentService(db).list_systems(child.id))[0]

    await run_core_tests(child.id, child_system.id, forms={TestType.AIRFLOW: FAILING_AIRFLOW})

    assert (await JobService(db).get_job(parent.id)).ops_status == OpsStatus.FAILED
    failed = await TimelineService(db).list_events(parent.id, event_type="retest_failed")
    assert failed[0].meta["outcome"] == "fail"


@pytest.mark.asyncio
async def test_closing_retest_visit_as_pass_closes_parent(db, make_job, run_core_tests):
    parent = await failed_parent(db, make_job, run_core_tests)
    child = await RetestService(db).create_retest(parent.id)
    visits = VisitService(db)
    visit = await visits.ensure_visit(child.id)

    await visits.close_visit(child.id, visit.id, VisitClose(outcome=VisitOutcome.PASS))

    assert (await JobService(db).get_job(parent.id)).ops_status == OpsStatus.CLOSED


@pytest.mark.asyncio
async def test_job_without_parent_has_no_retest_events(db, make_job, run_core_tests):
    job = await make_job()
    system = (await EquipmentService(db).list_systems(job.id))[0]

    await run_core_tests(job.id, system.id)

    events = await TimelineService(db).list_events(job.id)
    assert not [e for e in events if e.event_type.startswith("retest")]

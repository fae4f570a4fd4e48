"""Tests for ops-status transitions and manual locks."""

from datetime import date

import pytest

from fieldops_web.models.ops import OpsStatus, initial_ops_status, is_manual_lock
from fieldops_web.services.ops_status import OpsStatusService
from fieldops_web.services.timeline import TimelineService

LOCKED = [
    OpsStatus.PENDING_INFO,
    OpsStatus.ON_HOLD,
    OpsStatus.RETEST_NEEDED,
    OpsStatus.PAPERWORK_REQUIRED,
    OpsStatus.INVOICE_REQUIRED,
]


def test_manual_lock_set():
    assert {status for status in OpsStatus if is_manual_lock(status)} == set(LOCKED)
    assert not is_manual_lock(None)
    assert OpsStatus.ON_HOLD.is_manual_lock
    assert OpsStatus.PENDING_INFO.label == "Pending Info"


def test_initial_status():
    assert initial_ops_status(None) == OpsStatus.NEED_TO_SCHEDULE
    assert initial_ops_status(date(2026, 3, 2)) == OpsStatus.SCHEDULED


@pytest.mark.asyncio
@pytest.mark.parametrize("locked", LOCKED)
async def test_lock_blocks_automatic_change(db, make_job, locked):
    job = await make_job()
    ops = OpsStatusService(db)
    await ops.force_set(job.id, locked, "test_setup")

    applied = await ops.set_if_not_manual(job.id, OpsStatus.FAILED, "ecc_evaluation")

    assert applied is False
    assert await ops.current_status(job.id) == locked


@pytest.mark.asyncio
async def test_force_overrides_lock(db, make_job):
    job = await make_job()
    ops = OpsStatusService(db)
    await ops.force_set(job.id, OpsStatus.ON_HOLD, "test_setup")

    await ops.force_set(job.id, OpsStatus.SCHEDULED, "visit_scheduled")

    assert await ops.current_status(job.id) == OpsStatus.SCHEDULED


@pytest.mark.asyncio
async def test_unlocked_status_changes(db, make_job):
    job = await make_job()
    ops = OpsStatusService(db, actor_id="user-1")

    applied = await ops.set_if_not_manual(job.id, OpsStatus.FAILED, "ecc_evaluation")

    assert applied is True
    events = await TimelineService(db).list_events(job.id, event_type="ops_status_changed")
    assert len(events) == 1
    assert events[0].user_id == "user-1"
    assert events[0].meta == {
        "from": "need_to_schedule",
        "to": "failed",
        "source": "ecc_evaluation",
        "forced": False,
    }


@pytest.mark.asyncio
async def test_same_status_records_nothing(db, make_job):
    job = await make_job()
    ops = OpsStatusService(db)

    await ops.force_set(job.id, OpsStatus.NEED_TO_SCHEDULE, "manual_edit")

    events = await TimelineService(db).list_events(job.id, event_type="ops_status_changed")
    assert events == []

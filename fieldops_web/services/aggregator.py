"""Job-level ECC verdict rolled up across every declared system."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.ops import JobType, OpsStatus, ProjectType
from ..models.test_run import TestType, Verdict
from ..schemas.job import Job
from ..schemas.system import JobSystem
from ..schemas.test_run import EccTestRun
from .ops_status import OpsStatusService
from .overrides import effective_verdict

logger = logging.getLogger(__name__)

REQUIRED_TESTS = (
    TestType.DUCT_LEAKAGE,
    TestType.AIRFLOW,
    TestType.REFRIGERANT_CHARGE,
)


class JobVerdict(str, Enum):
    """Job-level outcome; NONE leaves ops status untouched."""

    FAIL = "fail"
    PASS = "pass"
    NONE = "none"


@dataclass
class RunTally:
    has_completed: bool = False
    any_fail: bool = False
    any_pass: bool = False


Matrix = dict[str, dict[TestType, RunTally]]


def required_tests(project_type: Optional[ProjectType]) -> tuple[TestType, ...]:
    # The same three tests apply to every project type, including
    # new_construction, even though numeric thresholds vary by type.
    return REQUIRED_TESTS


def build_matrix(
    system_ids: Iterable[str],
    runs: Iterable[EccTestRun],
    required: tuple[TestType, ...] = REQUIRED_TESTS,
) -> Matrix:
    """Tally completed runs per declared system and required test."""
    matrix: Matrix = {
        sid: {test_type: RunTally() for test_type in required} for sid in system_ids
    }

    for run in runs:
        # Runs without a system are legacy rows and never count
        if not run.system_id or run.system_id not in matrix:
            continue
        cells = matrix[run.system_id]
        if run.test_type not in cells or not run.is_completed:
            continue

        cell = cells[run.test_type]
        cell.has_completed = True
        outcome = effective_verdict(run.computed_verdict, run.override_verdict)
        if outcome == Verdict.FAIL:
            cell.any_fail = True
        elif outcome == Verdict.PASS:
            cell.any_pass = True

    return matrix


def decide(matrix: Matrix) -> JobVerdict:
    """Failure anywhere dominates; a pass needs every system fully passed."""
    if any(cell.any_fail for cells in matrix.values() for cell in cells.values()):
        return JobVerdict.FAIL

    if matrix and all(
        cell.has_completed and cell.any_pass
        for cells in matrix.values()
        for cell in cells.values()
    ):
        return JobVerdict.PASS

    return JobVerdict.NONE


async def evaluate_ecc_ops_status(
    db: AsyncSession,
    job_id: str,
    source: str = "ecc_evaluation",
    actor_id: Optional[str] = None,
) -> Optional[JobVerdict]:
    """
    Re-evaluate an ECC job and move its ops status when a verdict exists.

    FAIL sets ``failed`` and PASS sets ``paperwork_required``, both through
    the lock-respecting setter. Non-ECC jobs are ignored (returns None).
    """
    job = await db.get(Job, job_id)
    if job is None:
        raise NotFoundError("Job", job_id)
    if job.job_type != JobType.ECC:
        return None

    result = await db.execute(select(JobSystem.id).where(JobSystem.job_id == job_id))
    system_ids = [sid for sid in result.scalars().all() if sid]

    result = await db.execute(select(EccTestRun).where(EccTestRun.job_id == job_id))
    runs = result.scalars().all()

    matrix = build_matrix(system_ids, runs, required_tests(job.project_type))
    verdict = decide(matrix)
    logger.debug(f"Job {job_id} ECC verdict {verdict.value} across {len(system_ids)} systems")

    ops = OpsStatusService(db, actor_id=actor_id)
    if verdict == JobVerdict.FAIL:
        await ops.set_if_not_manual(job_id, OpsStatus.FAILED, source)
    elif verdict == JobVerdict.PASS:
        await ops.set_if_not_manual(job_id, OpsStatus.PAPERWORK_REQUIRED, source)

    return verdict

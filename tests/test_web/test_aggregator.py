"""Tests for the job-level ECC roll-up."""

from types import SimpleNamespace

import pytest

from fieldops_web.models.test_run import TestType, Verdict
from fieldops_web.services.aggregator import (
    REQUIRED_TESTS,
    JobVerdict,
    build_matrix,
    decide,
)


def run(system_id, test_type, computed=Verdict.PASS, override=None, completed=True):
    return SimpleNamespace(
        system_id=system_id,
        test_type=test_type,
        computed_verdict=computed,
        override_verdict=override,
        is_completed=completed,
    )


def passing_runs(system_id):
    return [run(system_id, test_type) for test_type in REQUIRED_TESTS]


def test_all_systems_passing_is_pass():
    runs = passing_runs("s1") + passing_runs("s2")
    assert decide(build_matrix(["s1", "s2"], runs)) == JobVerdict.PASS


def test_missing_test_on_one_system_is_none():
    runs = passing_runs("s1") + passing_runs("s2")[:2]
    assert decide(build_matrix(["s1", "s2"], runs)) == JobVerdict.NONE


def test_failure_anywhere_dominates():
    runs = passing_runs("s1") + [run("s2", TestType.AIRFLOW, computed=Verdict.FAIL)]
    assert decide(build_matrix(["s1", "s2"], runs)) == JobVerdict.FAIL


def test_no_systems_is_none():
    assert decide(build_matrix([], [])) == JobVerdict.NONE


def test_incomplete_runs_do_not_count():
    runs = [
        run("s1", TestType.DUCT_LEAKAGE, computed=Verdict.FAIL, completed=False),
        *passing_runs("s1")[1:],
    ]
    assert decide(build_matrix(["s1"], runs)) == JobVerdict.NONE


def test_override_supersedes_computed():
    runs = passing_runs("s1")[:2] + [
        run("s1", TestType.REFRIGERANT_CHARGE, computed=Verdict.FAIL, override=Verdict.PASS)
    ]
    assert decide(build_matrix(["s1"], runs)) == JobVerdict.PASS


def test_fail_override_on_passing_run():
    runs = passing_runs("s1")[:2] + [
        run("s1", TestType.REFRIGERANT_CHARGE, computed=Verdict.PASS, override=Verdict.FAIL)
    ]
    assert decide(build_matrix(["s1"], runs)) == JobVerdict.FAIL


@pytest.mark.parametrize("computed", [Verdict.UNKNOWN, Verdict.BLOCKED])
def test_unknown_and_blocked_do_not_pass(computed):
    runs = passing_runs("s1")[:2] + [run("s1", TestType.REFRIGERANT_CHARGE, computed=computed)]
    assert decide(build_matrix(["s1"], runs)) == JobVerdict.NONE


def test_runs_without_system_are_ignored():
    runs = [run(None, TestType.AIRFLOW, computed=Verdict.FAIL)] + passing_runs("s1")
    assert decide(build_matrix(["s1"], runs)) == JobVerdict.PASS


def test_custom_runs_are_not_required():
    runs = passing_runs("s1") + [run("s1", TestType.CUSTOM, computed=Verdict.FAIL)]
    assert decide(build_matrix(["s1"], runs)) == JobVerdict.PASS


def test_mixed_pass_and_fail_runs_in_cell_fail():
    runs = passing_runs("s1") + [run("s1", TestType.AIRFLOW, computed=Verdict.FAIL)]
    assert decide(build_matrix(["s1"], runs)) == JobVerdict.FAIL

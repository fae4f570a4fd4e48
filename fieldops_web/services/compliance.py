"""ECC pass/fail rules.

Thresholds are fixed domain constants:

* Duct leakage: allowed leakage = tonnage x 20 CFM/ton for ``all_new``
  projects, 40 CFM/ton otherwise. Fails when measured leakage exceeds it.
* Airflow: required airflow = tonnage x 350 CFM/ton for ``all_new``
  projects, 300 CFM/ton otherwise. Fails when measured airflow is below it.
* Refrigerant charge: blocked (not failed) when the lowest return-air dry
  bulb is below 70°F or the outdoor temperature is below 55°F. Otherwise
  fails when the filter drier is not confirmed, superheat is 25°F or more,
  or measured subcool is more than 2°F from target.
"""

from typing import Optional

from ..models.ops import ProjectType
from ..models.test_run import (
    AirflowData,
    ComplianceResult,
    DuctLeakageData,
    MeasurementData,
    RefrigerantChargeData,
    TestType,
    Verdict,
)

DUCT_LEAKAGE_CFM_PER_TON_ALL_NEW = 20
DUCT_LEAKAGE_CFM_PER_TON_DEFAULT = 40

AIRFLOW_CFM_PER_TON_ALL_NEW = 350
AIRFLOW_CFM_PER_TON_DEFAULT = 300

MIN_RETURN_AIR_DB_F = 70
MIN_OUTDOOR_TEMP_F = 55
SUBCOOL_TOLERANCE_F = 2
MAX_SUPERHEAT_F = 25


def _round(value: Optional[float]) -> Optional[float]:
    return None if value is None else round(value, 2)


def _is_all_new(project_type: Optional[ProjectType]) -> bool:
    return project_type == ProjectType.ALL_NEW


def duct_leakage_cfm_per_ton(project_type: Optional[ProjectType]) -> int:
    if _is_all_new(project_type):
        return DUCT_LEAKAGE_CFM_PER_TON_ALL_NEW
    return DUCT_LEAKAGE_CFM_PER_TON_DEFAULT


def airflow_cfm_per_ton(project_type: Optional[ProjectType]) -> int:
    if _is_all_new(project_type):
        return AIRFLOW_CFM_PER_TON_ALL_NEW
    return AIRFLOW_CFM_PER_TON_DEFAULT


def evaluate_duct_leakage(
    data: DuctLeakageData,
    project_type: Optional[ProjectType],
) -> ComplianceResult:
    per_ton = duct_leakage_cfm_per_ton(project_type)
    result = ComplianceResult(max_cfm_per_ton=per_ton)

    if data.tonnage is None:
        result.warnings.append("Tonnage is required to compute allowed leakage")
    if data.measured_duct_leakage_cfm is None:
        result.warnings.append("Measured duct leakage (CFM) not entered")
    if result.warnings:
        return result

    max_leakage = _round(data.tonnage * per_ton)
    result.max_leakage_cfm = max_leakage

    if data.measured_duct_leakage_cfm > max_leakage:
        result.status = Verdict.FAIL
        result.failures.append(
            f"Leakage {data.measured_duct_leakage_cfm:g} CFM exceeds max {max_leakage:g} CFM"
        )
    else:
        result.status = Verdict.PASS
    return result


def evaluate_airflow(
    data: AirflowData,
    project_type: Optional[ProjectType],
) -> ComplianceResult:
    per_ton = airflow_cfm_per_ton(project_type)
    result = ComplianceResult(cfm_per_ton_required=per_ton)

    if data.tonnage is None:
        result.warnings.append("Tonnage is required to compute required airflow")
    if data.measured_total_cfm is None:
        result.warnings.append("Measured total airflow (CFM) not entered")
    if result.warnings:
        return result

    required = _round(data.tonnage * per_ton)
    result.required_total_cfm = required

    if data.measured_total_cfm < required:
        result.status = Verdict.FAIL
        result.failures.append(
            f"Airflow {data.measured_total_cfm:g} CFM is below required {required:g} CFM"
        )
    else:
        result.status = Verdict.PASS
    return result


def evaluate_refrigerant_charge(data: RefrigerantChargeData) -> ComplianceResult:
    result = ComplianceResult()

    # Conditions gate
    if data.lowest_return_air_db_f is None:
        result.warnings.append("Lowest return air dry bulb not entered")
    elif data.lowest_return_air_db_f < MIN_RETURN_AIR_DB_F:
        result.blocked.append(
            f"Lowest return air dry bulb {data.lowest_return_air_db_f:g}°F is below "
            f"{MIN_RETURN_AIR_DB_F}°F"
        )
    if data.outdoor_temp_f is None:
        result.warnings.append("Outdoor temperature not entered")
    elif data.outdoor_temp_f < MIN_OUTDOOR_TEMP_F:
        result.blocked.append(
            f"Outdoor temperature {data.outdoor_temp_f:g}°F is below {MIN_OUTDOOR_TEMP_F}°F"
        )

    subcool = None
    if data.condenser_sat_temp_f is not None and data.liquid_line_temp_f is not None:
        subcool = _round(data.condenser_sat_temp_f - data.liquid_line_temp_f)
    superheat = None
    if data.suction_line_temp_f is not None and data.evaporator_sat_temp_f is not None:
        superheat = _round(data.suction_line_temp_f - data.evaporator_sat_temp_f)
    delta = None
    if subcool is not None and data.target_subcool_f is not None:
        delta = _round(subcool - data.target_subcool_f)

    result.measured_subcool_f = subcool
    result.measured_superheat_f = superheat
    result.subcool_delta_f = delta

    if result.blocked:
        result.status = Verdict.BLOCKED
        return result

    if not data.filter_drier_installed:
        result.failures.append("Filter drier not confirmed installed")
    if superheat is not None and superheat >= MAX_SUPERHEAT_F:
        result.failures.append(
            f"Superheat {superheat:g}°F is at or above {MAX_SUPERHEAT_F}°F"
        )
    if delta is not None and abs(delta) > SUBCOOL_TOLERANCE_F:
        result.failures.append(
            f"Subcool {subcool:g}°F is {delta:+g}°F from target "
            f"{data.target_subcool_f:g}°F (tolerance ±{SUBCOOL_TOLERANCE_F}°F)"
        )

    if subcool is None:
        result.warnings.append("Condenser saturation and liquid line temps needed for subcool")
    if superheat is None:
        result.warnings.append("Suction line and evaporator saturation temps needed for superheat")
    if data.target_subcool_f is None:
        result.warnings.append("Target subcool not entered")

    if subcool is None or superheat is None or delta is None:
        result.status = Verdict.UNKNOWN
    elif result.failures:
        result.status = Verdict.FAIL
    else:
        result.status = Verdict.PASS
    return result


def evaluate(
    test_type: TestType,
    data: MeasurementData,
    project_type: Optional[ProjectType] = None,
) -> ComplianceResult:
    """Compute the verdict for one test run's normalized readings."""
    if test_type == TestType.DUCT_LEAKAGE:
        return evaluate_duct_leakage(data, project_type)
    if test_type == TestType.AIRFLOW:
        return evaluate_airflow(data, project_type)
    if test_type == TestType.REFRIGERANT_CHARGE:
        return evaluate_refrigerant_charge(data)
    return ComplianceResult(warnings=["Custom tests are not computed; use an override"])

"""Form field normalization for ECC test readings.

Every helper is tolerant: blank or malformed numeric input becomes ``None``
so that partially entered readings can always be saved.
"""

import math
from typing import Any, Mapping, Optional

from ..models.test_run import (
    AirflowData,
    CustomTestData,
    DuctLeakageData,
    MeasurementData,
    RefrigerantChargeData,
    TestType,
)

_CHECKBOX_TRUE = {"on", "true", "1", "yes", "y", "checked"}


def normalize_number(raw: Any) -> Optional[float]:
    """Parse a numeric form value, returning None when blank or invalid."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", "")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def normalize_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def normalize_checkbox(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    return str(raw).strip().lower() in _CHECKBOX_TRUE


def normalize_duct_leakage(form: Mapping[str, Any]) -> DuctLeakageData:
    return DuctLeakageData(
        tonnage=normalize_number(form.get("tonnage")),
        measured_duct_leakage_cfm=normalize_number(form.get("measured_duct_leakage_cfm")),
        notes=normalize_text(form.get("notes")),
    )


def normalize_airflow(form: Mapping[str, Any]) -> AirflowData:
    return AirflowData(
        tonnage=normalize_number(form.get("tonnage")),
        measured_total_cfm=normalize_number(form.get("measured_total_cfm")),
        notes=normalize_text(form.get("notes")),
    )


def normalize_refrigerant_charge(form: Mapping[str, Any]) -> RefrigerantChargeData:
    return RefrigerantChargeData(
        lowest_return_air_db_f=normalize_number(form.get("lowest_return_air_db_f")),
        condenser_air_entering_db_f=normalize_number(form.get("condenser_air_entering_db_f")),
        outdoor_temp_f=normalize_number(form.get("outdoor_temp_f")),
        refrigerant_type=normalize_text(form.get("refrigerant_type")),
        liquid_line_temp_f=normalize_number(form.get("liquid_line_temp_f")),
        liquid_line_pressure_psig=normalize_number(form.get("liquid_line_pressure_psig")),
        condenser_sat_temp_f=normalize_number(form.get("condenser_sat_temp_f")),
        target_subcool_f=normalize_number(form.get("target_subcool_f")),
        suction_line_temp_f=normalize_number(form.get("suction_line_temp_f")),
        suction_line_pressure_psig=normalize_number(form.get("suction_line_pressure_psig")),
        evaporator_sat_temp_f=normalize_number(form.get("evaporator_sat_temp_f")),
        filter_drier_installed=normalize_checkbox(form.get("filter_drier_installed")),
        notes=normalize_text(form.get("notes")),
    )


def normalize_custom(form: Mapping[str, Any]) -> CustomTestData:
    return CustomTestData(
        test_name=normalize_text(form.get("test_name")),
        result_note=normalize_text(form.get("result_note")),
        notes=normalize_text(form.get("notes")),
    )


def normalize_measurements(test_type: TestType, form: Mapping[str, Any]) -> MeasurementData:
    """Normalize raw form input for ``test_type``."""
    if test_type == TestType.DUCT_LEAKAGE:
        return normalize_duct_leakage(form)
    if test_type == TestType.AIRFLOW:
        return normalize_airflow(form)
    if test_type == TestType.REFRIGERANT_CHARGE:
        return normalize_refrigerant_charge(form)
    return normalize_custom(form)

"""End-to-end tests for api.calculate: results, failures and contract guarantees."""

import math

import pytest
from pydantic import ValidationError

from wake_calculator import api
from wake_calculator.schemas import (
    CalculationFailure,
    CalculationResult,
    PhysicalConstants,
    SignCorrectionPolicy,
)


def _u(p_wake, c):
    return math.sqrt(2 * (c["P_tot_stream"] - p_wake) / c["rho"] + c["U_stream"] * c["U_stream"])


def _expected_drag(rows, c):
    """Independent integration over sorted rows: each strip takes its lower row's velocity."""
    rows = sorted(rows, key=lambda r: float(r["z (mm)"]))
    us = [_u(float(r["P_tot_y_10"]), c) for r in rows]
    drag = 0.0
    for i in range(len(rows) - 1):
        dA = c["width"] * abs(float(rows[i + 1]["z (mm)"]) - float(rows[i]["z (mm)"])) / 1000.0
        drag += abs(c["rho"] * us[i] * (c["U_stream"] - us[i]) * dA)
    return drag


class TestCalculateScenario:
    def test_drag_and_coefficients(self, scenario_rows, default_constants):
        out = api.calculate(scenario_rows, default_constants)
        assert isinstance(out, CalculationResult)
        c = default_constants
        drag = _expected_drag(scenario_rows, c)
        c_d = drag / (0.5 * c["rho"] * c["U_stream"] * c["U_stream"] * c["area"])
        assert out.total_drag == pytest.approx(drag, abs=1e-6)
        assert out.C_D == pytest.approx(c_d, abs=1e-6)
        assert out.SCD == pytest.approx(c_d * c["area"], abs=1e-9)

    def test_known_magnitudes(self, scenario_rows):
        out = api.calculate(scenario_rows)
        assert out.total_drag == pytest.approx(21.06, abs=0.01)
        assert out.C_D == pytest.approx(38.6, abs=0.1)

    def test_asymmetric_profile(self, default_constants):
        rows = [
            {"z (mm)": 0, "P_tot_y_10": 104000},
            {"z (mm)": 10, "P_tot_y_10": 98000},
            {"z (mm)": 20, "P_tot_y_10": 103000},
        ]
        out = api.calculate(rows, default_constants)
        assert isinstance(out, CalculationResult)
        assert out.total_drag == pytest.approx(_expected_drag(rows, default_constants), abs=1e-6)
        assert out.total_drag == pytest.approx(13.68911, abs=1e-4)

    def test_profile_shape(self, scenario_rows):
        out = api.calculate(scenario_rows)
        assert out.wake_column == "P_tot_y_10"
        assert out.profile.positions_mm == (0.0, 10.0, 20.0)
        assert len(out.profile.momentum_loss) == 2
        assert out.sign_corrected is False

    def test_defaults_used_when_constants_omitted(self, scenario_rows, default_constants):
        assert api.calculate(scenario_rows) == api.calculate(scenario_rows, default_constants)

    def test_accepts_constants_model(self, scenario_rows):
        out = api.calculate(scenario_rows, PhysicalConstants(rho=1.2))
        assert isinstance(out, CalculationResult)

    def test_row_order_does_not_matter(self, scenario_rows):
        assert api.calculate(list(reversed(scenario_rows))) == api.calculate(scenario_rows)

    def test_input_not_mutated(self, traverse_rows, default_constants):
        rows_snapshot = [dict(r) for r in traverse_rows]
        const_snapshot = dict(default_constants)
        api.calculate(traverse_rows, default_constants)
        assert traverse_rows == rows_snapshot
        assert default_constants == const_snapshot

    def test_result_is_frozen(self, scenario_rows):
        out = api.calculate(scenario_rows)
        with pytest.raises(ValidationError):
            out.total_drag = 0.0


class TestCalculateTraverse:
    def test_text_table_with_extra_columns(self, traverse_rows):
        out = api.calculate(traverse_rows)
        assert isinstance(out, CalculationResult)
        assert out.profile.positions_mm == (0.0, 10.0, 20.0)
        assert out.profile.wake_pressures[1] == 97500.5

    def test_reference_interpolation(self, traverse_rows):
        out = api.calculate(traverse_rows)
        assert out.interp_static == {"P_stat_y_0": pytest.approx(100100.0)}
        assert out.interp_total == {"P_tot_stream": pytest.approx(104750.0)}

    def test_no_stream_column_gives_empty_total_interpolation(self, scenario_rows):
        out = api.calculate(scenario_rows)
        assert out.interp_total == {}
        assert out.interp_static == {}


class TestSignCorrection:
    @pytest.fixture
    def offset_rows(self):
        return [
            {"z (mm)": 0, "P_tot_y_10": -1325, "P_atm (Pa)": 101325},
            {"z (mm)": 10, "P_tot_y_10": -3325, "P_atm (Pa)": 101325},
            {"z (mm)": 20, "P_tot_y_10": -1325, "P_atm (Pa)": 101325},
        ]

    def test_negative_readings_corrected(self, offset_rows):
        out = api.calculate(offset_rows)
        assert isinstance(out, CalculationResult)
        assert out.sign_corrected is True
        assert out.profile.wake_pressures == (100000.0, 98000.0, 100000.0)

    def test_corrected_matches_absolute_readings(self, offset_rows, scenario_rows):
        corrected = api.calculate(offset_rows)
        direct = api.calculate(scenario_rows)
        assert corrected.total_drag == pytest.approx(direct.total_drag)

    def test_disabled_policy_leaves_readings(self, offset_rows):
        out = api.calculate(offset_rows, sign_correction=SignCorrectionPolicy(enabled=False))
        assert isinstance(out, CalculationResult)
        assert out.sign_corrected is False
        assert out.profile.wake_pressures[0] == -1325.0

    def test_correction_can_expose_inconsistent_data(self):
        rows = [
            {"z (mm)": 0, "P_tot_y_10": -5, "P_atm (Pa)": 104800},
            {"z (mm)": 10, "P_tot_y_10": -3, "P_atm (Pa)": 104800},
        ]
        out = api.calculate(rows, {"P_tot_stream": 104796})
        assert isinstance(out, CalculationFailure)
        assert out.kind == "physically_inconsistent"

    def test_non_numeric_atm_fails_instead_of_integrating_gauge_readings(self, offset_rows):
        offset_rows[0]["P_atm (Pa)"] = "n/a"
        out = api.calculate(offset_rows)
        assert isinstance(out, CalculationFailure)
        assert out.kind == "non_finite_result"
        assert "P_atm (Pa)" in out.message


class TestCalculateFailures:
    @pytest.mark.parametrize("rows", [None, []])
    def test_empty_input(self, rows):
        out = api.calculate(rows)
        assert isinstance(out, CalculationFailure)
        assert out.kind == "empty_input"
        assert "No data uploaded" in out.message

    def test_empty_input_checked_before_constants(self):
        assert api.calculate([], {"rho": 0}).kind == "empty_input"

    @pytest.mark.parametrize("override", [
        {"rho": 0},
        {"width": -0.1},
        {"area": 0},
        {"U_stream": 0},
        {"P_tot_stream": float("nan")},
        {"rho": "abc"},
        {"viscosity": 1e-5},
    ])
    def test_invalid_constants(self, scenario_rows, default_constants, override):
        out = api.calculate(scenario_rows, {**default_constants, **override})
        assert isinstance(out, CalculationFailure)
        assert out.kind == "invalid_constants"

    def test_invalid_constants_names_field(self, scenario_rows):
        out = api.calculate(scenario_rows, {"rho": 0})
        assert "rho" in out.message

    def test_single_valid_row(self):
        rows = [{"z (mm)": 0, "P_tot_y_10": 100000}, {"z (mm)": "", "P_tot_y_10": 99000}]
        out = api.calculate(rows)
        assert out.kind == "insufficient_data"

    def test_missing_total_pressure_column(self):
        rows = [{"z (mm)": 0, "P_stat_y_0": 100000}, {"z (mm)": 10, "P_stat_y_0": 100000}]
        out = api.calculate(rows)
        assert out.kind == "missing_column"

    def test_wake_above_stream(self, scenario_rows):
        scenario_rows[1]["P_tot_y_10"] = 110000
        out = api.calculate(scenario_rows)
        assert out.kind == "physically_inconsistent"

    def test_missing_wake_reading_is_non_finite(self, scenario_rows):
        scenario_rows[1]["P_tot_y_10"] = ""
        out = api.calculate(scenario_rows)
        assert out.kind == "non_finite_result"

    def test_overflowing_constants_are_non_finite(self, scenario_rows, default_constants):
        constants = {**default_constants, "U_stream": 1e200, "P_tot_stream": 1e300}
        out = api.calculate(scenario_rows, constants)
        assert isinstance(out, CalculationFailure)
        assert out.kind == "non_finite_result"

    def test_failure_is_value_not_exception(self):
        out = api.calculate([{"foo": 1}])
        assert isinstance(out, CalculationFailure)
        assert out.kind == "insufficient_data"


class TestValidateConstants:
    def test_default_constants_is_a_copy(self):
        d = api.default_constants()
        d["rho"] = 99.0
        assert api.default_constants()["rho"] == 1.225

    def test_partial_mapping_filled_with_defaults(self):
        c = api.validate_constants({"rho": 1.2})
        assert c.rho == 1.2
        assert c.U_stream == 10.0

    def test_model_passes_through(self):
        c = PhysicalConstants()
        assert api.validate_constants(c) is c

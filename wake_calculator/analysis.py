"""
Wake survey pipeline steps (backend-only). Works on lists of row dicts; no I/O, no plotting.

Order used by api.calculate:
  discover_columns -> normalize_table -> interpolate_pressure
  -> correct_negative_total_pressure -> check_wake_below_stream
  -> integrate_wake -> total_drag -> drag_coefficients
"""
import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from . import calibration as CAL
from . import formulas as F
from .errors import InsufficientDataError, NonFiniteResultError, PhysicallyInconsistentDataError
from .schemas import ColumnSchema, PhysicalConstants, SignCorrectionPolicy, WakeProfile

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def coerce_number(value: Any) -> float:
    """Numeric cell value as float; empty or unparseable cells become NaN.

    Accepts text with a decimal comma ("98000,5") as exported by spreadsheets
    in comma-decimal locales.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    s_clean = str(value).strip().replace("\u00A0", "").replace(" ", "").replace(",", ".")
    if not s_clean:
        return math.nan
    try:
        return float(s_clean)
    except ValueError:
        return math.nan


def _header(rows: Iterable[Mapping[str, Any]]) -> List[str]:
    seen: Dict[str, None] = {}
    for r in rows:
        for k in r.keys():
            seen.setdefault(k, None)
    return list(seen)


def discover_columns(rows: Sequence[Mapping[str, Any]]) -> ColumnSchema:
    """Match the table header against the naming conventions once.

    Wake column: the reference-position rake column if present, else the
    first total-pressure column in header order, else None. The header is
    the union of keys over all rows in first-seen order, so a column
    missing from the first row is still found.
    """
    header = _header(rows)
    total = tuple(h for h in header if h.startswith(CAL.TOTAL_PREFIX))
    static = tuple(h for h in header if h.startswith(CAL.STATIC_PREFIX))
    atm = next((h for h in header if h in CAL.ATM_COLS), None)
    stream = CAL.STREAM_COL if CAL.STREAM_COL in header else None
    if CAL.PREFERRED_WAKE_COL in total:
        wake: Optional[str] = CAL.PREFERRED_WAKE_COL
    else:
        wake = total[0] if total else None
    schema = ColumnSchema(
        position=CAL.POSITION_COL, total=total, static=static, atm=atm, stream=stream, wake=wake,
    )
    logger.debug("Discovered columns: %s", schema)
    return schema


def normalize_table(rows: Sequence[Mapping[str, Any]], schema: Optional[ColumnSchema] = None) -> List[Row]:
    """Return copies of the valid rows, numeric columns coerced, sorted by position.

    Rows without a usable position are dropped. The sort is stable, so rows
    sharing a position keep their input order. Extra columns are kept as-is.
    Raises InsufficientDataError when fewer than two rows remain.
    """
    if schema is None:
        schema = discover_columns(rows)
    pos = schema.position
    out: List[Row] = []
    dropped = 0
    for r in rows:
        z = coerce_number(r.get(pos))
        if math.isnan(z):
            dropped += 1
            continue
        row = dict(r)
        for col in schema.numeric:
            if col in row:
                row[col] = coerce_number(row[col])
        out.append(row)
    if dropped:
        logger.warning("Dropped %d row(s) without a valid '%s'", dropped, pos)
    if len(out) < CAL.MIN_ROWS:
        raise InsufficientDataError()
    out.sort(key=lambda row: row[pos])
    return out


def _bounds(rows: Sequence[Mapping[str, Any]], y: float, pos: str) -> Tuple[Optional[Mapping[str, Any]], Optional[Mapping[str, Any]]]:
    lower = upper = None
    for r in rows:
        z = coerce_number(r.get(pos))
        if z <= y and (lower is None or z > coerce_number(lower.get(pos))):
            lower = r
        if z >= y and (upper is None or z < coerce_number(upper.get(pos))):
            upper = r
    return lower, upper


def interpolate_pressure(
        rows: Sequence[Mapping[str, Any]],
        y: float,
        columns: Iterable[str],
        position_column: str = CAL.POSITION_COL,
) -> Dict[str, Optional[float]]:
    """Linearly interpolate each column at position y.

    Bounds are the rows with the greatest z <= y and the smallest z >= y.
    Outside the data range the nearest bound is returned verbatim (no
    extrapolation); with no rows, or a missing cell, the value is None.
    """
    lower, upper = _bounds(rows, y, position_column)
    results: Dict[str, Optional[float]] = {}
    for col in columns:
        if lower is not None and upper is not None and lower is not upper:
            z1 = coerce_number(lower.get(position_column))
            z2 = coerce_number(upper.get(position_column))
            p1 = coerce_number(lower.get(col))
            p2 = coerce_number(upper.get(col))
            val = p1 + (p2 - p1) * (y - z1) / (z2 - z1)
        elif lower is not None:
            val = coerce_number(lower.get(col))
        elif upper is not None:
            val = coerce_number(upper.get(col))
        else:
            results[col] = None
            continue
        results[col] = val if math.isfinite(val) else None
    return results


def correct_negative_total_pressure(
        rows: Sequence[Mapping[str, Any]],
        schema: ColumnSchema,
        policy: Optional[SignCorrectionPolicy] = None,
) -> Tuple[List[Row], bool]:
    """Undo the gauge-reference offset seen in some traverse exports.

    When enough wake readings are negative (all of them by default) and an
    atmospheric column exists, the first row's atmospheric pressure is added
    to every negative value of every total-pressure column. Returns the
    corrected copies and whether the correction was applied. Raises
    NonFiniteResultError when a correction is due but that atmospheric
    cell is not a number.
    """
    policy = policy or SignCorrectionPolicy()
    out = [dict(r) for r in rows]
    if not policy.enabled or not out or schema.atm is None or schema.wake is None:
        return out, False
    wake_vals = [coerce_number(r.get(schema.wake)) for r in out]
    n_negative = sum(1 for v in wake_vals if v < 0)
    if n_negative / len(wake_vals) < policy.min_negative_fraction:
        return out, False
    p_atm = coerce_number(out[0].get(schema.atm))
    if not math.isfinite(p_atm):
        # raw gauge readings would integrate to a finite but meaningless drag
        raise NonFiniteResultError(
            f"Negative total pressures found but '{schema.atm}' in the first row is not a number; "
            "cannot convert the readings to absolute pressure."
        )
    for r in out:
        for col in schema.total:
            v = coerce_number(r.get(col))
            if v < 0:
                r[col] = v + p_atm
    logger.warning(
        "Negative total pressures in '%s' (%d/%d rows); added %s = %g Pa to %d column(s)",
        schema.wake, n_negative, len(wake_vals), schema.atm, p_atm, len(schema.total),
    )
    return out, True


def check_wake_below_stream(rows: Sequence[Mapping[str, Any]], wake_column: str, constants: PhysicalConstants) -> None:
    """Raise PhysicallyInconsistentDataError if any wake total pressure >= freestream."""
    offenders = [
        r.get(CAL.POSITION_COL) for r in rows
        if coerce_number(r.get(wake_column)) >= constants.P_tot_stream
    ]
    if offenders:
        logger.info("Wake pressure >= P_tot_stream at z = %s", offenders)
        raise PhysicallyInconsistentDataError()


def integrate_wake(
        rows: Sequence[Mapping[str, Any]],
        wake_column: str,
        constants: PhysicalConstants,
        position_column: str = CAL.POSITION_COL,
) -> WakeProfile:
    """Recover wake velocities and integrate momentum loss over the traverse.

    One velocity per row; one strip per adjacent pair of rows (n - 1 strips),
    each contributing the momentum deficit of its lower row over the strip area.
    """
    if len(rows) < CAL.MIN_ROWS:
        raise InsufficientDataError()
    zs = [coerce_number(r.get(position_column)) for r in rows]
    ps = [coerce_number(r.get(wake_column)) for r in rows]
    us = [F.wake_velocity(constants.P_tot_stream, p, constants.U_stream, constants.rho) for p in ps]
    widths: List[float] = []
    areas: List[float] = []
    losses: List[float] = []
    for i in range(len(rows) - 1):
        dz = F.segment_width_m(zs[i], zs[i + 1])
        dA = F.area_element(constants.width, dz)
        widths.append(dz)
        areas.append(dA)
        losses.append(F.momentum_loss(constants.rho, us[i], constants.U_stream, dA))
    return WakeProfile(
        positions_mm=tuple(zs),
        wake_pressures=tuple(ps),
        wake_velocities=tuple(us),
        segment_widths_m=tuple(widths),
        area_elements=tuple(areas),
        momentum_loss=tuple(losses),
    )


def total_drag(profile: WakeProfile) -> float:
    """Drag [N] = sum of |momentum loss| over all strips."""
    return sum(abs(m) for m in profile.momentum_loss)


def drag_coefficients(drag_n: float, constants: PhysicalConstants) -> Tuple[float, float]:
    """Return (C_D, SCD); raise NonFiniteResultError if C_D is not finite."""
    c_d = F.drag_coefficient(drag_n, constants.rho, constants.U_stream, constants.area)
    if not math.isfinite(c_d):
        raise NonFiniteResultError()
    return c_d, F.drag_area(c_d, constants.area)

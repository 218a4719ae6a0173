"""
Thin, stable API for the UI and CLI layers.

Contract (do not change the signature during UI work):
  - calculate(rows, constants=None, sign_correction=None)
        -> CalculationResult | CalculationFailure

Constants are validated via Pydantic and frozen for the duration of the call.
Controlled failures come back as CalculationFailure values, never as exceptions.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
import logging

from pydantic import ValidationError

from . import analysis as A
from . import calibration as CAL
from .errors import (
    BackendError,
    EmptyInputError,
    InvalidConstantsError,
    MissingColumnError,
)
from .schemas import (
    CalculationFailure,
    CalculationResult,
    PhysicalConstants,
    SignCorrectionPolicy,
)

logger = logging.getLogger(__name__)

Outcome = Union[CalculationResult, CalculationFailure]
ConstantsInput = Union[PhysicalConstants, Mapping[str, Any], None]


def default_constants() -> Dict[str, float]:
    """Default constants as a plain, editable dict."""
    return dict(CAL.DEFAULT_CONSTANTS)


def validate_constants(constants: ConstantsInput) -> PhysicalConstants:
    """Return an immutable constants snapshot or raise InvalidConstantsError."""
    if isinstance(constants, PhysicalConstants):
        return constants
    try:
        return PhysicalConstants.model_validate(dict(constants or {}))
    except ValidationError as e:
        bad = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise InvalidConstantsError(
            f"{InvalidConstantsError.default_message} Rejected: {', '.join(bad)}."
        ) from e


def calculate(
        rows: Optional[Sequence[Mapping[str, Any]]],
        constants: ConstantsInput = None,
        sign_correction: Optional[SignCorrectionPolicy] = None,
) -> Outcome:
    """Compute drag, C_D and SCD from a wake traverse table.

    Returns CalculationResult on success, CalculationFailure(kind, message)
    on any controlled failure.
    """
    try:
        return _calculate_impl(rows, constants, sign_correction)
    except BackendError as e:
        logger.info("calculate failed [%s]: %s", e.kind, e.message)
        return CalculationFailure(kind=e.kind, message=e.message)
    except Exception:
        logger.exception("calculate failed")
        raise


def _calculate_impl(
        rows: Optional[Sequence[Mapping[str, Any]]],
        constants: ConstantsInput,
        sign_correction: Optional[SignCorrectionPolicy],
) -> CalculationResult:
    if not rows:
        raise EmptyInputError()

    c = validate_constants(constants)
    policy = sign_correction or SignCorrectionPolicy()

    schema = A.discover_columns(rows)
    table = A.normalize_table(rows, schema)
    if schema.wake is None:
        raise MissingColumnError()
    logger.debug("Using wake column %s over %d rows", schema.wake, len(table))

    y = CAL.REFERENCE_POSITION_MM
    interp_static = A.interpolate_pressure(table, y, schema.static, schema.position)
    stream_cols: List[str] = [schema.stream] if schema.stream else []
    interp_total = A.interpolate_pressure(table, y, stream_cols, schema.position)

    table, corrected = A.correct_negative_total_pressure(table, schema, policy)
    A.check_wake_below_stream(table, schema.wake, c)

    profile = A.integrate_wake(table, schema.wake, c, schema.position)
    drag = A.total_drag(profile)
    c_d, scd = A.drag_coefficients(drag, c)

    return CalculationResult(
        total_drag=drag,
        C_D=c_d,
        SCD=scd,
        profile=profile,
        interp_static=interp_static,
        interp_total=interp_total,
        wake_column=schema.wake,
        sign_corrected=corrected,
        reference_position_mm=y,
    )

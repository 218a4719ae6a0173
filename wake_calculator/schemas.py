from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Dict, Tuple, Annotated, Literal
from pydantic import BaseModel, Field, ConfigDict

from . import calibration as CAL

# Common helpers
Positive = Annotated[float, Field(gt=0)]
Fraction = Annotated[float, Field(gt=0.0, le=1.0)]

ErrorKind = Literal[
    "empty_input",
    "invalid_constants",
    "insufficient_data",
    "missing_column",
    "physically_inconsistent",
    "non_finite_result",
]


class PhysicalConstants(BaseModel):
    """Immutable snapshot of tunnel/flow constants used for one calculation."""
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)
    width: Positive = CAL.DEFAULT_CONSTANTS["width"]
    height: float = CAL.DEFAULT_CONSTANTS["height"]
    area: Positive = CAL.DEFAULT_CONSTANTS["area"]
    U_stream: Positive = CAL.DEFAULT_CONSTANTS["U_stream"]
    P_tot_stream: float = CAL.DEFAULT_CONSTANTS["P_tot_stream"]
    rho: Positive = CAL.DEFAULT_CONSTANTS["rho"]


class SignCorrectionPolicy(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    enabled: bool = CAL.SIGN_CORRECTION_ENABLED
    # share of wake readings that must be negative to trigger; 1.0 means all
    min_negative_fraction: Fraction = CAL.SIGN_CORRECTION_MIN_NEGATIVE_FRACTION


@dataclass(frozen=True)
class ColumnSchema:
    """Columns discovered once per table from the naming conventions."""
    position: str
    total: Tuple[str, ...] = ()
    static: Tuple[str, ...] = ()
    atm: Optional[str] = None
    stream: Optional[str] = None
    wake: Optional[str] = None

    @property
    def numeric(self) -> Tuple[str, ...]:
        cols = [self.position, *self.total, *self.static]
        if self.atm:
            cols.append(self.atm)
        if self.stream:
            cols.append(self.stream)
        return tuple(cols)


class WakeProfile(BaseModel):
    model_config = ConfigDict(frozen=True)
    # per row (sorted order)
    positions_mm: Tuple[float, ...]
    wake_pressures: Tuple[float, ...]
    wake_velocities: Tuple[float, ...]
    # per segment (n_rows - 1)
    segment_widths_m: Tuple[float, ...]
    area_elements: Tuple[float, ...]
    momentum_loss: Tuple[float, ...]


class CalculationResult(BaseModel):
    model_config = ConfigDict(frozen=True)
    total_drag: float
    C_D: float
    SCD: float
    profile: WakeProfile
    interp_static: Dict[str, Optional[float]]
    interp_total: Dict[str, Optional[float]]
    wake_column: str
    sign_corrected: bool = False
    reference_position_mm: float = CAL.REFERENCE_POSITION_MM


class CalculationFailure(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: ErrorKind
    message: str

"""
Centralized tunnel constants and column conventions for the wake calculator.

Defaults describe the small return-circuit tunnel the traverse rig was built
for. Change them here (or override per run from the CLI/UI); the pipeline
never reads them implicitly once a PhysicalConstants snapshot exists.
"""
from typing import Dict, Tuple

# --- Column naming conventions (traverse export format) ---
POSITION_COL: str = "z (mm)"
TOTAL_PREFIX: str = "P_tot_y_"
STATIC_PREFIX: str = "P_stat_y_"
ATM_COLS: Tuple[str, ...] = ("P_atm (Pa)", "P_atm")
STREAM_COL: str = "P_tot_stream"

# Reference probe position [mm]; static/freestream columns are read here and
# the wake rake column recorded at this position is preferred.
REFERENCE_POSITION_MM: float = 10.0
PREFERRED_WAKE_COL: str = f"{TOTAL_PREFIX}10"

# --- Unit conversion ---
MM_TO_M: float = 1e-3

# --- Default physical constants (SI) ---
DEFAULT_CONSTANTS: Dict[str, float] = {
    "width": 0.1,           # [m]   test section width
    "height": 0.089,        # [m]   test section height
    "area": 0.0089,         # [m^2] reference area
    "U_stream": 10.0,       # [m/s] freestream velocity
    "P_tot_stream": 104800.0,  # [Pa] freestream total pressure
    "rho": 1.225,           # [kg/m^3]
}

# Units shown next to each constant (CLI help, UI suffixes)
CONSTANT_UNITS: Dict[str, str] = {
    "width": "m",
    "height": "m",
    "area": "m²",
    "U_stream": "m/s",
    "P_tot_stream": "Pa",
    "rho": "kg/m³",
}

# --- Sign correction policy defaults ---
# 1.0 == every wake reading must be negative before the atmospheric offset is added.
SIGN_CORRECTION_ENABLED: bool = True
SIGN_CORRECTION_MIN_NEGATIVE_FRACTION: float = 1.0

# Minimum number of valid traverse rows for one integration segment
MIN_ROWS: int = 2

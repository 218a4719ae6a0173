# -----------------------------------------------------------------------------
# Wake survey formulas
# -----------------------------------------------------------------------------
# - Unit conversion for traverse positions (mm -> m)
# - Wake velocity from total pressure deficit (Bernoulli)
# - Area element of one traverse strip
# - Momentum deficit flux and its strip contribution
# - Dynamic pressure, drag coefficient and drag area (SCD)
#
# Note: these are plain incompressible-flow relations for a wake rake; no
# blockage or turbulence corrections are applied.
# -----------------------------------------------------------------------------

import math

from .calibration import MM_TO_M


def mm_to_m(x_mm: float) -> float:
    """Millimeters → meters."""
    return x_mm * MM_TO_M


def segment_width_m(z0_mm: float, z1_mm: float) -> float:
    """Width of one traverse strip [m] = |z1 - z0| converted from mm."""
    return abs(z1_mm - z0_mm) * MM_TO_M


def area_element(width_m: float, dz_m: float) -> float:
    """
    Area element of one strip [m²]:
        dA = width * dz
    """
    if width_m <= 0:
        raise ValueError("width_m > 0")
    return width_m * dz_m


def wake_velocity(p_tot_stream: float, p_tot_wake: float, u_stream: float, rho: float) -> float:
    """
    Wake velocity [m/s] from Bernoulli along a streamline through the rake:
        U_wake = sqrt(max(0, 2*(P_tot_stream - P_tot_wake)/rho + U_stream^2))
    A negative radicand (noise) gives exactly 0.0. A NaN pressure gives NaN so
    missing readings surface in the final coefficient check.
    Args:
        p_tot_stream: freestream total pressure [Pa]
        p_tot_wake: wake total pressure [Pa]
        u_stream: freestream velocity [m/s]
        rho: density [kg/m³]
    Returns:
        float: wake velocity [m/s]
    """
    if rho <= 0:
        raise ValueError("rho > 0")
    radicand = 2.0 * (p_tot_stream - p_tot_wake) / rho + u_stream * u_stream
    if math.isnan(radicand):
        return math.nan
    return math.sqrt(max(0.0, radicand))


def momentum_flux(rho: float, u_wake: float, u_stream: float) -> float:
    """Momentum deficit flux per unit area [N/m²] = rho * U_wake * (U_stream - U_wake)."""
    return rho * u_wake * (u_stream - u_wake)


def momentum_loss(rho: float, u_wake: float, u_stream: float, dA: float) -> float:
    """
    Momentum loss through one strip [N], evaluated at the strip's lower row:
        dD = rho * U_wake * (U_stream - U_wake) * dA
    """
    return momentum_flux(rho, u_wake, u_stream) * dA


def dynamic_pressure(rho: float, u_stream: float) -> float:
    """q = 0.5 * rho * U^2 [Pa]."""
    return 0.5 * rho * u_stream * u_stream


def drag_coefficient(drag_n: float, rho: float, u_stream: float, area_m2: float) -> float:
    """
    Drag coefficient [-]:
        C_D = D / (0.5 * rho * U_stream^2 * area)
    Returns NaN/inf instead of raising when the denominator vanishes; the
    caller decides whether the value is usable.
    """
    q_area = dynamic_pressure(rho, u_stream) * area_m2
    if q_area == 0:
        return math.inf if drag_n else math.nan
    return drag_n / q_area


def drag_area(c_d: float, area_m2: float) -> float:
    """SCD = C_D * area [m²]."""
    return c_d * area_m2

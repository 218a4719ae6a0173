"""
Controlled failure modes of the wake pipeline.

Pipeline steps raise these; api.calculate turns them into CalculationFailure
values so callers never see them as exceptions.
"""
from __future__ import annotations

from typing import Optional


class BackendError(Exception):
    """Raised when backend computation fails in a controlled way."""
    kind: str = "backend_error"
    default_message: str = "Calculation failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class EmptyInputError(BackendError):
    kind = "empty_input"
    default_message = "No data uploaded: load a CSV or Excel file before calculating."


class InvalidConstantsError(BackendError):
    kind = "invalid_constants"
    default_message = "Invalid constants: width, area, U_stream and rho must be positive numbers."


class InsufficientDataError(BackendError):
    kind = "insufficient_data"
    default_message = "Insufficient data: at least two rows with a valid 'z (mm)' are required."


class MissingColumnError(BackendError):
    kind = "missing_column"
    default_message = "No total-pressure column found (expected a column named 'P_tot_y_*')."


class PhysicallyInconsistentDataError(BackendError):
    kind = "physically_inconsistent"
    default_message = (
        "Wake pressure exceeds freestream: P_tot_stream must be greater than every "
        "P_tot_wake value. Check the file and the constants."
    )


class NonFiniteResultError(BackendError):
    kind = "non_finite_result"
    default_message = "Invalid drag coefficient (C_D): check that all constants and data are correct."

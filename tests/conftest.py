"""Shared fixtures for the wake calculator test suite."""

import sys
import os
import pytest

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture
def default_constants():
    """Default tunnel constants as a plain mapping."""
    return {
        "width": 0.1,
        "height": 0.089,
        "area": 0.0089,
        "U_stream": 10.0,
        "P_tot_stream": 104800.0,
        "rho": 1.225,
    }


@pytest.fixture
def scenario_rows():
    """Three-point traverse with a pressure dip on the centreline."""
    return [
        {"z (mm)": 0, "P_tot_y_10": 100000},
        {"z (mm)": 10, "P_tot_y_10": 98000},
        {"z (mm)": 20, "P_tot_y_10": 100000},
    ]


@pytest.fixture
def traverse_rows():
    """Unsorted, text-valued traverse as delivered by the CSV reader."""
    return [
        {"z (mm)": "20", "P_tot_y_10": "100500", "P_tot_y_20": "101000", "P_stat_y_0": "100200",
         "P_atm (Pa)": "101325", "P_tot_stream": "104700", "note": "edge"},
        {"z (mm)": "0", "P_tot_y_10": "100400", "P_tot_y_20": "100900", "P_stat_y_0": "100000",
         "P_atm (Pa)": "101325", "P_tot_stream": "104800", "note": ""},
        {"z (mm)": "10", "P_tot_y_10": "97500,5", "P_tot_y_20": "99000", "P_stat_y_0": "100100",
         "P_atm (Pa)": "101325", "P_tot_stream": "104750", "note": "centre"},
        {"z (mm)": "", "P_tot_y_10": "1", "P_tot_y_20": "1", "P_stat_y_0": "1",
         "P_atm (Pa)": "1", "P_tot_stream": "1", "note": "blank position"},
    ]

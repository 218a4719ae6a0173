"""
Minimal CLI for batch wake calculations (no GUI).

Usage examples:
  python -m wake_calculator.cli calculate --input traverse.csv
  python -m wake_calculator.cli calculate --input traverse.xlsx --rho 1.2 --output result.json
  python -m wake_calculator.cli defaults --output constants.json

Commands:
  - calculate: drag, C_D and SCD from a traverse table (.csv/.xlsx)
  - defaults: prints the default physical constants
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List
import csv
import os

from pydantic import ValidationError

from . import api
from . import calibration as CAL
from . import io
from .schemas import CalculationFailure, CalculationResult, SignCorrectionPolicy


def _read_json(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_output(obj: Any, path: str | None) -> None:
    if not path:
        json.dump(obj, sys.stdout, ensure_ascii=False)
        sys.stdout.write("\n")
        return
    ext = os.path.splitext(path)[1].lower()
    if ext == ".json":
        with open(path, "w", encoding="utf-8") as f:
            json.dump(obj, f, ensure_ascii=False)
    elif ext == ".csv":
        # Flatten dict-of-scalars or dict-of-lists
        if isinstance(obj, dict) and all(not isinstance(v, list) for v in obj.values()):
            with open(path, "w", newline="", encoding="utf-8") as f:
                w = csv.writer(f)
                w.writerow(list(obj.keys()))
                w.writerow([obj[k] for k in obj.keys()])
        elif isinstance(obj, dict) and any(isinstance(v, list) for v in obj.values()):
            keys = list(obj.keys())
            n = max(len(v) if isinstance(v, list) else 1 for v in obj.values())
            with open(path, "w", newline="", encoding="utf-8") as f:
                w = csv.writer(f)
                w.writerow(keys)
                for i in range(n):
                    row = []
                    for k in keys:
                        v = obj[k]
                        if isinstance(v, list):
                            row.append(v[i] if i < len(v) else "")
                        else:
                            row.append(v if i == 0 else "")
                    w.writerow(row)
        else:
            with open(path, "w", encoding="utf-8") as f:
                f.write(str(obj))
    else:
        raise SystemExit(f"Unsupported output extension: {ext} (use .json or .csv)")


def _flatten_result(result: CalculationResult) -> Dict[str, Any]:
    """Column-oriented view of a result for CSV export (per-row and per-segment series)."""
    p = result.profile
    out: Dict[str, Any] = {
        "total_drag_N": result.total_drag,
        "C_D": result.C_D,
        "SCD_m2": result.SCD,
        "wake_column": result.wake_column,
        "sign_corrected": result.sign_corrected,
        "z_mm": list(p.positions_mm),
        "P_tot_wake_Pa": list(p.wake_pressures),
        "U_wake_ms": list(p.wake_velocities),
        "dz_m": list(p.segment_widths_m),
        "dA_m2": list(p.area_elements),
        "momentum_loss_N": list(p.momentum_loss),
    }
    for col, v in {**result.interp_static, **result.interp_total}.items():
        out[f"{col}@{result.reference_position_mm:g}mm"] = v
    return out


def _constants_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    constants: Dict[str, Any] = api.default_constants()
    if args.constants:
        constants.update(_read_json(args.constants))
    for name in CAL.DEFAULT_CONSTANTS:
        v = getattr(args, name, None)
        if v is not None:
            constants[name] = v
    return constants


def cmd_calculate(args: argparse.Namespace) -> int:
    rows = io.read_table(args.input)
    constants = _constants_from_args(args)
    try:
        policy = SignCorrectionPolicy(
            enabled=not args.no_sign_correction,
            min_negative_fraction=args.min_negative_fraction,
        )
    except ValidationError:
        sys.stderr.write("error: --min-negative-fraction must be in (0, 1]\n")
        return 2
    out = api.calculate(rows, constants, policy)
    if isinstance(out, CalculationFailure):
        sys.stderr.write(f"error [{out.kind}]: {out.message}\n")
        return 1
    if args.output and os.path.splitext(args.output)[1].lower() == ".csv":
        _write_output(_flatten_result(out), args.output)
    else:
        _write_output(out.model_dump(), args.output)
    return 0


def cmd_defaults(args: argparse.Namespace) -> int:
    _write_output(api.default_constants(), args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="wake-calculator", description="Wind tunnel wake drag calculator (no GUI)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log pipeline steps to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_calc = sub.add_parser("calculate", help="Compute drag, C_D and SCD from a traverse table")
    p_calc.add_argument("--input", required=True, help="Path to traverse table (.csv or .xlsx)")
    p_calc.add_argument("--constants", required=False, help="JSON file overriding default constants")
    for name, default in CAL.DEFAULT_CONSTANTS.items():
        p_calc.add_argument(
            f"--{name}", type=float, default=None,
            help=f"{name} [{CAL.CONSTANT_UNITS[name]}] (default {default:g})",
        )
    p_calc.add_argument("--no-sign-correction", action="store_true", help="Never add P_atm to negative total pressures")
    p_calc.add_argument(
        "--min-negative-fraction", type=float, default=CAL.SIGN_CORRECTION_MIN_NEGATIVE_FRACTION,
        help="Share of negative wake readings that triggers sign correction (default 1.0 = all)",
    )
    p_calc.add_argument("--output", required=False, help="Output file (.json or .csv)")
    p_calc.set_defaults(func=cmd_calculate)

    p_def = sub.add_parser("defaults", help="Print default physical constants")
    p_def.add_argument("--output", required=False, help="Output file (.json or .csv)")
    p_def.set_defaults(func=cmd_defaults)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())

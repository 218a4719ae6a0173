from __future__ import annotations

COLORS = {
  "velocity": "#38BDF8",
  "stream": "#7DD3FC",
  "reference": "#90A4AE",
  "ok": "#00C853",
  "warn": "#FFC400",
  "crit": "#FF1744",
  "neutral": "#90A4AE",
  "bg": "#181C24",
  "panel": "#232733",
  "grid": "#2D3340",
}

# Sanity badges for the coefficient cards (bluff bodies rarely exceed C_D ~ 2)
THRESHOLDS = {
  "cd_warn": 2.0, "cd_crit": 5.0,
}

"""Helpers for inspecting residuals after a baseline fit."""
from __future__ import annotations

from typing import Sequence

import pandas as pd
from statsmodels.nonparametric.smoothers_lowess import lowess

from ..core.spec import OutlierThresholds
from ..daily.calendar import time_index


def _require_resid(days: pd.DataFrame) -> None:
    if "resid" not in days.columns:
        raise ValueError("day table has no 'resid' column; compute residuals first")


def residual_summary(days: pd.DataFrame, by: Sequence[str] = ("wday",)) -> pd.DataFrame:
    """Per-group count, mean, median and sum of residuals."""

    _require_resid(days)
    grouped = days.groupby(list(by), observed=True, sort=True)["resid"]
    summary = grouped.agg(days="count", mean="mean", median="median", total="sum")
    return summary.reset_index()


def flag_outliers(
    days: pd.DataFrame,
    thresholds: OutlierThresholds | None = None,
) -> pd.DataFrame:
    """Return the days whose residual lies outside ``[lower, upper]``.

    The result is sorted by date and carries a ``direction`` column
    (``low`` or ``high``).
    """

    _require_resid(days)
    thresholds = thresholds or OutlierThresholds()
    low = days["resid"] < thresholds.lower
    high = days["resid"] > thresholds.upper
    out = days.loc[low | high].copy()
    out["direction"] = ["low" if r < thresholds.lower else "high" for r in out["resid"]]
    return out.sort_values("date").reset_index(drop=True)


def smooth_residuals(days: pd.DataFrame, frac: float = 0.2, it: int = 3) -> pd.DataFrame:
    """Add a LOWESS ``smooth`` column tracing the residual trend over time."""

    _require_resid(days)
    if not 0 < frac <= 1:
        raise ValueError("frac must be in (0, 1]")
    out = days.sort_values("date").reset_index(drop=True)
    if len(out) < 3:
        out["smooth"] = out["resid"].astype(float)
        return out
    x = time_index(out["date"])
    out["smooth"] = lowess(
        out["resid"].to_numpy(dtype=float), x, frac=frac, it=it, return_sorted=False
    )
    return out


def weekday_profile(days: pd.DataFrame, wday: str = "Sat") -> pd.DataFrame:
    """Return the rows for a single weekday, in date order."""

    mask = days["wday"].astype(str) == wday
    return days.loc[mask].sort_values("date").reset_index(drop=True)

"""Run one step of the daily flights analysis from an ``AnalysisSpec``."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd

from .analysis import diagnostics
from .api.schemas import AnalysisSpec
from .config import get_settings
from .core.dataset import load_events
from .daily.aggregate import daily_counts
from .daily.calendar import add_calendar_features
from .io import artifacts
from .models import fit, grid, residuals

logger = logging.getLogger(__name__)


def _features(spec: AnalysisSpec) -> fit.ModelFeatures:
    return fit.ModelFeatures(
        term=spec.model.term,
        spline_df=spec.model.spline_df,
        spline_by_wday=spec.model.spline_by_wday,
    )


def fit_model(days: pd.DataFrame, spec: AnalysisSpec) -> fit.FittedModel:
    """Fit the baseline requested by ``spec.model`` on a featured day table."""

    maxiter = spec.model.maxiter or get_settings().robust_maxiter
    features = _features(spec)
    if spec.model.fallback:
        return fit.fit_with_fallback(
            days, features, family=spec.model.family, maxiter=maxiter, tol=spec.model.tol
        )
    return fit.fit_baseline(
        days, features, family=spec.model.family, maxiter=maxiter, tol=spec.model.tol
    )


def build_grid(days: pd.DataFrame, model: fit.FittedModel, spec: AnalysisSpec) -> pd.DataFrame:
    categorical = [col for col in spec.grid.categorical if col in days.columns]
    for col in model.features.categorical:
        if col not in categorical:
            categorical.append(col)
    over_time = spec.grid.over_time or model.features.uses_time
    frame = grid.data_grid(
        days,
        categorical=categorical,
        continuous="date" if over_time else None,
        n=spec.grid.points,
    )
    return grid.predict_grid(model, frame)


def run(spec: AnalysisSpec) -> Dict[str, Any]:
    """Aggregate, featurise, fit, and compute residuals, grid and outliers."""

    events = load_events(spec.data)
    days = daily_counts(events, date_col=spec.data.date_col)
    summary: Dict[str, Any] = {"events": int(len(events)), "days": int(len(days))}
    if days.empty:
        logger.warning("no events in the requested window; nothing to fit")
        summary.update({"family": None, "formula": None, "outliers": [], "grid_points": 0})
        return summary

    boundaries = spec.terms.to_boundaries()
    featured = add_calendar_features(days, boundaries, with_term=spec.model.term)
    model = fit_model(featured, spec)
    resid = residuals.add_residuals(featured, model)
    grid_df = build_grid(featured, model, spec)
    outliers = diagnostics.flag_outliers(resid, spec.outliers.to_thresholds())
    by_wday = diagnostics.residual_summary(resid, by=["wday"])

    summary.update(
        {
            "family": model.family,
            "formula": model.formula,
            "iterations": model.iterations,
            "nobs": model.nobs,
            "coefficients": {str(name): float(value) for name, value in model.params.items()},
            "residual_sd": float(np.std(resid["resid"].to_numpy(), ddof=1)) if len(resid) > 1 else 0.0,
            "residual_by_wday": {
                str(row.wday): float(row.total) for row in by_wday.itertuples(index=False)
            },
            "outliers": [
                {
                    "date": row.date.strftime("%Y-%m-%d"),
                    "n": int(row.n),
                    "resid": float(row.resid),
                    "direction": row.direction,
                }
                for row in outliers.itertuples(index=False)
            ],
            "grid_points": int(len(grid_df)),
            "extrapolated_points": int(grid_df["extrapolated"].sum()),
        }
    )

    out_dir = spec.artifacts.out_dir or get_settings().artifacts_dir
    if out_dir:
        root = Path(out_dir)
        root.mkdir(parents=True, exist_ok=True)
        artifacts.write_residuals(root / "residuals.csv", resid)
        artifacts.write_grid(root / "grid.csv", grid_df)
        artifacts.write_summary(root / "summary.json", summary)
        summary["artifacts"] = str(root)
    logger.info(
        "%s fit over %d days: residual sd %.2f, %d outlier days",
        model.family,
        summary["days"],
        summary["residual_sd"],
        len(summary["outliers"]),
    )
    return summary

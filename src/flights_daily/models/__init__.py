"""Baseline fitting, residuals and grid predictions."""
from __future__ import annotations

from .fit import FittedModel, ModelFeatures, build_formula, fit_baseline, fit_with_fallback
from .grid import data_grid, predict_grid, seq_range
from .residuals import add_predictions, add_residuals, gather_predictions, spread_predictions

__all__ = [
    "FittedModel",
    "ModelFeatures",
    "add_predictions",
    "add_residuals",
    "build_formula",
    "data_grid",
    "fit_baseline",
    "fit_with_fallback",
    "gather_predictions",
    "predict_grid",
    "seq_range",
    "spread_predictions",
]

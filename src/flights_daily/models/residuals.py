"""Attach model predictions and residuals to a day table."""
from __future__ import annotations

from typing import Mapping

import pandas as pd

from .fit import FittedModel


def add_predictions(days: pd.DataFrame, model: FittedModel, var: str = "pred") -> pd.DataFrame:
    """Return a copy of ``days`` with a prediction column."""

    out = days.copy()
    out[var] = model.predict(days).to_numpy()
    return out


def add_residuals(
    days: pd.DataFrame,
    model: FittedModel,
    var: str = "resid",
    pred_var: str = "pred",
) -> pd.DataFrame:
    """Return a copy of ``days`` with ``pred`` and ``resid = n - pred``.

    Prediction failures (e.g. an unseen weekday or term level) propagate as
    :class:`~flights_daily.errors.ExtrapolationError`.
    """

    out = add_predictions(days, model, var=pred_var)
    out[var] = out["n"].astype(float) - out[pred_var]
    return out


def gather_predictions(
    days: pd.DataFrame,
    models: Mapping[str, FittedModel],
    var: str = "pred",
) -> pd.DataFrame:
    """Stack predictions from several models in long format.

    One block of rows per model, labelled by a ``model`` column.
    """

    if not models:
        raise ValueError("at least one model is required")
    blocks = []
    for name, model in models.items():
        block = add_predictions(days, model, var=var)
        block.insert(0, "model", name)
        blocks.append(block)
    return pd.concat(blocks, ignore_index=True)


def spread_predictions(days: pd.DataFrame, models: Mapping[str, FittedModel]) -> pd.DataFrame:
    """Return ``days`` with one prediction column per model name."""

    out = days.copy()
    for name, model in models.items():
        out[name] = model.predict(days).to_numpy()
    return out

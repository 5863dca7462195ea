"""Evenly spaced prediction grids for visualising fitted baselines."""
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from ..daily.calendar import time_index
from .fit import FittedModel

logger = logging.getLogger(__name__)


def seq_range(values: Iterable, n: int) -> np.ndarray | pd.DatetimeIndex:
    """Return ``n`` evenly spaced points spanning the range of ``values``.

    The first and last points are the minimum and maximum of ``values``.
    A single point is the midpoint of the range.  Datetime inputs produce a
    :class:`pandas.DatetimeIndex`, numeric inputs a float array.
    """

    if n < 1:
        raise ValueError("n must be a positive integer")
    series = pd.Series(list(values))
    if series.empty:
        raise ValueError("cannot build a range from no values")
    if pd.api.types.is_datetime64_any_dtype(series) or isinstance(series.iloc[0], date):
        series = pd.to_datetime(series)
        lo, hi = series.min(), series.max()
        if n == 1:
            return pd.DatetimeIndex([lo + (hi - lo) / 2])
        return pd.date_range(lo, hi, periods=n)
    series = pd.to_numeric(series)
    lo, hi = float(series.min()), float(series.max())
    if n == 1:
        return np.array([(lo + hi) / 2.0])
    return np.linspace(lo, hi, n)


def _levels(series: pd.Series) -> List:
    if isinstance(series.dtype, pd.CategoricalDtype):
        present = set(series.dropna())
        return [c for c in series.cat.categories if c in present]
    return sorted(series.dropna().unique())


def data_grid(
    days: pd.DataFrame,
    categorical: Sequence[str] = ("wday",),
    continuous: str | None = None,
    n: int = 20,
) -> pd.DataFrame:
    """Cross every observed level of ``categorical`` with a ``seq_range``.

    With ``continuous="date"`` a matching ``t`` time-index column is added so
    the grid can be fed directly to spline baselines.
    """

    axes = []
    names = []
    for col in categorical:
        axes.append(_levels(days[col]))
        names.append(col)
    if continuous is not None:
        axes.append(list(seq_range(days[continuous], n)))
        names.append(continuous)
    if not axes:
        raise ValueError("a grid needs at least one categorical or continuous axis")

    grid = pd.MultiIndex.from_product(axes, names=names).to_frame(index=False)
    for col in categorical:
        dtype = days[col].dtype
        if isinstance(dtype, pd.CategoricalDtype):
            grid[col] = pd.Categorical(
                grid[col], categories=dtype.categories, ordered=dtype.ordered
            )
    if continuous == "date":
        grid["date"] = pd.to_datetime(grid["date"])
        grid["t"] = time_index(grid["date"])
    return grid


def predict_grid(model: FittedModel, grid: pd.DataFrame, var: str = "pred") -> pd.DataFrame:
    """Predict over a synthetic grid and flag extrapolated points.

    ``extrapolated`` marks combinations never observed while fitting or time
    values outside the training range.  Those predictions should be checked
    against nearby observed days before being trusted.
    """

    out = grid.copy()
    out[var] = model.predict(grid).to_numpy()
    out["extrapolated"] = ~model.in_domain(grid).to_numpy()
    flagged = int(out["extrapolated"].sum())
    if flagged:
        logger.warning("%d of %d grid points extrapolate beyond the training data", flagged, len(out))
    return out

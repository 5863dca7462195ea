"""Baseline models for daily counts.

A baseline explains the daily count ``n`` with the weekday, optionally
interacted with the term, optionally plus a smooth trend over time built
from a natural cubic regression spline (``patsy.cr``).  Two families are
available:

``ols``
    ordinary least squares (``statsmodels`` ``ols``).
``robust``
    iteratively reweighted least squares with Huber's T norm
    (``statsmodels`` ``rlm``), which down-weights outlying days such as
    holidays.

Fitting is deterministic; no family uses random initialisation.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Tuple

import numpy as np
import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf

from ..daily.calendar import time_index
from ..errors import ExtrapolationError, NumericalNonConvergenceError

logger = logging.getLogger(__name__)

FAMILIES = ("ols", "robust")


@dataclass(frozen=True)
class ModelFeatures:
    """Which calendar features enter the baseline formula."""

    term: bool = False
    spline_df: int | None = None
    spline_by_wday: bool = False

    def __post_init__(self) -> None:
        if self.spline_df is not None and self.spline_df < 3:
            raise ValueError("spline_df must be at least 3")
        if self.spline_by_wday and self.spline_df is None:
            raise ValueError("spline_by_wday requires spline_df")

    @property
    def categorical(self) -> Tuple[str, ...]:
        return ("wday", "term") if self.term else ("wday",)

    @property
    def uses_time(self) -> bool:
        return self.spline_df is not None


def build_formula(features: ModelFeatures, response: str = "n") -> str:
    """Return the patsy formula for a feature selection."""

    rhs = "wday * term" if features.term else "wday"
    if features.spline_df is not None:
        spline = f"cr(t, df={features.spline_df}, constraints='center')"
        if features.spline_by_wday:
            if features.term:
                rhs = f"{rhs} + {spline} + wday:{spline}"
            else:
                rhs = f"{rhs} * {spline}"
        else:
            rhs = f"{rhs} + {spline}"
    return f"{response} ~ {rhs}"


@dataclass(frozen=True)
class FittedModel:
    """An immutable fitted baseline together with its training domain."""

    formula: str
    family: str
    features: ModelFeatures
    results: Any = field(repr=False, compare=False)
    levels: Mapping[str, Tuple[str, ...]]
    combinations: FrozenSet[Tuple[str, ...]]
    t_range: Tuple[float, float] | None = None
    iterations: int | None = None

    @property
    def params(self) -> pd.Series:
        return pd.Series(self.results.params)

    @property
    def nobs(self) -> int:
        return int(self.results.nobs)

    def design_data(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Return ``frame`` recast onto the training levels.

        Raises :class:`ExtrapolationError` when a categorical value was never
        seen while fitting, since no coefficient exists for it.
        """

        return _prepare(frame, self.features, self.levels)

    def predict(self, frame: pd.DataFrame) -> pd.Series:
        """Predict counts for every row of ``frame``."""

        if frame.empty:
            return pd.Series(dtype=float, index=frame.index, name="pred")
        data = self.design_data(frame)
        pred = self.results.predict(data)
        return pd.Series(np.asarray(pred, dtype=float), index=frame.index, name="pred")

    def in_domain(self, frame: pd.DataFrame) -> pd.Series:
        """Return ``True`` for rows inside the observed training domain."""

        cols = list(self.features.categorical)
        keys = frame[cols].astype(str).itertuples(index=False, name=None)
        inside = np.array([tuple(k) in self.combinations for k in keys], dtype=bool)
        if self.t_range is not None:
            t = _time_column(frame)
            lo, hi = self.t_range
            inside &= (t >= lo) & (t <= hi)
        return pd.Series(inside, index=frame.index, name="in_domain")


# ---------------------------------------------------------------------------


def _time_column(frame: pd.DataFrame) -> np.ndarray:
    if "t" in frame.columns:
        return frame["t"].to_numpy(dtype=float)
    if "date" in frame.columns:
        return time_index(frame["date"])
    raise ValueError("a time trend needs either a 't' or a 'date' column")


def _prepare(
    frame: pd.DataFrame,
    features: ModelFeatures,
    levels: Mapping[str, Tuple[str, ...]],
) -> pd.DataFrame:
    data = frame.copy()
    for col in features.categorical:
        if col not in data.columns:
            raise ValueError(f"missing feature column {col!r}; add calendar features first")
        values = data[col].astype(object).astype(str)
        unseen = sorted(set(values) - set(levels[col]))
        if unseen:
            raise ExtrapolationError(
                f"no prediction for {col}={', '.join(unseen)}: level absent from the training data"
            )
        data[col] = pd.Categorical(values, categories=list(levels[col]))
    if features.uses_time:
        data["t"] = _time_column(data)
    return data


def _training_levels(days: pd.DataFrame, features: ModelFeatures) -> Dict[str, Tuple[str, ...]]:
    levels: Dict[str, Tuple[str, ...]] = {}
    for col in features.categorical:
        if col not in days.columns:
            raise ValueError(f"missing feature column {col!r}; add calendar features first")
        series = days[col]
        if isinstance(series.dtype, pd.CategoricalDtype):
            observed = set(series.astype(object).astype(str))
            ordered = [str(c) for c in series.cat.categories if str(c) in observed]
        else:
            ordered = sorted(set(series.astype(str)))
        levels[col] = tuple(ordered)
    return levels


def _check_robust_convergence(results: Any, maxiter: int, tol: float) -> int:
    history = results.fit_history
    iterations = int(history.get("iteration", 0))
    deviance: List[float] = list(history.get("deviance", []))
    settled = len(deviance) >= 2 and bool(
        np.isclose(deviance[-1], deviance[-2], rtol=0.0, atol=tol)
    )
    if iterations >= maxiter and not settled:
        raise NumericalNonConvergenceError(iterations, tol)
    return iterations


def fit_baseline(
    days: pd.DataFrame,
    features: ModelFeatures | None = None,
    family: str = "ols",
    maxiter: int = 50,
    tol: float = 1e-8,
) -> FittedModel:
    """Fit a baseline model to a day table carrying calendar features."""

    features = features or ModelFeatures()
    if family not in FAMILIES:
        raise ValueError(f"family must be one of {FAMILIES}, got {family!r}")
    if days.empty:
        raise ValueError("cannot fit a baseline on an empty day table")
    if "n" not in days.columns:
        raise ValueError("day table must carry the 'n' count column")

    levels = _training_levels(days, features)
    data = _prepare(days, features, levels)
    data["n"] = data["n"].astype(float)
    formula = build_formula(features)

    iterations: int | None = None
    if family == "ols":
        results = smf.ols(formula, data=data).fit()
    else:
        results = smf.rlm(formula, data=data, M=sm.robust.norms.HuberT()).fit(
            maxiter=maxiter, tol=tol, conv="dev"
        )
        iterations = _check_robust_convergence(results, maxiter, tol)

    cols = list(features.categorical)
    combinations = frozenset(
        tuple(row) for row in days[cols].astype(object).astype(str).itertuples(index=False, name=None)
    )
    t_range = None
    if features.uses_time:
        t = data["t"].to_numpy(dtype=float)
        t_range = (float(t.min()), float(t.max()))

    logger.info("fitted %s baseline %r on %d days", family, formula, len(data))
    return FittedModel(
        formula=formula,
        family=family,
        features=features,
        results=results,
        levels=levels,
        combinations=combinations,
        t_range=t_range,
        iterations=iterations,
    )


def fit_with_fallback(
    days: pd.DataFrame,
    features: ModelFeatures | None = None,
    family: str = "robust",
    maxiter: int = 50,
    tol: float = 1e-8,
    relax_factor: float = 1000.0,
) -> FittedModel:
    """Fit ``family``; if robust IRLS does not converge, relax then fall back.

    The robust fit is retried once with ``tol * relax_factor`` and twice the
    iteration budget; if that also fails an OLS model is returned.  The
    ``family`` attribute of the result records what was actually fit.
    """

    if family != "robust":
        return fit_baseline(days, features, family=family, maxiter=maxiter, tol=tol)
    try:
        return fit_baseline(days, features, family="robust", maxiter=maxiter, tol=tol)
    except NumericalNonConvergenceError as exc:
        relaxed = tol * relax_factor
        logger.warning("%s; retrying with tol=%g", exc, relaxed)
    try:
        return fit_baseline(
            days, features, family="robust", maxiter=maxiter * 2, tol=relaxed
        )
    except NumericalNonConvergenceError as exc:
        logger.warning("%s; falling back to ols", exc)
    return fit_baseline(days, features, family="ols")

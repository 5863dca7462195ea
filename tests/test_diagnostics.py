from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from conftest import make_days
from flights_daily.analysis.diagnostics import (
    flag_outliers,
    residual_summary,
    smooth_residuals,
    weekday_profile,
)
from flights_daily.core.spec import OutlierThresholds
from flights_daily.daily.calendar import add_calendar_features
from flights_daily.models.fit import fit_baseline
from flights_daily.models.residuals import add_residuals


@pytest.fixture
def resid() -> pd.DataFrame:
    featured = add_calendar_features(make_days(trend=10.0))
    featured.loc[featured["date"] == pd.Timestamp("2013-11-28"), "n"] = 5
    featured.loc[featured["date"] == pd.Timestamp("2013-06-15"), "n"] = 300
    return add_residuals(featured, fit_baseline(featured))


def test_residual_summary_by_weekday(resid) -> None:
    summary = residual_summary(resid)

    assert list(summary.columns) == ["wday", "days", "mean", "median", "total"]
    assert summary["wday"].astype(str).tolist() == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert int(summary["days"].sum()) == len(resid)
    np.testing.assert_allclose(summary["total"].to_numpy(), 0.0, atol=1e-6)


def test_residual_summary_by_weekday_and_term(resid) -> None:
    summary = residual_summary(resid, by=["wday", "term"])
    assert len(summary) == 21


def test_flag_outliers_thresholds(resid) -> None:
    out = flag_outliers(resid, OutlierThresholds(lower=-50, upper=50))

    assert out["date"].dt.strftime("%Y-%m-%d").tolist() == ["2013-06-15", "2013-11-28"]
    assert out["direction"].tolist() == ["high", "low"]


def test_flag_outliers_default_thresholds(resid) -> None:
    out = flag_outliers(resid)
    assert out["date"].dt.strftime("%Y-%m-%d").tolist() == ["2013-06-15"]


def test_outlier_thresholds_validate() -> None:
    with pytest.raises(ValueError):
        OutlierThresholds(lower=10, upper=-10)


def test_smooth_residuals_tracks_trend(resid) -> None:
    out = smooth_residuals(resid, frac=0.2)

    assert "smooth" in out.columns
    assert out["date"].is_monotonic_increasing
    assert out["smooth"].notna().all()
    # the weekday-only fit leaves the seasonal swing in the residuals
    assert out["smooth"].max() > 3
    assert out["smooth"].min() < -3

    with pytest.raises(ValueError):
        smooth_residuals(resid, frac=0)


def test_diagnostics_require_residuals() -> None:
    featured = add_calendar_features(make_days(periods=7))
    with pytest.raises(ValueError):
        residual_summary(featured)


def test_weekday_profile_saturdays(resid) -> None:
    sats = weekday_profile(resid, "Sat")
    assert len(sats) == 52
    assert set(sats["wday"].astype(str)) == {"Sat"}
    assert sats["date"].is_monotonic_increasing

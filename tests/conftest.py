"""Synthetic daily flight data shared by the test modules."""
from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from flights_daily.daily.calendar import day_of_week

# weekday effect shaped like the 2013 NYC departures: quiet Saturdays
WDAY_BASE = {"Sun": 88, "Mon": 97, "Tue": 95, "Wed": 96, "Thu": 97, "Fri": 97, "Sat": 75}


def make_days(
    start: str = "2013-01-01",
    periods: int = 365,
    seed: int = 0,
    noise: float = 3.0,
    trend: float = 0.0,
) -> pd.DataFrame:
    dates = pd.date_range(start, periods=periods, freq="D")
    rng = np.random.default_rng(seed)
    base = np.array([WDAY_BASE[day_of_week(d)] for d in dates], dtype=float)
    seasonal = trend * np.sin(2 * np.pi * np.arange(periods) / periods)
    n = np.round(base + seasonal + rng.normal(0.0, noise, periods)).astype(int)
    return pd.DataFrame({"date": dates, "n": np.clip(n, 0, None)})


def make_events(days: pd.DataFrame) -> pd.DataFrame:
    """Expand a day table into one flights-layout row per event."""

    dates = pd.to_datetime(days["date"]).repeat(days["n"].to_numpy())
    return pd.DataFrame(
        {
            "year": dates.dt.year.to_numpy(),
            "month": dates.dt.month.to_numpy(),
            "day": dates.dt.day.to_numpy(),
            "carrier": "UA",
        }
    )


@pytest.fixture
def days() -> pd.DataFrame:
    return make_days()

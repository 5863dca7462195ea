"""Calendar features derived from a day: weekday label, term, time index."""
from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

import numpy as np
import pandas as pd

from ..core.spec import DEFAULT_TERMS, TermBoundaries
from ..errors import TermOutOfRangeError

WDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
_EPOCH = pd.Timestamp("1970-01-01")


def _as_date(value: date | datetime | pd.Timestamp | str) -> date:
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def day_of_week(value: date | datetime | pd.Timestamp | str) -> str:
    """Return the weekday label (``Sun`` .. ``Sat``) of a date."""

    day = _as_date(value)
    # date.weekday(): Monday == 0
    return WDAY_LABELS[(day.weekday() + 1) % 7]


def term(
    value: date | datetime | pd.Timestamp | str,
    boundaries: TermBoundaries = DEFAULT_TERMS,
) -> str:
    """Return the term label whose range contains the date."""

    day = _as_date(value)
    label = boundaries.locate(day)
    if label is not None:
        return label
    if boundaries.on_out_of_range == "default":
        return boundaries.default_label  # type: ignore[return-value]
    raise TermOutOfRangeError(
        f"{day.isoformat()} is outside the configured terms "
        f"[{boundaries.ranges[0].start.isoformat()}, {boundaries.end.isoformat()})"
    )


def time_index(dates: Iterable) -> np.ndarray:
    """Encode dates as float days since 1970-01-01 for smooth time terms."""

    stamps = pd.to_datetime(pd.Series(list(dates)), format="ISO8601")
    return ((stamps - _EPOCH) / pd.Timedelta(days=1)).to_numpy(dtype=float)


def add_calendar_features(
    days: pd.DataFrame,
    boundaries: TermBoundaries = DEFAULT_TERMS,
    with_term: bool = True,
) -> pd.DataFrame:
    """Return a copy of ``days`` with ``wday``, ``term`` and ``t`` columns.

    ``wday`` and ``term`` are ordered categoricals so that models, summaries
    and grids always see every level in calendar order.
    """

    out = days.copy()
    dates = pd.to_datetime(out["date"])
    out["wday"] = pd.Categorical(
        [day_of_week(d) for d in dates], categories=WDAY_LABELS, ordered=True
    )
    if with_term:
        out["term"] = pd.Categorical(
            [term(d, boundaries) for d in dates],
            categories=boundaries.labels,
            ordered=True,
        )
    out["t"] = time_index(dates)
    return out

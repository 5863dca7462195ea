"""Aggregate timestamped flight events into one row per calendar day."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

import pandas as pd

from ..errors import MalformedDateError

logger = logging.getLogger(__name__)

DATE_PARTS = ("year", "month", "day")


def empty_days() -> pd.DataFrame:
    """Return an empty day frame with the canonical ``date``/``n`` columns."""

    return pd.DataFrame(
        {
            "date": pd.Series(dtype="datetime64[ns]"),
            "n": pd.Series(dtype="int64"),
        }
    )


def _wall_clock(value: Any) -> pd.Timestamp:
    if pd.isna(value):
        return pd.NaT
    try:
        stamp = pd.Timestamp(value)
    except (TypeError, ValueError):
        return pd.NaT
    if stamp.tzinfo is not None:
        # keep the local wall-clock day rather than shifting to UTC
        stamp = stamp.tz_localize(None)
    return stamp


def _to_datetime(values: pd.Series) -> pd.Series:
    # offsets differ across DST, so each value is made naive before the
    # column is assembled
    return pd.to_datetime(values.map(_wall_clock))


def event_dates(events: pd.DataFrame, date_col: str | None = None) -> pd.Series:
    """Return the calendar day (midnight timestamp) of every event row.

    The date is taken from ``date_col`` when given, otherwise from the
    ``year``/``month``/``day`` columns of the flights layout, then from
    ``time_hour`` and finally ``date``.  Missing or malformed values raise
    :class:`MalformedDateError`; nothing is silently dropped.
    """

    columns = set(events.columns)
    if date_col is not None:
        if date_col not in columns:
            raise MalformedDateError(f"event table has no {date_col!r} column")
        parsed = _to_datetime(events[date_col])
    elif columns.issuperset(DATE_PARTS):
        parts = events[list(DATE_PARTS)].apply(pd.to_numeric, errors="coerce")
        complete = parts.notna().all(axis=1)
        parsed = pd.Series(pd.NaT, index=events.index, dtype="datetime64[ns]")
        if complete.any():
            parsed.loc[complete] = pd.to_datetime(
                parts.loc[complete].astype("int64"), errors="coerce"
            )
    elif "time_hour" in columns:
        parsed = _to_datetime(events["time_hour"])
    elif "date" in columns:
        parsed = _to_datetime(events["date"])
    else:
        raise MalformedDateError(
            "event table needs year/month/day, time_hour or date columns"
        )

    bad = int(parsed.isna().sum())
    if bad:
        raise MalformedDateError(
            f"{bad} event rows have missing or malformed dates", bad_rows=bad
        )
    return parsed.dt.normalize().rename("date")


def daily_counts(
    events: pd.DataFrame | Sequence | Iterable,
    date_col: str | None = None,
) -> pd.DataFrame:
    """Count events per distinct calendar day.

    ``events`` is either an event table (see :func:`event_dates`) or a plain
    sequence of timestamps.  The result has one row per day, sorted by
    date, with ``n`` summing to the number of input events.
    """

    if not isinstance(events, pd.DataFrame):
        events = pd.DataFrame({"date": list(events)})
        date_col = "date"
    if events.empty:
        return empty_days()

    dates = event_dates(events, date_col=date_col)
    counts = dates.value_counts(sort=False).sort_index()
    days = pd.DataFrame(
        {
            "date": counts.index.to_numpy(dtype="datetime64[ns]"),
            "n": counts.to_numpy(dtype="int64"),
        }
    )
    logger.info("aggregated %d events into %d days", len(dates), len(days))
    return days

"""Flight event loading.

Events come from a CSV or JSON file with at least a date field: either the
``year``/``month``/``day`` triple of the flights table, a ``time_hour``
timestamp or a plain ``date`` column.  Rows are kept as-is; the calendar day
of each event is resolved by :func:`flights_daily.daily.aggregate.event_dates`.
"""
from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import pandas as pd

from ..config import get_settings
from ..daily.aggregate import event_dates
from ..errors import MissingDatasetError

logger = logging.getLogger(__name__)


def _coerce_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    value = value.strip()
    if "T" in value or " " in value:
        return pd.Timestamp(value).date()
    return date.fromisoformat(value)


def read_events(path: str | Path) -> pd.DataFrame:
    """Read the raw event table from a CSV or JSON file."""

    path = Path(path)
    if path.suffix.lower() == ".json":
        raw = json.loads(path.read_text())
        return pd.DataFrame(raw)
    return pd.read_csv(str(path))


def load_events(spec_data) -> pd.DataFrame:
    """Load flight events described by a ``DataSpec``-like object.

    ``dataset_path`` falls back to the ``FLIGHTS_DATASET_PATH`` setting.  When
    ``start``/``end`` are given only events on days within the inclusive
    window are returned.
    """

    dataset_path = getattr(spec_data, "dataset_path", None) or get_settings().dataset_path
    if not dataset_path:
        raise MissingDatasetError(
            "no dataset configured: set data.dataset_path or FLIGHTS_DATASET_PATH"
        )
    if not Path(dataset_path).is_file():
        raise MissingDatasetError(f"dataset not found: {dataset_path}")

    df = read_events(dataset_path)
    start = getattr(spec_data, "start", None)
    end = getattr(spec_data, "end", None)
    if df.empty or (start is None and end is None):
        logger.info("loaded %d events from %s", len(df), dataset_path)
        return df

    days = event_dates(df, date_col=getattr(spec_data, "date_col", None))
    mask = pd.Series(True, index=df.index)
    if start is not None:
        mask &= days >= pd.Timestamp(_coerce_date(start))
    if end is not None:
        mask &= days <= pd.Timestamp(_coerce_date(end))
    out = df.loc[mask].reset_index(drop=True)
    logger.info("loaded %d of %d events from %s", len(out), len(df), dataset_path)
    return out

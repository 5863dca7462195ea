"""Utilities to write analysis results to disk."""
from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict

import pandas as pd


def _write_frame(path: str | Path, df: pd.DataFrame) -> None:
    out = df.copy()
    for col in out.columns:
        if pd.api.types.is_datetime64_any_dtype(out[col]):
            out[col] = out[col].dt.strftime("%Y-%m-%d")
    out.to_csv(path, index=False)


def write_residuals(path: str | Path, days: pd.DataFrame) -> None:
    _write_frame(path, days)


def write_grid(path: str | Path, grid: pd.DataFrame) -> None:
    _write_frame(path, grid)


def write_summary(path: str | Path, summary: Dict[str, Any]) -> None:
    Path(path).write_text(json.dumps(summary, indent=2, default=str))

"""Configuration models for the daily analysis.

Term boundaries and outlier thresholds are analyst-chosen constants.  They
are plain dataclasses so the calendar and inspection helpers can be used
without going through the pydantic run specification in
:mod:`flights_daily.api.schemas`.
"""
from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from datetime import date
from typing import List, Tuple

OUT_OF_RANGE_POLICIES = ("raise", "default")


@dataclass(frozen=True)
class TermRange:
    """A term label starting on ``start`` and running until the next range."""

    label: str
    start: date


@dataclass(frozen=True)
class TermBoundaries:
    """Contiguous, half-open date ranges mapping each day to a term label."""

    ranges: Tuple[TermRange, ...]
    end: date
    on_out_of_range: str = "raise"
    default_label: str | None = None
    _starts: Tuple[date, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.ranges:
            raise ValueError("at least one term range is required")
        starts = tuple(r.start for r in self.ranges)
        for prev, nxt in zip(starts, starts[1:]):
            if nxt <= prev:
                raise ValueError("term start dates must be strictly increasing")
        if self.end <= starts[-1]:
            raise ValueError("term end must be after the last term start")
        labels = [r.label for r in self.ranges]
        if len(set(labels)) != len(labels):
            raise ValueError("term labels must be unique")
        if self.on_out_of_range not in OUT_OF_RANGE_POLICIES:
            raise ValueError(
                f"on_out_of_range must be one of {OUT_OF_RANGE_POLICIES}, got {self.on_out_of_range!r}"
            )
        if self.on_out_of_range == "default" and not self.default_label:
            raise ValueError("default_label is required when on_out_of_range='default'")
        object.__setattr__(self, "_starts", starts)

    @property
    def labels(self) -> List[str]:
        """Return every label a lookup may produce, in calendar order."""

        labels = [r.label for r in self.ranges]
        if self.on_out_of_range == "default" and self.default_label not in labels:
            labels.append(self.default_label)
        return labels

    def locate(self, day: date) -> str | None:
        """Return the label of the range containing ``day`` or ``None``."""

        if day < self._starts[0] or day >= self.end:
            return None
        return self.ranges[bisect_right(self._starts, day) - 1].label


DEFAULT_TERMS = TermBoundaries(
    ranges=(
        TermRange("spring", date(2013, 1, 1)),
        TermRange("summer", date(2013, 6, 5)),
        TermRange("fall", date(2013, 8, 25)),
    ),
    end=date(2014, 1, 1),
)


@dataclass(frozen=True)
class OutlierThresholds:
    """Residual cut-offs used to list unusual days."""

    lower: float = -100.0
    upper: float = 80.0

    def __post_init__(self) -> None:
        if self.lower >= self.upper:
            raise ValueError("outlier lower threshold must be below the upper threshold")


"""Pydantic models describing an analysis run (JSON run specification)."""
from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from ..core.spec import (
    DEFAULT_TERMS,
    OutlierThresholds,
    TermBoundaries,
    TermRange,
)


class DataSpec(BaseModel):
    """Where the flight events live and which window to keep."""

    dataset_path: Optional[str] = None
    date_col: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None


class TermRangeSpec(BaseModel):
    label: str
    start: date


class TermsSpec(BaseModel):
    """Manually chosen term boundaries; defaults to the 2013 school terms."""

    ranges: List[TermRangeSpec] = Field(
        default_factory=lambda: [
            TermRangeSpec(label=r.label, start=r.start) for r in DEFAULT_TERMS.ranges
        ]
    )
    end: date = DEFAULT_TERMS.end
    on_out_of_range: Literal["raise", "default"] = "raise"
    default_label: Optional[str] = None

    def to_boundaries(self) -> TermBoundaries:
        return TermBoundaries(
            ranges=tuple(TermRange(r.label, r.start) for r in self.ranges),
            end=self.end,
            on_out_of_range=self.on_out_of_range,
            default_label=self.default_label,
        )


class ModelSpec(BaseModel):
    """Baseline formula and fitting family."""

    term: bool = False
    spline_df: Optional[int] = Field(None, ge=3)
    spline_by_wday: bool = False
    family: Literal["ols", "robust"] = "ols"
    maxiter: Optional[int] = Field(None, ge=1)
    tol: float = Field(1e-8, gt=0)
    fallback: bool = True

    @model_validator(mode="after")
    def _spline_interaction_needs_spline(self) -> "ModelSpec":
        if self.spline_by_wday and self.spline_df is None:
            raise ValueError("spline_by_wday requires spline_df")
        return self


class GridSpec(BaseModel):
    """Synthetic prediction grid over the observed levels and time."""

    points: int = Field(13, ge=1)
    categorical: List[str] = Field(default_factory=lambda: ["wday"])
    over_time: bool = False


class OutliersSpec(BaseModel):
    lower: float = -100.0
    upper: float = 80.0

    def to_thresholds(self) -> OutlierThresholds:
        return OutlierThresholds(lower=self.lower, upper=self.upper)


class ArtifactsSpec(BaseModel):
    """Configuration describing where to write residual tables and summaries."""

    out_dir: str | None = None


class AnalysisSpec(BaseModel):
    """Top-level specification for one analysis step."""

    data: DataSpec = Field(default_factory=DataSpec)
    terms: TermsSpec = Field(default_factory=TermsSpec)
    model: ModelSpec = Field(default_factory=ModelSpec)
    grid: GridSpec = Field(default_factory=GridSpec)
    outliers: OutliersSpec = Field(default_factory=OutliersSpec)
    artifacts: ArtifactsSpec = Field(default_factory=ArtifactsSpec)

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from flights_daily.api import schemas
from flights_daily.core import spec


def test_default_terms_cover_2013() -> None:
    terms = spec.DEFAULT_TERMS
    assert [r.label for r in terms.ranges] == ["spring", "summer", "fall"]
    assert terms.ranges[0].start == date(2013, 1, 1)
    assert terms.end == date(2014, 1, 1)
    assert terms.locate(date(2014, 1, 1)) is None


def test_term_boundaries_validation() -> None:
    with pytest.raises(ValueError):
        spec.TermBoundaries(ranges=(), end=date(2014, 1, 1))
    with pytest.raises(ValueError):
        spec.TermBoundaries(
            ranges=(
                spec.TermRange("a", date(2013, 6, 1)),
                spec.TermRange("b", date(2013, 1, 1)),
            ),
            end=date(2014, 1, 1),
        )
    with pytest.raises(ValueError):
        spec.TermBoundaries(
            ranges=(spec.TermRange("a", date(2013, 1, 1)),), end=date(2012, 1, 1)
        )
    with pytest.raises(ValueError):
        spec.TermBoundaries(
            ranges=(spec.TermRange("a", date(2013, 1, 1)),),
            end=date(2014, 1, 1),
            on_out_of_range="default",
        )


def test_terms_spec_from_json() -> None:
    sp = schemas.AnalysisSpec.model_validate_json(
        """{"terms": {"ranges": [{"label": "winter", "start": "2013-01-01"},
                                 {"label": "rest", "start": "2013-03-01"}],
                      "end": "2014-01-01",
                      "on_out_of_range": "default",
                      "default_label": "other"}}"""
    )
    terms = sp.terms.to_boundaries()

    assert terms.labels == ["winter", "rest", "other"]
    assert terms.ranges[1].start == date(2013, 3, 1)
    assert terms.locate(date(2013, 2, 28)) == "winter"
    assert terms.locate(date(2014, 1, 1)) is None

    with pytest.raises(ValueError):
        schemas.TermsSpec(
            ranges=[schemas.TermRangeSpec(label="a", start=date(2013, 6, 1))],
            end=date(2013, 1, 1),
        ).to_boundaries()


def test_analysis_spec_defaults() -> None:
    sp = schemas.AnalysisSpec.model_validate_json("{}")
    assert sp.model.family == "ols"
    assert sp.outliers.lower == -100.0
    assert sp.outliers.upper == 80.0
    assert sp.terms.to_boundaries() == spec.DEFAULT_TERMS
    assert sp.grid.points == 13


def test_analysis_spec_validation() -> None:
    with pytest.raises(ValidationError):
        schemas.AnalysisSpec.model_validate({"model": {"family": "poisson"}})
    with pytest.raises(ValidationError):
        schemas.AnalysisSpec.model_validate({"model": {"spline_by_wday": True}})
    with pytest.raises(ValidationError):
        schemas.AnalysisSpec.model_validate({"grid": {"points": 0}})

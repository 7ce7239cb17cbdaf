"""Unit tests for date densification, alignment and normalization."""

from __future__ import annotations

import math

import pandas as pd
import pytest

from csv_chart.alignment import (
    aligned_frame,
    align_series,
    continuous_dates,
    date_union,
    normalize_series,
    series_names,
)

pytestmark = pytest.mark.unit


def _iso(index: pd.DatetimeIndex) -> list[str]:
    return [d.strftime("%Y-%m-%d") for d in index]


def test_date_union_is_sorted_and_unique(temperature, sales) -> None:
    """Dates shared by several series appear once."""

    assert _iso(date_union([temperature, sales])) == ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-05"]


def test_continuous_dates_fill_every_day(temperature, sales) -> None:
    """The axis covers every calendar day between the extremes, inclusive."""

    labels = continuous_dates([sales, temperature])

    assert _iso(labels) == ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05"]


def test_continuous_dates_empty_without_datasets() -> None:
    """No datasets means no axis."""

    assert continuous_dates([]).empty


def test_align_series_leaves_gaps_missing(temperature, sales) -> None:
    """Days without a point are NaN, never zero."""

    labels = continuous_dates([temperature, sales])
    aligned = align_series(sales, labels)

    assert math.isnan(aligned.iloc[0])
    assert aligned.iloc[1] == 5.0
    assert math.isnan(aligned.iloc[3])
    assert aligned.iloc[4] == 0.0


def test_align_series_uses_first_duplicate(make_dataset) -> None:
    """With repeated dates the first point in sorted order wins."""

    dataset = make_dataset("Date,Value\n2024-01-01,4\n2024-01-01,9")
    aligned = align_series(dataset, continuous_dates([dataset]))

    assert list(aligned) == [4.0]


def test_normalize_max_keeps_zero_at_zero() -> None:
    """Dividing by the maximum maps the peak to 1 and zero to 0."""

    values = pd.Series([0.0, 5.0, float("nan"), 10.0])
    result = normalize_series(values, "max")

    assert result.iloc[0] == 0.0
    assert result.iloc[1] == 0.5
    assert math.isnan(result.iloc[2])
    assert result.iloc[3] == 1.0


def test_normalize_max_all_zero_series() -> None:
    """An all-zero series stays at zero instead of dividing by zero."""

    result = normalize_series(pd.Series([0.0, float("nan"), 0.0]), "max")

    assert result.iloc[0] == 0.0
    assert math.isnan(result.iloc[1])
    assert result.iloc[2] == 0.0


def test_normalize_minmax_maps_range_to_unit_interval() -> None:
    """Min-max scaling puts the minimum at 0 and the maximum at 1."""

    result = normalize_series(pd.Series([10.0, 15.0, 20.0]), "minmax")

    assert list(result) == [0.0, 0.5, 1.0]


def test_normalize_minmax_flat_series() -> None:
    """A flat series maps to zero."""

    assert list(normalize_series(pd.Series([3.0, 3.0]), "minmax")) == [0.0, 0.0]


def test_normalize_all_missing_stays_missing() -> None:
    """Nothing to scale leaves every value missing."""

    result = normalize_series(pd.Series([float("nan"), float("nan")]))

    assert result.isna().all()


def test_normalize_rejects_unknown_method() -> None:
    """Unknown methods are a programming error."""

    with pytest.raises(ValueError, match="zscore"):
        normalize_series(pd.Series([1.0]), "zscore")


def test_series_names_disambiguate_shared_columns(make_dataset) -> None:
    """Datasets sharing a value column name are told apart by file label."""

    a = make_dataset("Date,Value\n2024-01-01,1", "a.csv")
    b = make_dataset("Date,Value\n2024-01-01,2", "b.csv")
    c = make_dataset("Date,Price\n2024-01-01,3", "c.csv")
    a_again = make_dataset("Date,Value\n2024-01-01,4", "a.csv")

    assert series_names([a, b, c, a_again]) == ["Value (a)", "Value (b)", "Price", "Value (a) #2"]


def test_aligned_frame_has_one_column_per_series(temperature, sales) -> None:
    """The export frame holds original values on the continuous axis."""

    frame = aligned_frame([temperature, sales])

    assert list(frame.columns) == ["Temperature", "Sales"]
    assert len(frame) == 5
    assert frame["Temperature"].iloc[2] == 30.0
    assert frame["Sales"].isna().sum() == 3


def test_series_names_skip_suffixes_already_taken(make_dataset) -> None:
    """A generated "#n" suffix never reuses a name another series already has."""

    taken = make_dataset("Date,X (a) #2\n2024-01-01,1", "z.csv")
    a = make_dataset("Date,X\n2024-01-01,2", "a.csv")
    a_again = make_dataset("Date,X\n2024-01-01,3", "a.csv")

    names = series_names([taken, a, a_again])

    assert names == ["X (a) #2", "X (a)", "X (a) #3"]
    assert len(set(names)) == 3


def test_series_names_avoid_reserved_names(make_dataset) -> None:
    """A value column equal to a reserved name gets the file label appended."""

    dataset = make_dataset("Time,date\n2024-01-01,1", "t.csv")

    assert series_names([dataset], reserved=["date"]) == ["date (t)"]
    assert series_names([dataset]) == ["date"]


def test_aligned_frame_keeps_every_series_when_names_collide(make_dataset) -> None:
    """No series is dropped from the frame when display names would clash."""

    taken = make_dataset("Date,X (a) #2\n2024-01-01,1", "z.csv")
    a = make_dataset("Date,X\n2024-01-01,2", "a.csv")
    a_again = make_dataset("Date,X\n2024-01-01,3", "a.csv")

    frame = aligned_frame([taken, a, a_again])

    assert list(frame.iloc[0]) == [1.0, 2.0, 3.0]
    assert frame.index.name == "date"

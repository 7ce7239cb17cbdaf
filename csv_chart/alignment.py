from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from csv_chart.data import Dataset


NORMALIZATION_METHODS = ("max", "minmax")
DATE_COLUMN = "date"


def date_union(datasets: Iterable[Dataset]) -> pd.DatetimeIndex:
    """Sorted unique dates across all datasets."""
    frames = [ds.points["date"] for ds in datasets if not ds.points.empty]
    if not frames:
        return pd.DatetimeIndex([], name="date")
    dates = pd.concat(frames, ignore_index=True).drop_duplicates().sort_values()
    return pd.DatetimeIndex(dates, name="date")


def continuous_dates(datasets: Iterable[Dataset]) -> pd.DatetimeIndex:
    """Every calendar day from the earliest to the latest date in the union."""
    union = date_union(datasets)
    if union.empty:
        return union
    return pd.date_range(union.min(), union.max(), freq="D", name="date")


def align_series(dataset: Dataset, labels: pd.DatetimeIndex) -> pd.Series:
    """Dataset values on ``labels``; NaN where the dataset has no point.

    With duplicate dates the first point (in sorted order) wins.
    """
    first = dataset.points.drop_duplicates(subset="date", keep="first").set_index("date")["value"]
    return first.reindex(labels).astype(float)


def normalize_series(values: pd.Series, method: str = "max") -> pd.Series:
    """Rescale present values; missing values stay missing.

    ``max`` divides by the series maximum so zero stays at zero (an all-zero
    series maps to 0). ``minmax`` maps the series range onto 0..1 (a flat
    series maps to 0).
    """
    if method not in NORMALIZATION_METHODS:
        raise ValueError(f"Unknown normalization method: {method!r}")

    values = values.astype(float)
    present = values.dropna()
    if present.empty:
        return values

    if method == "minmax":
        low, high = float(present.min()), float(present.max())
        if high == low:
            return values.where(values.isna(), 0.0)
        return (values - low) / (high - low)

    peak = float(present.max())
    if peak == 0:
        return values.where(values.isna(), 0.0)
    return values / peak


def series_names(datasets: Sequence[Dataset], reserved: Iterable[str] = ()) -> List[str]:
    """Distinct display name per dataset, based on its value column name.

    A value column shared by several datasets, or equal to one of the
    ``reserved`` names (e.g. a date column next to it), gets the file label
    appended. Any name still taken gets the first free ``" #n"`` suffix.
    """
    reserved = set(reserved)
    column_counts = Counter(ds.value_column for ds in datasets)
    names = [
        f"{ds.value_column} ({ds.label})"
        if column_counts[ds.value_column] > 1 or ds.value_column in reserved
        else ds.value_column
        for ds in datasets
    ]

    used = set(reserved)
    out: List[str] = []
    for name in names:
        candidate = name
        n = 1
        while candidate in used:
            n += 1
            candidate = f"{name} #{n}"
        used.add(candidate)
        out.append(candidate)
    return out


def aligned_frame(datasets: Sequence[Dataset], labels: Optional[pd.DatetimeIndex] = None) -> pd.DataFrame:
    """Original values of every dataset on the continuous date index.

    Column names never collide with the ``date`` index name, so the frame can
    be flattened with ``reset_index``.
    """
    datasets = list(datasets)
    if labels is None:
        labels = continuous_dates(datasets)
    names = series_names(datasets, reserved=[DATE_COLUMN])
    columns = {name: align_series(ds, labels).to_numpy() for name, ds in zip(names, datasets)}
    return pd.DataFrame(columns, index=pd.DatetimeIndex(labels, name=DATE_COLUMN))

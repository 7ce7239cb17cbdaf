from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from csv_chart.alignment import aligned_frame, align_series, continuous_dates, normalize_series, series_names
from csv_chart.charts import build_overlay_chart, to_vega_spec
from csv_chart.data import Dataset
from csv_chart.options import ChartOptions

DATE_FORMAT = "%Y-%m-%d"
DATE_HEADER = "Date"


def _nullable(values: pd.Series) -> List[Optional[float]]:
    return [None if pd.isna(v) else float(v) for v in values]


def compute_chart(datasets: Iterable[Dataset], options: Optional[ChartOptions] = None) -> Dict[str, Any]:
    options = options or ChartOptions()
    datasets = list(datasets)
    labels = continuous_dates(datasets)
    payload: Dict[str, Any] = {
        "options": asdict(options),
        "labels": [d.strftime(DATE_FORMAT) for d in labels],
        "datasets": [],
        "files": [ds.summary() for ds in datasets],
        "charts": {},
    }
    if labels.empty:
        return payload

    for name, ds in zip(series_names(datasets), datasets):
        original = align_series(ds, labels)
        payload["datasets"].append(
            {
                "label": name,
                "file": ds.label,
                "data": _nullable(normalize_series(original, options.normalization)),
                "originalData": _nullable(original),
                "borderColor": ds.border_color,
                "backgroundColor": ds.background_color,
            }
        )

    chart = build_overlay_chart(datasets, options)
    if chart is not None:
        payload["charts"]["overlay"] = to_vega_spec(chart)
    return payload


def compute_tables(datasets: Iterable[Dataset]) -> List[Dict[str, Any]]:
    """Raw-data table per file, rows in the file's sorted order."""
    tables = []
    for ds in datasets:
        rows = [
            {"date": date.strftime(DATE_FORMAT), "value": float(value)}
            for date, value in zip(ds.points["date"], ds.points["value"])
        ]
        (value_header,) = series_names([ds], reserved=[DATE_HEADER])
        tables.append(
            {
                "label": ds.label,
                "value_column": ds.value_column,
                "headers": [DATE_HEADER, value_header],
                "rows": rows,
            }
        )
    return tables


def export_frame(datasets: Iterable[Dataset]) -> pd.DataFrame:
    """Flat export table: a ``date`` column, then one column per series."""
    return aligned_frame(list(datasets)).reset_index()


def export_csv(datasets: Iterable[Dataset]) -> bytes:
    """Aligned original values, one row per continuous day, as CSV bytes."""
    return export_frame(datasets).to_csv(index=False, date_format=DATE_FORMAT).encode("utf-8")

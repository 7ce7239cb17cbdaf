from __future__ import annotations

import math
from typing import Any, Dict, Iterable, Optional

import altair as alt
import pandas as pd

from csv_chart.alignment import align_series, continuous_dates, normalize_series, series_names
from csv_chart.data import Dataset
from csv_chart.options import ChartOptions

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def overlay_frame(datasets: Iterable[Dataset], options: Optional[ChartOptions] = None) -> pd.DataFrame:
    """Long-form rows (date, series, value, original) for the overlay chart.

    Days a series has no point for are dropped so its line spans the gap.
    """
    options = options or ChartOptions()
    datasets = list(datasets)
    labels = continuous_dates(datasets)
    columns = ["date", "series", "value", "original"]
    if labels.empty:
        return pd.DataFrame(columns=columns)

    frames = []
    for name, ds in zip(series_names(datasets), datasets):
        original = align_series(ds, labels)
        frame = pd.DataFrame(
            {
                "date": labels,
                "series": name,
                "value": normalize_series(original, options.normalization).to_numpy(),
                "original": original.to_numpy(),
            }
        )
        frames.append(frame.dropna(subset=["original"]))
    return pd.concat(frames, ignore_index=True)[columns]


def build_overlay_chart(datasets: Iterable[Dataset], options: Optional[ChartOptions] = None) -> Optional[alt.Chart]:
    options = options or ChartOptions()
    datasets = list(datasets)
    long_df = overlay_frame(datasets, options)
    if long_df.empty:
        return None

    names = series_names(datasets)
    colors = [ds.border_color for ds in datasets]
    point: Any = False
    if options.show_points and options.point_radius > 0:
        point = {"filled": True, "size": round(math.pi * options.point_radius ** 2)}

    hover = alt.selection_point(fields=["series"], on="mouseover", empty="all")
    return (
        alt.Chart(long_df)
        .mark_line(point=point, interpolate="linear")
        .encode(
            x=alt.X("date:T", title="Date", axis=alt.Axis(format="%Y-%m-%d", grid=False)),
            # Normalized scale; the tooltip reports original values.
            y=alt.Y("value:Q", axis=None),
            color=alt.Color(
                "series:N",
                title=None,
                scale=alt.Scale(domain=names, range=colors),
                legend=alt.Legend(orient="top", symbolType="stroke"),
            ),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.2)),
            tooltip=[
                alt.Tooltip("series:N", title="Series"),
                alt.Tooltip("date:T", title="Date", format="%Y-%m-%d"),
                alt.Tooltip("original:Q", title="Value"),
            ],
        )
        .add_params(hover)
        .properties(title=options.title, height=420)
    )

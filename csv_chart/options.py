from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from csv_chart.alignment import NORMALIZATION_METHODS


DEFAULT_TITLE = "CSV Data Chart"
DEFAULT_POINT_RADIUS = 4
MAX_POINT_RADIUS = 12


@dataclass(frozen=True)
class ChartOptions:
    normalization: str = "max"
    title: str = DEFAULT_TITLE
    show_points: bool = True
    point_radius: int = DEFAULT_POINT_RADIUS


def _as_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in {"", "0", "false", "no", "off"}
    return bool(value)


def normalize_options(raw: Optional[dict] = None) -> ChartOptions:
    raw = raw or {}

    normalization = str(raw.get("normalization") or "max").strip().lower()
    if normalization not in NORMALIZATION_METHODS:
        normalization = "max"

    title = str(raw.get("title") or "").strip() or DEFAULT_TITLE

    point_radius = raw.get("point_radius", DEFAULT_POINT_RADIUS)
    try:
        point_radius = int(point_radius)
    except (TypeError, ValueError):
        point_radius = DEFAULT_POINT_RADIUS
    point_radius = max(0, min(MAX_POINT_RADIUS, point_radius))

    return ChartOptions(
        normalization=normalization,
        title=title,
        show_points=_as_bool(raw.get("show_points"), True),
        point_radius=point_radius,
    )

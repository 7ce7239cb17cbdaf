from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np
import pandas as pd


DEFAULT_VALUE_COLUMN = "Value"
EXPECTED_FORMAT = "Expected format: Date,Value (first row should be headers)"

# Slot 6 repeats slot 0 on purpose so existing color assignments stay stable.
COLORS = [
    "#FF6384",
    "#36A2EB",
    "#FFCE56",
    "#4BC0C0",
    "#9966FF",
    "#FF9F40",
    "#FF6384",
    "#C9CBCF",
]
BACKGROUND_ALPHA = "20"

# Leading numeric prefix, the way a lenient float parser reads "12.5kg" as 12.5.
NUMBER_PREFIX = r"^([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"


class CsvParseError(ValueError):
    """Raised when an uploaded file yields no usable (date, value) rows."""


@dataclass(frozen=True, eq=False)
class Dataset:
    """One uploaded file: its valid points sorted by date plus display metadata.

    ``points`` has a day-precision ``date`` column and a float ``value`` column.
    ``skipped_rows`` counts non-blank data rows dropped by validation.
    """

    label: str
    points: pd.DataFrame
    value_column: str
    border_color: str
    background_color: str
    source_name: str = ""
    skipped_rows: int = 0

    @property
    def point_count(self) -> int:
        return int(len(self.points))

    def summary(self) -> Dict[str, object]:
        """Row for the uploaded-files list (JSON-serializable)."""
        return {
            "label": self.label,
            "file": self.source_name,
            "points": self.point_count,
            "skipped_rows": self.skipped_rows,
            "value_column": self.value_column,
            "color": self.border_color,
        }


def empty_points() -> pd.DataFrame:
    """Typed, zero-row points frame."""
    return pd.DataFrame(
        {
            "date": pd.Series(dtype="datetime64[ns]"),
            "value": pd.Series(dtype=float),
        }
    )


def decode_upload(raw: bytes) -> str:
    """Decode uploaded bytes as UTF-8, dropping a BOM and replacing bad bytes."""
    return raw.decode("utf-8-sig", errors="replace")


def value_column_from_header(header_line: str) -> str:
    headers = [h.strip() for h in header_line.split(",")]
    if len(headers) >= 2:
        return headers[1]
    return DEFAULT_VALUE_COLUMN


def parse_dates(raw: pd.Series) -> pd.Series:
    """Parse free-form date strings to calendar days; unparseable -> NaT."""
    text = raw.where(raw.notna() & (raw != ""))
    parsed = pd.to_datetime(text, errors="coerce", utc=True, format="mixed")
    return parsed.dt.tz_convert(None).dt.normalize()


def parse_values(raw: pd.Series) -> pd.Series:
    prefix = raw.str.extract(NUMBER_PREFIX, expand=False)
    values = pd.to_numeric(prefix, errors="coerce").astype(float)
    return values.where(np.isfinite(values))


def parse_csv(text: str) -> Tuple[pd.DataFrame, str, int]:
    """Parse ``Date,Value`` CSV text.

    Returns ``(points, value_column, skipped_rows)`` where ``points`` holds the
    valid rows sorted by date (file order kept for equal dates). Only the first
    two comma-separated fields of each row are read; quoting is not supported.
    """
    lines = pd.Series(text.strip().split("\n"), dtype=object)
    value_column = value_column_from_header(lines.iloc[0])

    body = lines.iloc[1:].reset_index(drop=True)
    if body.empty:
        return empty_points(), value_column, 0

    fields = body.str.split(",", expand=True)
    if fields.shape[1] < 2:
        fields[1] = None

    raw_dates = fields[0].str.strip()
    raw_values = fields[1].str.strip()

    dates = parse_dates(raw_dates)
    values = parse_values(raw_values)
    keep = dates.notna() & values.notna()

    non_blank = body.str.strip() != ""
    skipped_rows = int((non_blank & ~keep).sum())

    points = (
        pd.DataFrame({"date": dates[keep], "value": values[keep]})
        .sort_values("date", kind="stable")
        .reset_index(drop=True)
    )
    return points, value_column, skipped_rows


def dataset_label(file_name: str) -> str:
    """File name with its first ".csv" removed."""
    return file_name.replace(".csv", "", 1)


def palette_color(color_index: int) -> str:
    return COLORS[color_index % len(COLORS)]


def build_dataset(file_name: str, text: str, color_index: int) -> Dataset:
    """Parse ``text`` into a colored Dataset; raises ``CsvParseError`` if nothing is usable."""
    points, value_column, skipped_rows = parse_csv(text)
    if points.empty:
        raise CsvParseError(f"{file_name}: no valid rows found. {EXPECTED_FORMAT}")

    color = palette_color(color_index)
    return Dataset(
        label=dataset_label(file_name),
        points=points,
        value_column=value_column,
        border_color=color,
        background_color=color + BACKGROUND_ALPHA,
        source_name=file_name,
        skipped_rows=skipped_rows,
    )

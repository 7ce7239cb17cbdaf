"""Pytest fixtures shared across the CSV chart tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from csv_chart.data import Dataset, build_dataset


TEMPERATURE_CSV = "Date,Temperature\n2024-01-03,30\n2024-01-01,10\n2024-01-02,20\n"
SALES_CSV = "Date,Sales\n2024-01-02,5\n2024-01-05,0\n"


@pytest.fixture
def make_dataset() -> Callable[..., Dataset]:
    """Return a factory that parses CSV text into a Dataset."""

    def _make(text: str, file_name: str = "series.csv", color_index: int = 0) -> Dataset:
        return build_dataset(file_name, text, color_index)

    return _make


@pytest.fixture
def temperature(make_dataset) -> Dataset:
    """Three daily temperature readings, uploaded out of order."""

    return make_dataset(TEMPERATURE_CSV, "temperature.csv", 0)


@pytest.fixture
def sales(make_dataset) -> Dataset:
    """Two sales points that extend past the temperature range."""

    return make_dataset(SALES_CSV, "sales.csv", 1)

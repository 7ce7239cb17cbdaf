from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ChartOptionsModel(BaseModel):
    normalization: str = "max"
    title: str = "CSV Data Chart"
    show_points: bool = True
    point_radius: int = 4


class MetaOptionsResponse(BaseModel):
    palette: List[str]
    normalization_methods: List[str]
    defaults: ChartOptionsModel = Field(default_factory=ChartOptionsModel)


class FileSummaryModel(BaseModel):
    label: str
    file: str
    points: int
    skipped_rows: int = 0
    value_column: str
    color: str


class DataRowModel(BaseModel):
    date: str
    value: float


class DataTableModel(BaseModel):
    label: str
    value_column: str
    headers: List[str] = Field(default_factory=list)
    rows: List[DataRowModel]


class DatasetsResponse(BaseModel):
    files: List[FileSummaryModel]
    tables: List[DataTableModel]
    errors: List[str] = Field(default_factory=list)
    error: Optional[str] = None

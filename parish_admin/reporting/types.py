from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ExportFormat(str, Enum):
    PDF = "pdf"  # printable document (browser print dialog)
    EXCEL = "excel"  # spreadsheet-compatible CSV
    CSV = "csv"
    JSON = "json"


class ExportRequest(BaseModel):
    """
    What to export: a title, flat records and (optionally) the column order.

    Columns default to the keys of the first record. filename is a stem; the
    exporter appends the date and extension.
    """

    title: str
    records: List[Dict[str, Any]] = Field(default_factory=list)
    columns: Optional[List[str]] = None
    filename: str = "report"

    def resolved_columns(self) -> List[str]:
        if self.columns:
            return list(self.columns)
        if self.records:
            return list(self.records[0].keys())
        return []


class ExportResult(BaseModel):
    format: ExportFormat
    path: Path
    filename: str
    notice: Optional[str] = None


__all__ = ["ExportFormat", "ExportRequest", "ExportResult"]

"""
Report formatters: records in, text out.

Nothing here touches the filesystem; delivery is a separate step.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).parent / "templates"

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(ts: datetime) -> str:
    return ts.strftime(TIMESTAMP_FMT)


def cell_text(value: Any) -> str:
    """
    Display text for one cell. None is empty; nested values are shown as JSON.
    """
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def table_rows(records: Iterable[Mapping[str, Any]], columns: Sequence[str]) -> List[List[str]]:
    return [[cell_text(r.get(c)) for c in columns] for r in records]


class CSVFormatter:
    """Delimited text with a title/timestamp preamble."""

    @staticmethod
    def format_rows(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
        """
        Plain CSV: header plus rows, no preamble.
        """
        buf = io.StringIO()
        writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerow(list(header))
        for row in rows:
            writer.writerow([cell_text(v) for v in row])
        return buf.getvalue()

    @staticmethod
    def format(
        title: str,
        records: Sequence[Mapping[str, Any]],
        columns: Sequence[str],
        generated_at: datetime,
    ) -> str:
        """
        Layout:
            <title>
            Generated on: <timestamp>
            <blank>
            <header row>
            <one row per record>
        """
        preamble = f"{title}\nGenerated on: {format_timestamp(generated_at)}\n\n"
        return preamble + CSVFormatter.format_rows(columns, table_rows(records, columns))


class JSONFormatter:
    @staticmethod
    def format(title: str, records: Sequence[Mapping[str, Any]], generated_at: datetime) -> str:
        doc: Dict[str, Any] = {
            "title": title,
            "generated_on": generated_at.isoformat(),
            "records": list(records),
        }
        return json.dumps(doc, indent=2, ensure_ascii=False, default=str)


class HTMLFormatter:
    """
    Printable HTML via Jinja2 templates (autoescaped). Both templates call the
    browser's print dialog once loaded.
    """

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_table(
        self,
        title: str,
        records: Sequence[Mapping[str, Any]],
        columns: Sequence[str],
        generated_at: datetime,
    ) -> str:
        template = self.env.get_template("report.html")
        return template.render(
            title=title,
            generated_on=format_timestamp(generated_at),
            columns=list(columns),
            rows=table_rows(records, columns),
        )

    def render_summary(
        self,
        title: str,
        sections: Sequence[Mapping[str, Any]],
        generated_at: datetime,
    ) -> str:
        """
        sections: [{"heading": str, "metrics": [(label, value), ...]}, ...]
        """
        template = self.env.get_template("summary.html")
        return template.render(
            title=title,
            generated_on=format_timestamp(generated_at),
            sections=list(sections),
        )


__all__ = [
    "TEMPLATES_DIR",
    "format_timestamp",
    "cell_text",
    "table_rows",
    "CSVFormatter",
    "JSONFormatter",
    "HTMLFormatter",
]

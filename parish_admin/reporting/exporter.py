from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from .delivery import Delivery
from .errors import ExportError
from .formatters import CSVFormatter, HTMLFormatter, JSONFormatter
from .types import ExportFormat, ExportRequest, ExportResult

logger = logging.getLogger(__name__)

EXCEL_NOTICE = "File exported as CSV. You can open it in Excel."


def coerce_format(fmt: Union[str, ExportFormat]) -> ExportFormat:
    try:
        return ExportFormat(fmt)
    except ValueError:
        raise ExportError(f"Unsupported export format: {fmt}") from None


def dated_filename(stem: str, ext: str, today: datetime) -> str:
    """
    <stem>-<YYYY-MM-DD>.<ext>; a stem that already carries today's date is kept as-is.
    """
    base = (stem or "").strip() or "report"
    stamp = today.strftime("%Y-%m-%d")
    if not base.endswith(stamp):
        base = f"{base}-{stamp}"
    return f"{base}.{ext.lstrip('.')}"


class ReportExporter:
    """
    Renders an ExportRequest in one of four formats and hands it to a Delivery.

    Every failure (formatting or delivery) is logged and surfaces exactly once
    as ExportError("Export failed: <cause>").
    """

    def __init__(
        self,
        delivery: Delivery,
        *,
        html: Optional[HTMLFormatter] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.delivery = delivery
        self.html = html or HTMLFormatter()
        self._clock = clock

    @contextmanager
    def _guard(self, fmt: ExportFormat, title: str) -> Iterator[None]:
        try:
            yield
        except ExportError:
            raise
        except Exception as e:
            logger.exception("Export failed (%s, %r)", fmt.value, title)
            raise ExportError(f"Export failed: {e}") from e

    # -----------------------------
    # Dispatch
    # -----------------------------

    def export(self, fmt: Union[str, ExportFormat], request: ExportRequest) -> ExportResult:
        f = coerce_format(fmt)

        handlers: Dict[ExportFormat, Callable[[ExportRequest], ExportResult]] = {
            ExportFormat.PDF: self.export_pdf,
            ExportFormat.EXCEL: self.export_excel,
            ExportFormat.CSV: self.export_csv,
            ExportFormat.JSON: self.export_json,
        }
        return handlers[f](request)

    # -----------------------------
    # Formats
    # -----------------------------

    def export_csv(self, request: ExportRequest) -> ExportResult:
        with self._guard(ExportFormat.CSV, request.title):
            now = self._clock()
            text = CSVFormatter.format(request.title, request.records, request.resolved_columns(), now)
            return self._download(ExportFormat.CSV, text, request.filename, "csv", now)

    def export_excel(self, request: ExportRequest) -> ExportResult:
        with self._guard(ExportFormat.EXCEL, request.title):
            now = self._clock()
            text = CSVFormatter.format(request.title, request.records, request.resolved_columns(), now)
            return self._download(ExportFormat.EXCEL, text, request.filename, "csv", now, notice=EXCEL_NOTICE)

    def export_json(self, request: ExportRequest) -> ExportResult:
        with self._guard(ExportFormat.JSON, request.title):
            now = self._clock()
            text = JSONFormatter.format(request.title, request.records, now)
            return self._download(ExportFormat.JSON, text, request.filename, "json", now)

    def export_pdf(self, request: ExportRequest) -> ExportResult:
        with self._guard(ExportFormat.PDF, request.title):
            html = self.html.render_table(
                request.title, request.records, request.resolved_columns(), self._clock()
            )
            return self._print(html, request.title)

    # -----------------------------
    # Lower-level entry points (custom layouts)
    # -----------------------------

    def export_text(
        self,
        fmt: Union[str, ExportFormat],
        text: str,
        stem: str,
        ext: str,
        *,
        notice: Optional[str] = None,
        title: str = "",
    ) -> ExportResult:
        """
        Deliver already-formatted text as a dated download.
        """
        f = coerce_format(fmt)
        with self._guard(f, title or stem):
            return self._download(f, text, stem, ext, self._clock(), notice=notice)

    def print_html(self, html: str, title: str) -> ExportResult:
        with self._guard(ExportFormat.PDF, title):
            return self._print(html, title)

    def print_summary(self, title: str, sections: List[Dict[str, Any]]) -> ExportResult:
        with self._guard(ExportFormat.PDF, title):
            html = self.html.render_summary(title, sections, self._clock())
            return self._print(html, title)

    def _download(
        self,
        fmt: ExportFormat,
        text: str,
        stem: str,
        ext: str,
        now: datetime,
        *,
        notice: Optional[str] = None,
    ) -> ExportResult:
        filename = dated_filename(stem, ext, now)
        path = self.delivery.deliver(text.encode("utf-8"), filename)
        logger.info("Exported %s report: %s", fmt.value, filename)
        return ExportResult(format=fmt, path=path, filename=filename, notice=notice)

    def _print(self, html: str, title: str) -> ExportResult:
        path = self.delivery.present_printable(html, title)
        return ExportResult(format=ExportFormat.PDF, path=path, filename=path.name)


__all__ = ["EXCEL_NOTICE", "coerce_format", "dated_filename", "ReportExporter"]

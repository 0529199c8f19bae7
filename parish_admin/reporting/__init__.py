# parish_admin/reporting/__init__.py
# Report export: formatters (text), delivery (where it goes), exporter (glue),
# analytics (row builders for the dashboard's reports).

from .types import ExportFormat, ExportRequest, ExportResult
from .errors import DeliveryError, ExportError, PopupBlockedError
from .formatters import CSVFormatter, HTMLFormatter, JSONFormatter
from .delivery import Delivery, FileDelivery
from .exporter import ReportExporter, dated_filename
from .analytics import AnalyticsExporter

__all__ = [
    "ExportFormat",
    "ExportRequest",
    "ExportResult",
    "DeliveryError",
    "ExportError",
    "PopupBlockedError",
    "CSVFormatter",
    "HTMLFormatter",
    "JSONFormatter",
    "Delivery",
    "FileDelivery",
    "ReportExporter",
    "dated_filename",
    "AnalyticsExporter",
]

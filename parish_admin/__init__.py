# parish_admin/__init__.py
# Admin-side data layer for the parish site: API client, aggregator, reports.

from .aggregator import AdminAggregator
from .client import ParishApiClient

__all__ = ["AdminAggregator", "ParishApiClient"]

"""
Parish REST API client.

Design goals:
- One httpx.AsyncClient per ParishApiClient; all requests go through shared.api_request.
- Every call returns an ApiResponse envelope; transport failures never raise.
"""

from .api import ParishApiClient
from .shared import ApiResponse, api_request, format_api_error

__all__ = [
    "ParishApiClient",
    "ApiResponse",
    "api_request",
    "format_api_error",
]

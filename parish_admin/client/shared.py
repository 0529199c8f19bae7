from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..config import settings

logger = logging.getLogger(__name__)

# NOTE:
# This file is the single source of truth for client->parish API HTTP behavior.
# Nothing here raises for transport problems; every outcome becomes an ApiResponse.

DEFAULT_TIMEOUT_S = float(settings.http_timeout_s)
DEFAULT_UA = settings.http_user_agent

GENERIC_ERROR = "An error occurred"


class ApiResponse(BaseModel):
    """
    The parish API envelope: {success, data?, message?, errors?}.

    status_code is filled in client-side (408/503/500 for transport failures).
    """

    model_config = ConfigDict(extra="allow")

    success: bool = False
    data: Any = None
    message: Optional[str] = None
    errors: Optional[List[Any]] = None
    status_code: int = Field(default=0, exclude=True)

    @property
    def error_message(self) -> str:
        return (self.message or "").strip() or GENERIC_ERROR

    def data_field(self, key: str) -> Any:
        """
        data[key] when data is a dict, else None.
        """
        if isinstance(self.data, dict):
            return self.data.get(key)
        return None


# -----------------------------
# Small primitives
# -----------------------------

def truncate(s: str, limit: int = 300) -> str:
    if not s:
        return ""
    if len(s) <= limit:
        return s
    return s[: max(0, limit - 3)] + "..."


def format_api_error(code: int, text: str, data: Optional[dict]) -> str:
    """
    Human-readable message for a failed call. Prefers the server's own message.
    """
    if isinstance(data, dict):
        for key in ("message", "detail", "error"):
            detail = data.get(key)
            if isinstance(detail, str) and detail.strip():
                return detail.strip()
    if code:
        return f"HTTP error! status: {code}"
    return truncate(text) or GENERIC_ERROR


def _safe_json(r: httpx.Response) -> Optional[dict]:
    """
    Best-effort JSON parse:
      - returns dict if payload is a dict
      - returns None if not JSON or not dict
    """
    try:
        payload = r.json()
    except Exception:
        return None
    return payload if isinstance(payload, dict) else None


def _to_response(code: int, text: str, data: Optional[dict]) -> ApiResponse:
    if data is None:
        return ApiResponse(success=False, message=format_api_error(code, text, None), status_code=code)

    if not (200 <= code < 300):
        return ApiResponse(
            success=False,
            data=data.get("data"),
            message=format_api_error(code, text, data),
            errors=data.get("errors") if isinstance(data.get("errors"), list) else None,
            status_code=code,
        )

    message = data.get("message")
    return ApiResponse(
        success=bool(data.get("success", False)),
        data=data.get("data"),
        message=message if isinstance(message, str) else None,
        errors=data.get("errors") if isinstance(data.get("errors"), list) else None,
        status_code=code,
    )


# -----------------------------
# API helpers
# -----------------------------

async def api_request(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    json: Optional[Any] = None,
    timeout: Optional[float] = None,
) -> ApiResponse:
    """
    Low-level request helper used by every resource namespace.

    path is relative to the client's base_url. Returns an ApiResponse; never raises
    for timeouts, network errors or non-JSON bodies.
    """
    m = (method or "GET").strip().upper()
    p = (path or "").lstrip("/")
    req_timeout = float(timeout) if timeout is not None else httpx.USE_CLIENT_DEFAULT

    try:
        r = await client.request(m, p, params=params, json=json, timeout=req_timeout)
    except httpx.TimeoutException:
        return ApiResponse(success=False, message="Request timed out contacting API.", status_code=408)
    except httpx.RequestError as e:
        return ApiResponse(success=False, message=f"Network error contacting API: {e}", status_code=503)
    except Exception as e:
        logger.exception("Unexpected error contacting API (%s %s): %s", m, p, e)
        return ApiResponse(success=False, message=f"Unexpected error contacting API: {e}", status_code=500)

    resp = _to_response(r.status_code, r.text, _safe_json(r))
    if not resp.success:
        logger.debug("API %s %s -> %s (%s)", m, p, r.status_code, resp.message)
    return resp


__all__ = [
    "DEFAULT_TIMEOUT_S",
    "DEFAULT_UA",
    "GENERIC_ERROR",
    "ApiResponse",
    "truncate",
    "format_api_error",
    "api_request",
]

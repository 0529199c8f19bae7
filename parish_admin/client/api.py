from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import httpx

from ..config import settings
from .shared import DEFAULT_TIMEOUT_S, DEFAULT_UA, ApiResponse, api_request


def _clean_params(params: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Drop None values and stringify booleans the way the API expects (true/false).
    """
    if not params:
        return None
    out: Dict[str, Any] = {}
    for k, v in params.items():
        if v is None:
            continue
        out[k] = ("true" if v else "false") if isinstance(v, bool) else v
    return out or None


class Resource:
    """
    CRUD namespace for one REST collection, e.g. /announcements.

    Every method returns an ApiResponse and never raises for HTTP/transport errors.
    """

    def __init__(self, owner: "ParishApiClient", path: str) -> None:
        self._owner = owner
        self.path = path.strip("/")

    def _item(self, item_id: str, *suffix: str) -> str:
        parts = [self.path, str(item_id), *suffix]
        return "/".join(p.strip("/") for p in parts if p)

    async def list(self, **params: Any) -> ApiResponse:
        return await self._owner.request("GET", self.path, params=_clean_params(params))

    async def get(self, item_id: str) -> ApiResponse:
        return await self._owner.request("GET", self._item(item_id))

    async def create(self, payload: Mapping[str, Any]) -> ApiResponse:
        return await self._owner.request("POST", self.path, json=dict(payload))

    async def update(self, item_id: str, payload: Mapping[str, Any]) -> ApiResponse:
        return await self._owner.request("PUT", self._item(item_id), json=dict(payload))

    async def delete(self, item_id: str) -> ApiResponse:
        return await self._owner.request("DELETE", self._item(item_id))

    async def patch_action(self, item_id: str, action: str, payload: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        body = dict(payload) if payload is not None else None
        return await self._owner.request("PATCH", self._item(item_id, action), json=body)


class ToggleResource(Resource):
    async def toggle(self, item_id: str) -> ApiResponse:
        return await self.patch_action(item_id, "toggle")


class NewsResource(Resource):
    async def archive(self, item_id: str) -> ApiResponse:
        return await self.patch_action(item_id, "archive")

    async def unarchive(self, item_id: str) -> ApiResponse:
        return await self.patch_action(item_id, "unarchive")


class ScheduleResource(ToggleResource):
    async def bulk_update_day(self, day: str, schedule: List[Mapping[str, Any]]) -> ApiResponse:
        """
        Replace every entry for one day: PUT /schedule/day/{day}/bulk {schedule: [...]}.
        """
        path = f"{self.path}/day/{day}/bulk"
        return await self._owner.request("PUT", path, json={"schedule": [dict(s) for s in schedule]})


class UserResource(ToggleResource):
    async def reset_password(self, item_id: str, new_password: str) -> ApiResponse:
        # Backend versions disagree on the key name; send both.
        return await self.patch_action(
            item_id,
            "reset-password",
            {"newPassword": new_password, "password": new_password},
        )


class PrayerResource(Resource):
    async def approve(self, item_id: str) -> ApiResponse:
        return await self.patch_action(item_id, "approve")


class ContactResource:
    """
    Singleton resource: GET /contact, PUT /contact.
    """

    def __init__(self, owner: "ParishApiClient", path: str = "contact") -> None:
        self._owner = owner
        self.path = path.strip("/")

    async def get(self) -> ApiResponse:
        return await self._owner.request("GET", self.path)

    async def update(self, payload: Mapping[str, Any]) -> ApiResponse:
        return await self._owner.request("PUT", self.path, json=dict(payload))


class ParishApiClient:
    """
    Async client for the parish REST API.

    Notes:
    - Owns one httpx.AsyncClient (lazy; created on first request or __aenter__).
    - All HTTP goes through shared.api_request so error handling stays in one place.
    - transport is injectable (tests mount an in-process app with httpx.ASGITransport).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base).rstrip("/")
        self.timeout = float(timeout if timeout is not None else DEFAULT_TIMEOUT_S)
        self.user_agent = user_agent or DEFAULT_UA
        self._token: Optional[str] = token if token is not None else (settings.api_token or None)
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

        self.announcements = ToggleResource(self, "announcements")
        self.events = Resource(self, "events")
        self.news = NewsResource(self, "news")
        self.categories = Resource(self, "categories")
        self.gallery = Resource(self, "gallery")
        self.contact = ContactResource(self, "contact")
        self.schedule = ScheduleResource(self, "schedule")
        self.users = UserResource(self, "admin/users")
        self.prayers = PrayerResource(self, "prayers")
        self.ministries = ToggleResource(self, "ministries")
        self.sacraments = ToggleResource(self, "sacraments")

    # -----------------------------
    # Lifecycle
    # -----------------------------

    def _build_http(self) -> httpx.AsyncClient:
        # Conservative limits; the parish API is a small internal service.
        limits = httpx.Limits(max_connections=25, max_keepalive_connections=10)
        kwargs: Dict[str, Any] = {
            "base_url": self.base_url + "/",
            "timeout": self.timeout,
            "headers": {"User-Agent": self.user_agent, "Accept": "application/json"},
            "limits": limits,
            "follow_redirects": True,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = self._build_http()
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            try:
                await self._http.aclose()
            finally:
                self._http = None

    async def __aenter__(self) -> "ParishApiClient":
        _ = self.http
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # -----------------------------
    # Auth
    # -----------------------------

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        """
        Set or clear the bearer token used on subsequent requests.
        """
        self._token = (token or "").strip() or None

    def _auth_headers(self) -> Dict[str, str]:
        if self._token:
            return {"Authorization": f"Bearer {self._token}"}
        return {}

    # -----------------------------
    # Requests
    # -----------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> ApiResponse:
        http = self.http
        auth = self._auth_headers()
        if auth:
            http.headers.update(auth)
        else:
            http.headers.pop("Authorization", None)
        return await api_request(http, method, path, params=params, json=json, timeout=timeout)

    async def health(self) -> ApiResponse:
        return await self.request("GET", "health")


__all__ = [
    "Resource",
    "ToggleResource",
    "NewsResource",
    "ScheduleResource",
    "UserResource",
    "PrayerResource",
    "ContactResource",
    "ParishApiClient",
]

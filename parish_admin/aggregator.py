from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Type,
    TypeVar,
    Union,
)

from pydantic import BaseModel

from .client import ApiResponse, ParishApiClient
from .models import (
    Announcement,
    Category,
    CategoryType,
    ContactInfo,
    DayOfWeek,
    Event,
    GalleryImage,
    MassScheduleEntry,
    Ministry,
    ParishNews,
    ParishRecord,
    PrayerIntention,
    Sacrament,
    User,
    UserRole,
    is_privileged,
    utcnow,
)

logger = logging.getLogger(__name__)

Payload = Union[Mapping[str, Any], BaseModel]
R = TypeVar("R", bound=ParishRecord)

UNEXPECTED_ERROR = "An unexpected error occurred"
PERMISSION_ERROR = "Insufficient permissions"


@dataclass(frozen=True)
class CollectionInfo:
    """
    How one collection is fetched and stored.

    - name: attribute on AdminAggregator
    - resource: namespace on ParishApiClient
    - data_key: where the records sit inside the response's `data`
    - singleton: stored as Optional[model] instead of a list
    """

    name: str
    resource: str
    data_key: str
    model: Type[ParishRecord]
    singleton: bool = False


# Deterministic order; bulk refresh fires one request per entry.
COLLECTIONS: Sequence[CollectionInfo] = (
    CollectionInfo("announcements", "announcements", "announcements", Announcement),
    CollectionInfo("events", "events", "events", Event),
    CollectionInfo("parish_news", "news", "news", ParishNews),
    CollectionInfo("categories", "categories", "categories", Category),
    CollectionInfo("gallery_images", "gallery", "images", GalleryImage),
    CollectionInfo("contact_info", "contact", "contact", ContactInfo, singleton=True),
    CollectionInfo("mass_schedule", "schedule", "raw_schedule", MassScheduleEntry),
    CollectionInfo("users", "users", "users", User),
    CollectionInfo("prayer_intentions", "prayers", "intentions", PrayerIntention),
    CollectionInfo("ministries", "ministries", "ministries", Ministry),
    CollectionInfo("sacraments", "sacraments", "sacraments", Sacrament),
)

COLLECTION_NAMES: Sequence[str] = tuple(info.name for info in COLLECTIONS)


class CollectionFetchError(RuntimeError):
    """One collection could not be refreshed (API rejection or bad payload)."""


def _unique_by_id(name: str, records: Iterable[R]) -> List[R]:
    seen: Set[str] = set()
    out: List[R] = []
    for r in records:
        if r.id in seen:
            logger.warning("dropping duplicate id in %s: %s", name, r.id)
            continue
        seen.add(r.id)
        out.append(r)
    return out


def _enum_value(v: Any) -> str:
    return str(getattr(v, "value", v) or "").strip().lower()


class AdminAggregator:
    """
    Single source of truth for the admin dashboard's eleven collections.

    State:
    - loading: True while any refresh or mutation is in flight
    - error: last mutation failure (server message or a generic fallback), else None
    - one attribute per collection (see COLLECTIONS); contact_info is a singleton

    Rules:
    - refresh() is settle-all: each collection succeeds or fails on its own and a
      failed collection keeps its previous value.
    - create/update/toggle/archive/approve refetch everything afterwards; deletes
      prune the record locally.
    - A parishioner (or anonymous) actor never touches the network.
    - Nothing here raises for API failures; callers inspect `error` or the bool result.
    """

    def __init__(self, api: ParishApiClient, role: Optional[Union[str, UserRole]] = None) -> None:
        self.api = api
        self.role: Optional[Union[str, UserRole]] = role

        self.error: Optional[str] = None
        self._inflight = 0

        self.announcements: List[Announcement] = []
        self.events: List[Event] = []
        self.parish_news: List[ParishNews] = []
        self.categories: List[Category] = []
        self.gallery_images: List[GalleryImage] = []
        self.contact_info: Optional[ContactInfo] = None
        self.mass_schedule: List[MassScheduleEntry] = []
        self.users: List[User] = []
        self.prayer_intentions: List[PrayerIntention] = []
        self.ministries: List[Ministry] = []
        self.sacraments: List[Sacrament] = []

    # -----------------------------
    # Session / state helpers
    # -----------------------------

    @property
    def loading(self) -> bool:
        return self._inflight > 0

    @property
    def can_access(self) -> bool:
        return is_privileged(self.role)

    def set_role(self, role: Optional[Union[str, UserRole]]) -> None:
        """
        Change the acting role (login/logout). Loaded data is left as-is.
        """
        self.role = role

    def collection(self, name: str) -> Any:
        if name not in COLLECTION_NAMES:
            raise KeyError(f"unknown collection: {name}")
        return getattr(self, name)

    def _begin(self) -> None:
        self._inflight += 1

    def _end(self) -> None:
        self._inflight = max(0, self._inflight - 1)

    # -----------------------------
    # Bulk refresh
    # -----------------------------

    async def _fetch(self, info: CollectionInfo) -> Any:
        resource = getattr(self.api, info.resource)
        if info.singleton:
            resp: ApiResponse = await resource.get()
        else:
            resp = await resource.list()

        if not resp.success:
            raise CollectionFetchError(resp.error_message)

        raw = resp.data_field(info.data_key)
        if info.singleton:
            return info.model.model_validate(raw) if raw else None

        if raw is None:
            return []
        if not isinstance(raw, list):
            raise CollectionFetchError(f"expected a list under data.{info.data_key}")
        return _unique_by_id(info.name, (info.model.model_validate(item) for item in raw))

    async def refresh(self) -> Set[str]:
        """
        Fetch all eleven collections concurrently and keep whatever succeeded.

        Returns the names of the collections that were replaced. Never raises and
        never sets `error`; partial failures are logged.
        """
        if not self.can_access:
            logger.debug("refresh skipped for role=%s", _enum_value(self.role) or "anonymous")
            return set()

        self._begin()
        try:
            outcomes = await asyncio.gather(
                *(self._fetch(info) for info in COLLECTIONS),
                return_exceptions=True,
            )

            refreshed: Set[str] = set()
            for info, outcome in zip(COLLECTIONS, outcomes):
                if isinstance(outcome, BaseException):
                    logger.warning("refresh: %s kept stale value (%s)", info.name, outcome)
                    continue
                setattr(self, info.name, outcome)
                refreshed.add(info.name)

            if len(refreshed) < len(COLLECTIONS):
                logger.info("refresh: %d/%d collections updated", len(refreshed), len(COLLECTIONS))
            return refreshed
        finally:
            self._end()

    fetch_all = refresh

    # -----------------------------
    # Mutation plumbing
    # -----------------------------

    async def _mutate(
        self,
        op: str,
        call: Callable[[], Awaitable[ApiResponse]],
        on_success: Optional[Callable[[ApiResponse], Any]] = None,
    ) -> bool:
        if not self.can_access:
            logger.warning("%s blocked for role=%s", op, _enum_value(self.role) or "anonymous")
            self.error = PERMISSION_ERROR
            return False

        self._begin()
        try:
            self.error = None
            resp = await call()
            if not resp.success:
                self.error = resp.error_message
                logger.warning("%s failed: %s", op, self.error)
                return False

            if on_success is not None:
                result = on_success(resp)
                if inspect.isawaitable(result):
                    await result
            return True
        except Exception as e:
            logger.exception("%s failed unexpectedly", op)
            self.error = str(e).strip() or UNEXPECTED_ERROR
            return False
        finally:
            self._end()

    async def _refetch(self, _resp: ApiResponse) -> None:
        await self.refresh()

    def _pruner(self, name: str, item_id: str) -> Callable[[ApiResponse], None]:
        def _prune(_resp: ApiResponse) -> None:
            current = getattr(self, name)
            setattr(self, name, [r for r in current if r.id != item_id])

        return _prune

    # -----------------------------
    # Announcements
    # -----------------------------

    def get_active_announcements(self) -> List[Announcement]:
        return [a for a in self.announcements if a.is_active]

    async def create_announcement(self, data: Payload) -> bool:
        body = Announcement.payload(data)
        return await self._mutate("create_announcement", lambda: self.api.announcements.create(body), self._refetch)

    async def update_announcement(self, item_id: str, data: Payload) -> bool:
        body = Announcement.payload(data)
        return await self._mutate(
            "update_announcement", lambda: self.api.announcements.update(item_id, body), self._refetch
        )

    async def delete_announcement(self, item_id: str) -> bool:
        return await self._mutate(
            "delete_announcement",
            lambda: self.api.announcements.delete(item_id),
            self._pruner("announcements", item_id),
        )

    async def toggle_announcement(self, item_id: str) -> bool:
        return await self._mutate("toggle_announcement", lambda: self.api.announcements.toggle(item_id), self._refetch)

    # -----------------------------
    # Events
    # -----------------------------

    def get_upcoming_events(self, now: Optional[datetime] = None) -> List[Event]:
        """
        Published events dated today-or-later. Events with unparseable dates are skipped.
        """
        ref = now or utcnow()
        if ref.tzinfo is None:
            ref = ref.replace(tzinfo=timezone.utc)
        out: List[Event] = []
        for e in self.events:
            starts = e.starts_on
            if e.is_published and starts is not None and starts >= ref:
                out.append(e)
        return out

    async def create_event(self, data: Payload) -> bool:
        body = Event.payload(data)
        return await self._mutate("create_event", lambda: self.api.events.create(body), self._refetch)

    async def update_event(self, item_id: str, data: Payload) -> bool:
        body = Event.payload(data)
        return await self._mutate("update_event", lambda: self.api.events.update(item_id, body), self._refetch)

    async def delete_event(self, item_id: str) -> bool:
        return await self._mutate("delete_event", lambda: self.api.events.delete(item_id), self._pruner("events", item_id))

    # -----------------------------
    # Parish news
    # -----------------------------

    def get_published_parish_news(self) -> List[ParishNews]:
        return [n for n in self.parish_news if n.is_published and not n.is_archived]

    async def create_parish_news(self, data: Payload) -> bool:
        body = ParishNews.payload(data)
        return await self._mutate("create_parish_news", lambda: self.api.news.create(body), self._refetch)

    async def update_parish_news(self, item_id: str, data: Payload) -> bool:
        body = ParishNews.payload(data)
        return await self._mutate("update_parish_news", lambda: self.api.news.update(item_id, body), self._refetch)

    async def delete_parish_news(self, item_id: str) -> bool:
        return await self._mutate(
            "delete_parish_news", lambda: self.api.news.delete(item_id), self._pruner("parish_news", item_id)
        )

    async def archive_parish_news(self, item_id: str) -> bool:
        return await self._mutate("archive_parish_news", lambda: self.api.news.archive(item_id), self._refetch)

    async def unarchive_parish_news(self, item_id: str) -> bool:
        return await self._mutate("unarchive_parish_news", lambda: self.api.news.unarchive(item_id), self._refetch)

    # -----------------------------
    # Categories
    # -----------------------------

    def get_categories_by_type(self, category_type: Union[str, CategoryType]) -> List[Category]:
        wanted = _enum_value(category_type)
        return [c for c in self.categories if _enum_value(c.type) == wanted and c.is_active]

    async def create_category(self, data: Payload) -> bool:
        body = Category.payload(data)
        return await self._mutate("create_category", lambda: self.api.categories.create(body), self._refetch)

    async def update_category(self, item_id: str, data: Payload) -> bool:
        body = Category.payload(data)
        return await self._mutate("update_category", lambda: self.api.categories.update(item_id, body), self._refetch)

    async def delete_category(self, item_id: str) -> bool:
        return await self._mutate(
            "delete_category", lambda: self.api.categories.delete(item_id), self._pruner("categories", item_id)
        )

    # -----------------------------
    # Gallery
    # -----------------------------

    def get_featured_images(self) -> List[GalleryImage]:
        return [img for img in self.gallery_images if img.is_featured]

    async def create_gallery_image(self, data: Payload) -> bool:
        body = GalleryImage.payload(data)
        return await self._mutate("create_gallery_image", lambda: self.api.gallery.create(body), self._refetch)

    async def update_gallery_image(self, item_id: str, data: Payload) -> bool:
        body = GalleryImage.payload(data)
        return await self._mutate(
            "update_gallery_image", lambda: self.api.gallery.update(item_id, body), self._refetch
        )

    async def delete_gallery_image(self, item_id: str) -> bool:
        return await self._mutate(
            "delete_gallery_image", lambda: self.api.gallery.delete(item_id), self._pruner("gallery_images", item_id)
        )

    # -----------------------------
    # Contact info (singleton)
    # -----------------------------

    async def update_contact_info(self, data: Payload) -> bool:
        body = ContactInfo.payload(data)

        async def _apply(resp: ApiResponse) -> None:
            contact = resp.data_field("contact")
            if isinstance(contact, dict):
                self.contact_info = ContactInfo.model_validate(contact)
            else:
                # Server acknowledged without echoing the record
                await self.refresh()

        return await self._mutate("update_contact_info", lambda: self.api.contact.update(body), _apply)

    # -----------------------------
    # Mass schedule
    # -----------------------------

    def get_schedule_by_day(self, day: Union[str, DayOfWeek]) -> List[MassScheduleEntry]:
        wanted = _enum_value(day)
        return [s for s in self.mass_schedule if _enum_value(s.day_of_week) == wanted and s.is_active]

    async def create_schedule_entry(self, data: Payload) -> bool:
        body = MassScheduleEntry.payload(data)
        return await self._mutate("create_schedule_entry", lambda: self.api.schedule.create(body), self._refetch)

    async def update_schedule_entry(self, item_id: str, data: Payload) -> bool:
        body = MassScheduleEntry.payload(data)
        return await self._mutate(
            "update_schedule_entry", lambda: self.api.schedule.update(item_id, body), self._refetch
        )

    async def delete_schedule_entry(self, item_id: str) -> bool:
        return await self._mutate(
            "delete_schedule_entry", lambda: self.api.schedule.delete(item_id), self._pruner("mass_schedule", item_id)
        )

    async def bulk_update_schedule(self, day: Union[str, DayOfWeek], entries: Sequence[Payload]) -> bool:
        """
        Replace every schedule entry for `day` in one call.
        """
        day_value = _enum_value(day)
        bodies = [MassScheduleEntry.payload(e) for e in entries]
        return await self._mutate(
            "bulk_update_schedule", lambda: self.api.schedule.bulk_update_day(day_value, bodies), self._refetch
        )

    # -----------------------------
    # Users
    # -----------------------------

    async def create_user(self, data: Payload, password: Optional[str] = None) -> bool:
        body = User.payload(data)
        if password is not None:
            body["password"] = password
        return await self._mutate("create_user", lambda: self.api.users.create(body), self._refetch)

    async def update_user(self, item_id: str, data: Payload) -> bool:
        body = User.payload(data)
        return await self._mutate("update_user", lambda: self.api.users.update(item_id, body), self._refetch)

    async def delete_user(self, item_id: str) -> bool:
        return await self._mutate("delete_user", lambda: self.api.users.delete(item_id), self._pruner("users", item_id))

    async def reset_user_password(self, item_id: str, new_password: str) -> bool:
        # No local state changes
        return await self._mutate(
            "reset_user_password", lambda: self.api.users.reset_password(item_id, new_password)
        )

    async def toggle_user(self, item_id: str) -> bool:
        return await self._mutate("toggle_user", lambda: self.api.users.toggle(item_id), self._refetch)

    # -----------------------------
    # Prayer intentions
    # -----------------------------

    def get_pending_prayer_intentions(self) -> List[PrayerIntention]:
        return [p for p in self.prayer_intentions if not p.is_approved]

    async def approve_prayer_intention(self, item_id: str) -> bool:
        return await self._mutate("approve_prayer_intention", lambda: self.api.prayers.approve(item_id), self._refetch)

    async def delete_prayer_intention(self, item_id: str) -> bool:
        return await self._mutate(
            "delete_prayer_intention",
            lambda: self.api.prayers.delete(item_id),
            self._pruner("prayer_intentions", item_id),
        )

    # -----------------------------
    # Ministries
    # -----------------------------

    def get_active_ministries(self) -> List[Ministry]:
        return [m for m in self.ministries if m.is_active]

    async def create_ministry(self, data: Payload) -> bool:
        body = Ministry.payload(data)
        return await self._mutate("create_ministry", lambda: self.api.ministries.create(body), self._refetch)

    async def update_ministry(self, item_id: str, data: Payload) -> bool:
        body = Ministry.payload(data)
        return await self._mutate("update_ministry", lambda: self.api.ministries.update(item_id, body), self._refetch)

    async def delete_ministry(self, item_id: str) -> bool:
        return await self._mutate(
            "delete_ministry", lambda: self.api.ministries.delete(item_id), self._pruner("ministries", item_id)
        )

    async def toggle_ministry(self, item_id: str) -> bool:
        return await self._mutate("toggle_ministry", lambda: self.api.ministries.toggle(item_id), self._refetch)

    # -----------------------------
    # Sacraments
    # -----------------------------

    def get_active_sacraments(self) -> List[Sacrament]:
        return [s for s in self.sacraments if s.is_active]

    async def create_sacrament(self, data: Payload) -> bool:
        body = Sacrament.payload(data)
        return await self._mutate("create_sacrament", lambda: self.api.sacraments.create(body), self._refetch)

    async def update_sacrament(self, item_id: str, data: Payload) -> bool:
        body = Sacrament.payload(data)
        return await self._mutate("update_sacrament", lambda: self.api.sacraments.update(item_id, body), self._refetch)

    async def delete_sacrament(self, item_id: str) -> bool:
        return await self._mutate(
            "delete_sacrament", lambda: self.api.sacraments.delete(item_id), self._pruner("sacraments", item_id)
        )

    async def toggle_sacrament(self, item_id: str) -> bool:
        return await self._mutate("toggle_sacrament", lambda: self.api.sacraments.toggle(item_id), self._refetch)

    # -----------------------------
    # Reporting helpers
    # -----------------------------

    def counts(self) -> Dict[str, int]:
        """
        Size of every collection (contact_info counts as 0 or 1).
        """
        out: Dict[str, int] = {}
        for info in COLLECTIONS:
            value = getattr(self, info.name)
            if info.singleton:
                out[info.name] = 1 if value is not None else 0
            else:
                out[info.name] = len(value)
        return out


__all__ = [
    "AdminAggregator",
    "COLLECTIONS",
    "COLLECTION_NAMES",
    "CollectionInfo",
    "CollectionFetchError",
    "PERMISSION_ERROR",
    "UNEXPECTED_ERROR",
]

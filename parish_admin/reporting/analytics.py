from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from ..models import parse_timestamp, utcnow
from .errors import ExportError
from .exporter import EXCEL_NOTICE, ReportExporter, coerce_format
from .formatters import CSVFormatter
from .types import ExportFormat, ExportRequest, ExportResult

if TYPE_CHECKING:
    from ..aggregator import AdminAggregator

logger = logging.getLogger(__name__)

Row = Union[Mapping[str, Any], BaseModel]

NA = "N/A"

USER_COLUMNS = [
    "Username",
    "Full Name",
    "Email",
    "Role",
    "Association",
    "Section",
    "Baptized",
    "Confirmed",
    "Receives Communion",
    "Married",
    "Spouse",
    "Created",
    "Last Login",
]
VIDEO_COLUMNS = ["Title", "Category", "Views", "Duration", "Published", "Published Date", "Created By", "Created Date"]
CONTENT_COLUMNS = ["Content Type", "Title", "Views", "Category", "Published", "Author", "Created Date"]
DEMOGRAPHIC_COLUMNS = ["Category", "Item", "Count", "Percentage"]

# (row label, keys holding the item list, keys naming the item)
DEMOGRAPHIC_SECTIONS: Sequence[Tuple[str, Tuple[str, ...], Tuple[str, ...]]] = (
    ("Gender", ("by_gender", "byGender", "gender"), ("gender",)),
    ("Age Group", ("by_age", "byAge", "age"), ("age_group", "ageGroup")),
    ("Section", ("by_section", "bySection", "sections"), ("section",)),
    ("Association", ("by_association", "byAssociation", "associations"), ("association",)),
)


# -----------------------------
# Field helpers
# -----------------------------

def _get(obj: Any, *keys: str) -> Any:
    """
    First non-None value among keys. Works on mappings and models (API rows
    arrive snake_case, dashboard payloads camelCase).
    """
    if obj is None:
        return None
    for key in keys:
        if isinstance(obj, Mapping):
            value = obj.get(key)
        else:
            value = getattr(obj, key, None)
        if value is not None:
            return value
    return None


def _text(value: Any, default: str = NA) -> Any:
    if value is None:
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return getattr(value, "value", value)


def _yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def _tri_state(value: Any) -> str:
    if value is None:
        return NA
    return _yes_no(value)


def _date(value: Any, default: str = NA) -> str:
    dt = parse_timestamp(value) if value else None
    return dt.strftime("%Y-%m-%d") if dt else default


# -----------------------------
# Demographics from the users list
# -----------------------------

# (upper age bound, exclusive; bracket label)
AGE_BRACKETS: Sequence[Tuple[int, str]] = (
    (13, "0-12"),
    (18, "13-17"),
    (25, "18-24"),
    (35, "25-34"),
    (46, "35-45"),
    (61, "46-60"),
)
OLDEST_BRACKET = "61+"
UNKNOWN_AGE = "Unknown"


def age_on(born: date, today: date) -> int:
    """Completed years between born and today."""
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


def age_bracket(date_of_birth: Any, today: date) -> str:
    dt = parse_timestamp(date_of_birth) if date_of_birth else None
    if dt is None:
        return UNKNOWN_AGE
    age = age_on(dt.date(), today)
    for upper, label in AGE_BRACKETS:
        if age < upper:
            return label
    return OLDEST_BRACKET


def _breakdown(counts: Counter, total: int, label_key: str) -> List[Dict[str, Any]]:
    return [
        {label_key: item, "count": count, "percentage": round(count / total * 100, 1)}
        for item, count in counts.items()
    ]


def demographics_from_users(users: Sequence[Row], today: Optional[date] = None) -> Dict[str, List[Dict[str, Any]]]:
    """
    Gender, age bracket, section and association breakdowns over a users list.

    Missing values count as "unknown" (gender), "Unknown" (age, section) and
    "None" (association). Percentages are of all users, rounded to one decimal.
    Items keep first-seen order. The result feeds export_demographics().
    """
    ref = today or utcnow().date()
    total = len(users) or 1

    gender: Counter = Counter()
    ages: Counter = Counter()
    sections: Counter = Counter()
    associations: Counter = Counter()
    for u in users:
        gender[str(_text(_get(u, "gender"), "unknown"))] += 1
        ages[age_bracket(_get(u, "date_of_birth", "dateOfBirth"), ref)] += 1
        sections[str(_text(_get(u, "section"), "Unknown"))] += 1
        associations[str(_text(_get(u, "association"), "None"))] += 1

    return {
        "by_gender": _breakdown(gender, total, "gender"),
        "by_age": _breakdown(ages, total, "age_group"),
        "by_section": _breakdown(sections, total, "section"),
        "by_association": _breakdown(associations, total, "association"),
    }


class AnalyticsExporter:
    """
    Shapes analytics data into report rows and exports them through a ReportExporter.
    """

    def __init__(self, exporter: ReportExporter) -> None:
        self.exporter = exporter

    # -----------------------------
    # Users / videos / content
    # -----------------------------

    @staticmethod
    def user_rows(users: Sequence[Row]) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        for u in users:
            first = _get(u, "first_name", "firstName") or ""
            last = _get(u, "last_name", "lastName") or ""
            rows.append(
                {
                    "Username": _text(_get(u, "username"), ""),
                    "Full Name": f"{first} {last}".strip(),
                    "Email": _text(_get(u, "email")),
                    "Role": _text(_get(u, "role"), ""),
                    "Association": _text(_get(u, "association")),
                    "Section": _text(_get(u, "section")),
                    "Baptized": _tri_state(_get(u, "is_baptized", "isBaptized")),
                    "Confirmed": _tri_state(_get(u, "is_confirmed", "isConfirmed")),
                    "Receives Communion": _tri_state(_get(u, "receives_communion", "receivesCommunion")),
                    "Married": _tri_state(_get(u, "is_married", "isMarried")),
                    "Spouse": _text(_get(u, "spouse_name", "spouseName")),
                    "Created": _date(_get(u, "created_at", "createdAt")),
                    "Last Login": _date(_get(u, "last_login", "lastLogin"), "Never"),
                }
            )
        return rows

    @staticmethod
    def video_rows(videos: Sequence[Row]) -> List[Dict[str, Any]]:
        return [
            {
                "Title": _text(_get(v, "title"), ""),
                "Category": _text(_get(v, "category"), ""),
                "Views": _get(v, "views") or 0,
                "Duration": _text(_get(v, "duration")),
                "Published": _yes_no(_get(v, "is_published", "isPublished")),
                "Published Date": _date(_get(v, "published_at", "publishedAt")),
                "Created By": _text(_get(v, "created_by_username", "createdByUsername")),
                "Created Date": _date(_get(v, "created_at", "createdAt")),
            }
            for v in videos
        ]

    @staticmethod
    def content_rows(content: Sequence[Row]) -> List[Dict[str, Any]]:
        return [
            {
                "Content Type": _text(_get(c, "type"), ""),
                "Title": _text(_get(c, "title"), ""),
                "Views": _get(c, "views") or 0,
                "Category": _text(_get(c, "category")),
                "Published": _yes_no(_get(c, "is_published", "isPublished")),
                "Author": _text(_get(c, "author")),
                "Created Date": _date(_get(c, "created_at", "createdAt")),
            }
            for c in content
        ]

    def export_user_analytics(self, users: Sequence[Row], fmt: Union[str, ExportFormat]) -> ExportResult:
        request = ExportRequest(
            title="User Analytics Report",
            records=self.user_rows(users),
            columns=USER_COLUMNS,
            filename="user-analytics",
        )
        return self.exporter.export(fmt, request)

    def export_video_analytics(self, videos: Sequence[Row], fmt: Union[str, ExportFormat]) -> ExportResult:
        request = ExportRequest(
            title="Video Analytics Report",
            records=self.video_rows(videos),
            columns=VIDEO_COLUMNS,
            filename="video-analytics",
        )
        return self.exporter.export(fmt, request)

    def export_content_analytics(self, content: Sequence[Row], fmt: Union[str, ExportFormat]) -> ExportResult:
        request = ExportRequest(
            title="Content Analytics Report",
            records=self.content_rows(content),
            columns=CONTENT_COLUMNS,
            filename="content-analytics",
        )
        return self.exporter.export(fmt, request)

    # -----------------------------
    # Demographics
    # -----------------------------

    @staticmethod
    def demographic_rows(demographics: Row) -> List[Dict[str, Any]]:
        """
        One row per item across Gender, Age Group, Section and Association.
        Missing sections are skipped.
        """
        rows: List[Dict[str, Any]] = []
        for label, list_keys, item_keys in DEMOGRAPHIC_SECTIONS:
            for item in _get(demographics, *list_keys) or []:
                pct = _get(item, "percentage")
                rows.append(
                    {
                        "Category": label,
                        "Item": _text(_get(item, *item_keys), ""),
                        "Count": _get(item, "count") or 0,
                        "Percentage": f"{pct if pct is not None else 0}%",
                    }
                )
        return rows

    def export_demographics(self, demographics: Row, fmt: Union[str, ExportFormat]) -> ExportResult:
        f = coerce_format(fmt)
        rows = self.demographic_rows(demographics)

        if f in (ExportFormat.CSV, ExportFormat.EXCEL):
            text = CSVFormatter.format_rows(
                DEMOGRAPHIC_COLUMNS, ([r[c] for c in DEMOGRAPHIC_COLUMNS] for r in rows)
            )
            return self.exporter.export_text(
                f,
                text,
                "demographics-analytics",
                "csv",
                notice=EXCEL_NOTICE if f == ExportFormat.EXCEL else None,
                title="Demographics Analytics Report",
            )

        request = ExportRequest(
            title="Demographics Analytics Report",
            records=rows,
            columns=DEMOGRAPHIC_COLUMNS,
            filename="demographics-analytics",
        )
        return self.exporter.export(f, request)

    def export_user_demographics(
        self,
        users: Sequence[Row],
        fmt: Union[str, ExportFormat],
        today: Optional[date] = None,
    ) -> ExportResult:
        return self.export_demographics(demographics_from_users(users, today), fmt)

    # -----------------------------
    # Summary (print only)
    # -----------------------------

    @staticmethod
    def summary_sections(summary: Row) -> List[Dict[str, Any]]:
        users = _get(summary, "users")
        content = _get(summary, "content")
        videos = _get(summary, "videos")
        return [
            {
                "heading": "User Statistics",
                "metrics": [
                    ("Total Users", _get(users, "total") or 0),
                    ("Active Users", _get(users, "active") or 0),
                    ("New This Month", _get(users, "new_this_month", "newThisMonth") or 0),
                ],
            },
            {
                "heading": "Content Statistics",
                "metrics": [
                    ("Total Views", _get(content, "total_views", "totalViews") or 0),
                    ("Video Views", _get(content, "video_views", "videoViews") or 0),
                    ("News Views", _get(content, "news_views", "newsViews") or 0),
                ],
            },
            {
                "heading": "Video Statistics",
                "metrics": [
                    ("Total Videos", _get(videos, "total_videos", "totalVideos") or 0),
                    ("Live Streams", _get(videos, "live_streams", "liveStreams") or 0),
                    ("Total Watch Time", _get(videos, "total_watch_time", "totalWatchTime") or NA),
                ],
            },
        ]

    def print_analytics_summary(self, summary: Row) -> ExportResult:
        return self.exporter.print_summary("Analytics Summary Report", self.summary_sections(summary))

    # -----------------------------
    # Aggregator collections
    # -----------------------------

    def export_collection(
        self,
        aggregator: "AdminAggregator",
        name: str,
        fmt: Union[str, ExportFormat],
        *,
        title: Optional[str] = None,
    ) -> ExportResult:
        try:
            value = aggregator.collection(name)
        except KeyError:
            raise ExportError(f"Export failed: unknown collection '{name}'") from None

        if value is None:
            items = []
        elif isinstance(value, list):
            items = value
        else:
            items = [value]

        records = [r.model_dump(mode="json") if isinstance(r, BaseModel) else dict(r) for r in items]
        logger.debug("export_collection %s: %d records", name, len(records))

        request = ExportRequest(
            title=title or f"{name.replace('_', ' ').title()} Report",
            records=records,
            filename=f"{name.replace('_', '-')}-report",
        )
        return self.exporter.export(fmt, request)


__all__ = [
    "USER_COLUMNS",
    "VIDEO_COLUMNS",
    "CONTENT_COLUMNS",
    "DEMOGRAPHIC_COLUMNS",
    "age_bracket",
    "demographics_from_users",
    "AnalyticsExporter",
]

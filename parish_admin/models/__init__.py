# parish_admin/models/__init__.py
# Central import surface for the records the admin dashboard holds client-side.
# Bootstrap tables live in .tables and are registered by database.register_models().

from .base import SERVER_FIELDS, ParishRecord
from .dates import parse_timestamp, utcnow

from .announcement import Announcement, AnnouncementType
from .event import Event
from .news import AuthorRole, ParishNews
from .category import Category, CategoryType
from .gallery import GalleryImage
from .contact import ContactInfo
from .schedule import DayOfWeek, MassScheduleEntry, ScheduleLanguage, ScheduleType
from .user import UNPRIVILEGED_ROLES, User, UserRole, is_privileged
from .prayer import PrayerIntention
from .ministry import Ministry
from .sacrament import Sacrament

__all__ = [
    "SERVER_FIELDS",
    "ParishRecord",
    "parse_timestamp",
    "utcnow",
    "Announcement",
    "AnnouncementType",
    "Event",
    "AuthorRole",
    "ParishNews",
    "Category",
    "CategoryType",
    "GalleryImage",
    "ContactInfo",
    "DayOfWeek",
    "MassScheduleEntry",
    "ScheduleLanguage",
    "ScheduleType",
    "UNPRIVILEGED_ROLES",
    "User",
    "UserRole",
    "is_privileged",
    "PrayerIntention",
    "Ministry",
    "Sacrament",
]

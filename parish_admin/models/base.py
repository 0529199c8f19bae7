from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Mapping, Union

from pydantic import BaseModel, ConfigDict, model_validator

# Fields the server owns on every resource. Never sent back in a request body.
SERVER_FIELDS: FrozenSet[str] = frozenset({"id", "created_at", "updated_at"})


def _jsonable(v: Any) -> Any:
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, (datetime, date, time)):
        return v.isoformat()
    return v


class ParishRecord(BaseModel):
    """
    Base for every record held client-side.

    Notes:
    - extra="allow" keeps fields the server adds later; a refresh never drops data.
    - id is an opaque string (the backend issues UUIDs).
    - server_fields lists everything a create/update payload must not carry.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    server_fields: ClassVar[FrozenSet[str]] = SERVER_FIELDS

    id: str

    @model_validator(mode="before")
    @classmethod
    def _null_means_default(cls, data: Any) -> Any:
        # Nullable columns with a DEFAULT can still come back as null
        if not isinstance(data, dict):
            return data
        fields = cls.model_fields
        return {
            k: v
            for k, v in data.items()
            if v is not None or k not in fields or fields[k].is_required() or fields[k].default is None
        }

    @classmethod
    def _is_server_owned(cls, name: str) -> bool:
        return name in cls.server_fields or name.endswith("_username")

    @classmethod
    def payload(cls, data: Union[Mapping[str, Any], BaseModel, None]) -> Dict[str, Any]:
        """
        Request body from a mapping or model: server-owned fields and None values removed.
        """
        if data is None:
            return {}
        if isinstance(data, BaseModel):
            raw = data.model_dump(mode="json", exclude_none=True)
        else:
            raw = dict(data)
        return {
            k: _jsonable(v)
            for k, v in raw.items()
            if v is not None and not cls._is_server_owned(k)
        }

    def to_record(self) -> Dict[str, Any]:
        """Flat JSON-safe mapping for reports."""
        return self.model_dump(mode="json")

"""Lookup result types.

A lookup either finds a record (Found) or the API reports that the entity
is unknown (NotFound). Every other failure is raised as WardenAPIError.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from warden.transport.ratelimit import RateLimitInfo


class UserType(str, Enum):
    OTHER = "OTHER"
    LEAKER = "LEAKER"
    CHEATER = "CHEATER"
    SUPPORTER = "SUPPORTER"
    OWNER = "OWNER"
    BOT = "BOT"


def _user_type(value: Any) -> UserType | str:
    try:
        return UserType(value)
    except ValueError:
        return str(value) if value is not None else ""


@dataclass
class ServerInfo:
    id: str
    name: str = ""
    type: str = ""
    description: str | None = None
    category: str | None = None
    flags: list[str] = field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ServerInfo":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", "") or "",
            type=data.get("type", "") or "",
            description=data.get("description"),
            category=data.get("category"),
            flags=list(data.get("flags") or []),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass
class UserInfo:
    id: str
    username: str = ""
    type: UserType | str = UserType.OTHER
    avatar: str | None = None
    flags: list[str] = field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "UserInfo":
        return cls(
            id=str(data.get("id", "")),
            username=data.get("username", "") or "",
            type=_user_type(data.get("type", UserType.OTHER.value)),
            avatar=data.get("avatar"),
            flags=list(data.get("flags") or []),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass
class Found:
    """A lookup that returned a record."""

    payload: Any
    rate_limit: RateLimitInfo | None = None

    error = None

    @property
    def record(self) -> dict:
        """The entity record: the nested ``data`` object if present, else the payload."""
        if not isinstance(self.payload, dict):
            return {}
        nested = self.payload.get("data")
        if isinstance(nested, dict):
            return nested
        return self.payload

    @property
    def id(self) -> str | None:
        """Identifier of the record. Top-level ``id`` wins over ``data.id``."""
        if isinstance(self.payload, dict) and self.payload.get("id"):
            return str(self.payload["id"])
        record_id = self.record.get("id")
        return str(record_id) if record_id else None

    def server(self) -> ServerInfo:
        return ServerInfo.from_dict(self.record)

    def user(self) -> UserInfo:
        return UserInfo.from_dict(self.record)


@dataclass
class NotFound:
    """The API does not know the looked-up entity."""

    error: str
    rate_limit: RateLimitInfo | None = None

    id = None


LookupResult = Found | NotFound


@dataclass
class BatchLookup:
    found: int
    servers: list[ServerInfo]
    payload: Any = None
    rate_limit: RateLimitInfo | None = None

    @classmethod
    def from_payload(cls, payload: Any, rate_limit: RateLimitInfo | None = None) -> "BatchLookup":
        body = payload if isinstance(payload, dict) else {}
        data = body.get("data") if isinstance(body.get("data"), dict) else body
        servers = [ServerInfo.from_dict(s) for s in data.get("servers") or [] if isinstance(s, dict)]
        found = data.get("found")
        return cls(
            found=found if isinstance(found, int) else len(servers),
            servers=servers,
            payload=payload,
            rate_limit=rate_limit,
        )


def is_flagged(result: LookupResult) -> bool:
    """True when the lookup produced no error marker and a nonempty identifier."""
    return result.error is None and bool(result.id)

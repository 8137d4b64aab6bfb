"""
Domain models for Project Showcase.
Values are immutable; state holders replace them instead of mutating.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

import config

_FRACTION_RE = re.compile(r"(?<=\d\d:\d\d:\d\d)\.(\d+)")


class TimeWindow(str, Enum):
    """Creation-time filter for the gallery."""
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"

    @property
    def label(self) -> str:
        return config.TIME_WINDOWS[self.value]["label"]


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a gateway timestamp into an aware datetime.

    Naive values are assumed to be UTC. Missing values map to "now".
    """
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        # Postgres trims trailing zeros; fromisoformat on 3.10 wants 3 or 6 digits
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class User:
    id: str
    email: str = ""
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.email or config.ANONYMOUS_NAME


@dataclass(frozen=True)
class Project:
    """A submitted side project as shown in the gallery."""
    id: str
    user_id: str
    title: str
    url: str
    description: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    vote_count: int = 0
    thumbnail_url: Optional[str] = None
    media_urls: tuple[str, ...] = ()
    owner_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "Project":
        """Build a Project from a gateway row (projects_with_votes shape)."""
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            title=row.get("title") or "",
            url=row.get("vercel_url") or row.get("url") or "",
            description=row.get("description") or "",
            created_at=parse_timestamp(row.get("created_at")),
            vote_count=int(row.get("vote_count") or 0),
            thumbnail_url=row.get("thumbnail_url") or None,
            media_urls=tuple(row.get("media_urls") or ()),
            owner_name=row.get("user_email") or row.get("owner_name") or None,
        )

    @property
    def owner_display_name(self) -> str:
        return self.owner_name or config.ANONYMOUS_NAME


@dataclass(frozen=True)
class Comment:
    """A comment; top-level comments carry their replies one level deep."""
    id: str
    user_id: str
    project_id: str
    content: str
    parent_id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None
    author_name: Optional[str] = None
    replies: tuple["Comment", ...] = ()

    @classmethod
    def from_row(cls, row: dict) -> "Comment":
        """Build a Comment from a gateway row, reading the joined author email."""
        author = row.get("users") or {}
        parent_id = row.get("parent_id")
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            project_id=str(row["project_id"]),
            content=row.get("content") or "",
            parent_id=str(parent_id) if parent_id is not None else None,
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row["updated_at"]) if row.get("updated_at") else None,
            author_name=author.get("email") or row.get("user_email") or None,
        )

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    @property
    def author_display_name(self) -> str:
        return self.author_name or config.ANONYMOUS_NAME

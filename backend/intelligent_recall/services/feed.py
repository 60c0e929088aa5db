"""
Resource feed loader.

Reads the newest captured items from the row store the n8n workflow writes to
and maps them into ``IncomingResource``. Any failure, or an empty feed, yields
the one-item placeholder list so the dashboard always has something to show.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session
from supabase import create_client

from ..db import SessionLocal
from ..models import IncomingResourceRow
from ..schemas import IncomingResource
from ..settings import settings


logger = logging.getLogger(__name__)

FEED_COLUMNS = ("id", "type", "title", "source", "created_at", "content", "url")

UNKNOWN_SOURCE = "Unknown Source"

PLACEHOLDER_RESOURCES: List[IncomingResource] = [
    IncomingResource(
        id="demo-1",
        kind="article",
        title="Setup Supabase to see real data",
        source="System",
        date="Now",
        content="Please configure SUPABASE_URL and SUPABASE_ANON_KEY with your credentials to see data from n8n.",
    )
]


class FeedStore(ABC):
    """A row store holding captured resources."""

    @abstractmethod
    def fetch_new(self, limit: int) -> List[Dict[str, Any]]:
        """Return up to ``limit`` rows with status "new", newest first."""


class SupabaseFeedStore(FeedStore):
    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        *,
        table: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self.url = url or settings.supabase_url
        self.key = key or settings.supabase_anon_key
        self.table = table or settings.feed_table
        self._client = client

    def _get_client(self):
        # Built on first use so placeholder credentials fail the fetch, not startup
        if self._client is None:
            self._client = create_client(self.url, self.key)
        return self._client

    def fetch_new(self, limit: int) -> List[Dict[str, Any]]:
        result = (
            self._get_client()
            .table(self.table)
            .select(",".join(FEED_COLUMNS))
            .eq("status", "new")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return list(result.data or [])


class SqlFeedStore(FeedStore):
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self._session_factory = session_factory

    def fetch_new(self, limit: int) -> List[Dict[str, Any]]:
        with self._session_factory() as db:
            rows = (
                db.query(IncomingResourceRow)
                .filter(IncomingResourceRow.status == "new")
                .order_by(IncomingResourceRow.created_at.desc())
                .limit(limit)
                .all()
            )
            return [{col: getattr(row, col) for col in FEED_COLUMNS} for row in rows]


def create_feed_store() -> FeedStore:
    backend = (settings.feed_backend or "supabase").lower()
    if backend == "sql":
        return SqlFeedStore()
    if backend != "supabase":
        raise ValueError(f"FEED_BACKEND must be 'supabase' or 'sql', got {settings.feed_backend!r}")
    return SupabaseFeedStore()


_DATETIME = TypeAdapter(datetime)


def format_display_date(value: Any) -> str:
    """Short en-US rendering in UTC, e.g. ``Oct 17, 03:45 PM``.

    Naive timestamps (the SQL table stores ``utcnow()``) are taken as UTC so
    both feed backends render the same instant the same way.
    """
    try:
        dt = _DATETIME.validate_python(value)
    except ValidationError:
        return "Invalid Date"
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return f"{dt:%b} {dt.day}, {dt:%I:%M %p}"


def map_row(row: Dict[str, Any]) -> Optional[IncomingResource]:
    kind = row.get("type")
    if kind not in ("article", "video"):
        logger.warning("Skipping feed row %s with unknown type %r", row.get("id"), kind)
        return None
    return IncomingResource(
        id=str(row.get("id")),
        kind=kind,
        title=row.get("title") or "",
        source=row.get("source") or UNKNOWN_SOURCE,
        date=format_display_date(row.get("created_at")),
        content=row.get("content"),
        url=row.get("url"),
    )


def load_resources(store: FeedStore, limit: Optional[int] = None) -> List[IncomingResource]:
    limit = limit or settings.feed_limit
    try:
        rows = store.fetch_new(limit)
    except Exception as e:
        logger.warning("Feed store unreachable, using placeholder feed: %s", e)
        return list(PLACEHOLDER_RESOURCES)
    resources: List[IncomingResource] = []
    for row in rows[:limit]:
        resource = map_row(row)
        if resource is not None:
            resources.append(resource)
    if not resources:
        logger.warning("Feed store returned no new items, using placeholder feed")
        return list(PLACEHOLDER_RESOURCES)
    return resources

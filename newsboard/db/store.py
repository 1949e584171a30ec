from __future__ import annotations

import abc
import logging
import threading
from typing import Any, Dict, Iterator, Optional
from uuid import UUID

from newsboard.config import get_settings
from newsboard.errors import StoreUnavailable

from . import database
from .filters import NewsFilter
from .models import NewsItem

logger = logging.getLogger(__name__)

COLUMNS = (
    "id, title, summary, link, date, is_favorite, is_admin_keeper, "
    "is_archived, is_read, last_read_at, created_at, updated_at"
)


class ItemStore(abc.ABC):
    """
    Storage backend for news items. Every write touches exactly one item;
    update() is an atomic point write keyed by id.
    """

    name = "abstract"

    @abc.abstractmethod
    async def insert(self, item: NewsItem) -> NewsItem:
        ...

    @abc.abstractmethod
    async def get(self, news_id: str) -> Optional[NewsItem]:
        ...

    @abc.abstractmethod
    async def list(self, news_filter: NewsFilter) -> Iterator[NewsItem]:
        """Return matching items, newest first, as a single-use iterator."""

    @abc.abstractmethod
    async def update(self, news_id: str, fields: Dict[str, Any]) -> Optional[NewsItem]:
        """Merge fields into one item and return its new state, or None if missing."""

    @abc.abstractmethod
    async def delete(self, news_id: str) -> bool:
        ...

    async def ping(self) -> bool:
        return True


class MemoryItemStore(ItemStore):
    """In-process store used for local development and tests."""

    name = "memory"

    def __init__(self) -> None:
        self._items: Dict[str, NewsItem] = {}
        self._lock = threading.Lock()

    async def insert(self, item: NewsItem) -> NewsItem:
        with self._lock:
            if item.id in self._items:
                raise ValueError(f"duplicate news id {item.id}")
            self._items[item.id] = item.model_copy()
        return item.model_copy()

    async def get(self, news_id: str) -> Optional[NewsItem]:
        with self._lock:
            item = self._items.get(news_id)
            return item.model_copy() if item is not None else None

    async def list(self, news_filter: NewsFilter) -> Iterator[NewsItem]:
        with self._lock:
            snapshot = [item for item in self._items.values() if news_filter.matches(item)]
        # sorted() is stable with reverse=True, so equal dates keep insertion order
        ordered = sorted(snapshot, key=lambda item: item.date, reverse=True)
        return (item.model_copy() for item in ordered)

    async def update(self, news_id: str, fields: Dict[str, Any]) -> Optional[NewsItem]:
        with self._lock:
            current = self._items.get(news_id)
            if current is None:
                return None
            updated = current.model_copy(update=fields)
            self._items[news_id] = updated
            return updated.model_copy()

    async def delete(self, news_id: str) -> bool:
        with self._lock:
            return self._items.pop(news_id, None) is not None


def _is_uuid(value: str) -> bool:
    """True only for the canonical hyphenated form, e.g. 6f1c1f0e-4a4f-4b8e-9b55-3f1f8e9f0a11."""
    try:
        parsed = UUID(value)
    except (TypeError, ValueError, AttributeError):
        return False
    return str(parsed) == value.lower()


def _to_row(fields: Dict[str, Any]) -> Dict[str, Any]:
    row = {}
    for key, value in fields.items():
        row[key] = value.isoformat() if hasattr(value, "isoformat") else value
    return row


class SupabaseItemStore(ItemStore):
    """News items kept in a Supabase (PostgREST) table with snake_case columns."""

    name = "supabase"

    def __init__(self, table: Optional[str] = None) -> None:
        self.table = table or get_settings().news_table

    async def insert(self, item: NewsItem) -> NewsItem:
        row = await database.insert(self.table, item.model_dump(mode="json"))
        return NewsItem.model_validate(row) if row else item

    async def get(self, news_id: str) -> Optional[NewsItem]:
        if not _is_uuid(news_id):
            return None
        row = await database.fetch_one(self.table, {"id": news_id}, select=COLUMNS)
        return NewsItem.model_validate(row) if row else None

    async def list(self, news_filter: NewsFilter) -> Iterator[NewsItem]:
        client = await database.get_supabase_client()
        query = news_filter.apply(client.table(self.table).select(COLUMNS))
        query = query.order("date", desc=True).order("seq")
        rows = database.execute(query)
        return (NewsItem.model_validate(row) for row in rows)

    async def update(self, news_id: str, fields: Dict[str, Any]) -> Optional[NewsItem]:
        if not _is_uuid(news_id):
            return None
        rows = await database.update(self.table, {"id": news_id}, _to_row(fields))
        return NewsItem.model_validate(rows[0]) if rows else None

    async def delete(self, news_id: str) -> bool:
        if not _is_uuid(news_id):
            return False
        rows = await database.delete(self.table, {"id": news_id})
        return bool(rows)

    async def ping(self) -> bool:
        try:
            client = await database.get_supabase_client()
            database.execute(client.table(self.table).select("id").limit(1))
        except StoreUnavailable as e:
            logger.warning("Supabase store unreachable: %s", e)
            return False
        return True


_store: Optional[ItemStore] = None


def create_store(backend: str) -> ItemStore:
    if backend == "memory":
        return MemoryItemStore()
    if backend == "supabase":
        return SupabaseItemStore()
    raise ValueError(f"Unknown store backend {backend!r}; expected 'memory' or 'supabase'")


def get_store() -> ItemStore:
    """
    Return the process-wide store selected by NEWSBOARD_STORE.
    """
    global _store
    if _store is None:
        _store = create_store(get_settings().store_backend)
        logger.info("Using %s news store", _store.name)
    return _store


async def close_store() -> None:
    global _store
    if isinstance(_store, SupabaseItemStore):
        await database.close_client()
    _store = None
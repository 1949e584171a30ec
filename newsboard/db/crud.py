from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from newsboard.access import Caller, ensure_admin
from newsboard.errors import NotFound, ValidationError

from .filters import NewsFilter
from .models import TEXT_FIELDS, NewsItem
from .store import ItemStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_text(fields: Dict[str, Optional[str]]) -> Dict[str, str]:
    """
    Trim the supplied text fields. Raises ValidationError if any is missing or blank.
    """
    cleaned = {}
    for key, value in fields.items():
        text = value.strip() if isinstance(value, str) else ""
        if not text:
            raise ValidationError("Title, summary, and link are required")
        cleaned[key] = text
    return cleaned


async def _require(store: ItemStore, news_id: str) -> NewsItem:
    item = await store.get(news_id)
    if item is None:
        raise NotFound("News item not found")
    return item


async def _write(store: ItemStore, news_id: str, fields: Dict[str, Any]) -> NewsItem:
    fields["updated_at"] = _utcnow()
    item = await store.update(news_id, fields)
    if item is None:
        # deleted between read and write
        raise NotFound("News item not found")
    return item


async def create_news(
    store: ItemStore,
    caller: Caller,
    title: Optional[str],
    summary: Optional[str],
    link: Optional[str],
) -> NewsItem:
    """
    Create a news item with every flag cleared and date set to now.
    """
    ensure_admin(caller)
    text = _clean_text({"title": title, "summary": summary, "link": link})
    now = _utcnow()
    item = NewsItem(id=str(uuid4()), date=now, created_at=now, updated_at=now, **text)
    saved = await store.insert(item)
    logger.info("Created news item %s", saved.id)
    return saved


async def get_news(store: ItemStore, news_id: str) -> NewsItem:
    return await _require(store, news_id)


async def list_news(store: ItemStore, news_filter: NewsFilter) -> List[NewsItem]:
    """
    Return the items matching news_filter, newest first.
    """
    return list(await store.list(news_filter))


async def update_news(store: ItemStore, caller: Caller, news_id: str, changes: Dict[str, Any]) -> NewsItem:
    """
    Merge the supplied title/summary/link into an item. Other keys are ignored;
    flags only change through the transition functions below.
    """
    ensure_admin(caller)
    text = _clean_text({k: v for k, v in changes.items() if k in TEXT_FIELDS})
    item = await _require(store, news_id)
    if not text:
        return item
    updated = await _write(store, news_id, text)
    logger.info("Updated news item %s (%s)", news_id, ", ".join(sorted(text)))
    return updated


async def delete_news(store: ItemStore, caller: Caller, news_id: str) -> None:
    ensure_admin(caller)
    if not await store.delete(news_id):
        raise NotFound("News item not found")
    logger.info("Deleted news item %s", news_id)


async def toggle_favorite(store: ItemStore, news_id: str) -> NewsItem:
    item = await _require(store, news_id)
    return await _write(store, news_id, {"is_favorite": not item.is_favorite})


async def toggle_admin_keeper(store: ItemStore, caller: Caller, news_id: str) -> NewsItem:
    ensure_admin(caller)
    item = await _require(store, news_id)
    return await _write(store, news_id, {"is_admin_keeper": not item.is_admin_keeper})


async def set_archived(store: ItemStore, caller: Caller, news_id: str, archived: bool) -> NewsItem:
    """
    Archive or unarchive an item. Repeating the call is a no-op.
    """
    ensure_admin(caller)
    item = await _require(store, news_id)
    if item.is_archived == archived:
        return item
    updated = await _write(store, news_id, {"is_archived": archived})
    logger.info("%s news item %s", "Archived" if archived else "Unarchived", news_id)
    return updated


async def archive_news(store: ItemStore, caller: Caller, news_id: str) -> NewsItem:
    return await set_archived(store, caller, news_id, True)


async def unarchive_news(store: ItemStore, caller: Caller, news_id: str) -> NewsItem:
    return await set_archived(store, caller, news_id, False)


async def mark_read(store: ItemStore, news_id: str) -> NewsItem:
    """
    Mark an item read. lastReadAt is stamped only on the first transition.
    """
    item = await _require(store, news_id)
    if item.is_read and item.last_read_at is not None:
        return item
    return await _write(store, news_id, {"is_read": True, "last_read_at": _utcnow()})

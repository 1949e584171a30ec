from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from newsboard.access import Caller
from newsboard.db import crud
from newsboard.db.filters import build_keeper_filter, build_news_filter
from newsboard.db.models import CallerOut, MessageOut, NewsCreate, NewsItem, NewsUpdate
from newsboard.db.store import ItemStore

from .deps import get_caller, store_dependency

router = APIRouter(prefix="/news", tags=["news"])
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("", response_model=List[NewsItem])
async def list_news(
    include_all: Optional[str] = Query(None, alias="includeAll", description="'true' ignores every other filter"),
    archived: Optional[str] = Query(None, description="'true' or 'false'; unarchived items by default"),
    is_read: Optional[str] = Query(None, alias="isRead", description="'true' or 'false'"),
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> List[NewsItem]:
    """
    List news items, newest first.
    """
    return await crud.list_news(store, build_news_filter(include_all, archived, is_read))


@router.get("/favorites", response_model=List[NewsItem])
async def list_keepers(
    archived: Optional[str] = Query(None, description="'true' or 'false'; unarchived items by default"),
    is_read: Optional[str] = Query(None, alias="isRead", description="'true' or 'false'"),
    admin_only: Optional[str] = Query(None, alias="adminOnly", description="'true' for admin keepers only"),
    user_only: Optional[str] = Query(None, alias="userOnly", description="'true' for user favorites only"),
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> List[NewsItem]:
    """
    List keepers: items that are a user favorite or an admin keeper.
    """
    news_filter = build_keeper_filter(archived, is_read, admin_only, user_only)
    return await crud.list_news(store, news_filter)


@router.get("/archived", response_model=List[NewsItem])
async def list_archived(
    is_read: Optional[str] = Query(None, alias="isRead", description="'true' or 'false'"),
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> List[NewsItem]:
    return await crud.list_news(store, build_news_filter(archived="true", is_read=is_read))


@router.get("/{news_id}", response_model=NewsItem)
async def get_news(
    news_id: str,
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> NewsItem:
    return await crud.get_news(store, news_id)


@router.post("", response_model=NewsItem, status_code=201)
async def create_news(
    payload: NewsCreate,
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> NewsItem:
    """
    Post a new item. Admin only.
    """
    return await crud.create_news(store, caller, payload.title, payload.summary, payload.link)


@router.put("/{news_id}", response_model=NewsItem)
async def update_news(
    news_id: str,
    payload: NewsUpdate,
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> NewsItem:
    """
    Edit title, summary or link. Only the supplied fields change. Admin only.
    """
    return await crud.update_news(store, caller, news_id, payload.model_dump(exclude_unset=True))


@router.delete("/{news_id}", response_model=MessageOut)
async def delete_news(
    news_id: str,
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> MessageOut:
    await crud.delete_news(store, caller, news_id)
    return MessageOut(message="News item deleted successfully")


@router.post("/{news_id}/toggle-favorite", response_model=NewsItem)
async def toggle_favorite(
    news_id: str,
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> NewsItem:
    return await crud.toggle_favorite(store, news_id)


@router.post("/{news_id}/toggle-admin-keeper", response_model=NewsItem)
async def toggle_admin_keeper(
    news_id: str,
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> NewsItem:
    return await crud.toggle_admin_keeper(store, caller, news_id)


@router.post("/{news_id}/mark-read", response_model=NewsItem)
async def mark_read(
    news_id: str,
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> NewsItem:
    return await crud.mark_read(store, news_id)


@router.post("/{news_id}/archive", response_model=NewsItem)
async def archive_news(
    news_id: str,
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> NewsItem:
    return await crud.archive_news(store, caller, news_id)


@router.post("/{news_id}/unarchive", response_model=NewsItem)
async def unarchive_news(
    news_id: str,
    store: ItemStore = Depends(store_dependency),
    caller: Caller = Depends(get_caller),
) -> NewsItem:
    return await crud.unarchive_news(store, caller, news_id)


@auth_router.get("/profile", response_model=CallerOut)
async def profile(caller: Caller = Depends(get_caller)) -> CallerOut:
    """
    Return the identity behind the bearer token.
    """
    return CallerOut(name=caller.name, is_admin=caller.is_admin)


__all__ = ["router", "auth_router"]

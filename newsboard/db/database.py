from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import create_client, Client

from newsboard.config import get_settings
from newsboard.errors import StoreUnavailable

logger = logging.getLogger(__name__)

_supabase: Optional[Client] = None


def _get_supabase_client() -> Client:
    """
    Create and return a Supabase client.
    Raises StoreUnavailable if required environment variables are missing.
    """
    global _supabase
    if _supabase is not None:
        return _supabase

    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_key:
        raise StoreUnavailable("SUPABASE_URL and SUPABASE_KEY must be configured")

    _supabase = create_client(settings.supabase_url, settings.supabase_key)
    return _supabase


async def get_supabase_client() -> Client:
    """
    Return the Supabase client.
    """
    return _get_supabase_client()


async def close_client() -> None:
    """
    Drop the cached Supabase client.
    """
    global _supabase
    if _supabase is not None:
        _supabase = None


def execute(builder: Any) -> List[Dict[str, Any]]:
    """
    Run a postgrest request builder and return its rows.
    Transport and PostgREST failures are raised as StoreUnavailable.
    """
    try:
        response = builder.execute()
    except (APIError, httpx.HTTPError) as e:
        logger.error("Supabase request failed: %s", e)
        raise StoreUnavailable(f"News store request failed: {e}") from e
    return response.data or []


async def fetch_one(table: str, filters: Dict[str, Any], select: str = "*") -> Optional[Dict[str, Any]]:
    """
    Fetch a single record from a table with filters.
    """
    client = _get_supabase_client()
    query = client.table(table).select(select)

    for key, value in filters.items():
        query = query.eq(key, value)

    rows = execute(query.limit(1))
    return rows[0] if rows else None


async def insert(table: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insert a record into a table.
    """
    client = _get_supabase_client()
    rows = execute(client.table(table).insert(data))
    return rows[0] if rows else {}


async def update(table: str, filters: Dict[str, Any], data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Update records in a table with filters.
    """
    client = _get_supabase_client()
    builder = client.table(table).update(data)

    for key, value in filters.items():
        builder = builder.eq(key, value)

    return execute(builder)


async def delete(table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Delete records from a table with filters.
    """
    client = _get_supabase_client()
    builder = client.table(table).delete()

    for key, value in filters.items():
        builder = builder.eq(key, value)

    return execute(builder)

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .models import NewsItem


class KeeperMode(str, Enum):
    ANY = "any"
    ADMIN = "admin"
    USER = "user"


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """
    Parse a query-string boolean. Only the exact strings "true" and "false"
    are recognized; anything else (including None) means "no filter".
    """
    if value == "true":
        return True
    if value == "false":
        return False
    return None


@dataclass(frozen=True)
class NewsFilter:
    """
    Predicate over news items.

    include_all short-circuits every other field. keeper_mode is None outside
    the keepers view.
    """
    include_all: bool = False
    archived: Optional[bool] = False
    is_read: Optional[bool] = None
    keeper_mode: Optional[KeeperMode] = None

    @classmethod
    def everything(cls) -> "NewsFilter":
        return cls(include_all=True, archived=None)

    def matches(self, item: NewsItem) -> bool:
        if self.include_all:
            return True
        if self.archived is not None and item.is_archived != self.archived:
            return False
        if self.is_read is not None and item.is_read != self.is_read:
            return False
        if self.keeper_mode is KeeperMode.ADMIN:
            return item.is_admin_keeper
        if self.keeper_mode is KeeperMode.USER:
            return item.is_favorite
        if self.keeper_mode is KeeperMode.ANY:
            return item.is_keeper
        return True

    def apply(self, query: Any) -> Any:
        """Apply this filter to a postgrest select builder."""
        if self.include_all:
            return query
        if self.archived is not None:
            query = query.eq("is_archived", self.archived)
        if self.is_read is not None:
            query = query.eq("is_read", self.is_read)
        if self.keeper_mode is KeeperMode.ADMIN:
            query = query.eq("is_admin_keeper", True)
        elif self.keeper_mode is KeeperMode.USER:
            query = query.eq("is_favorite", True)
        elif self.keeper_mode is KeeperMode.ANY:
            query = query.or_("is_favorite.eq.true,is_admin_keeper.eq.true")
        return query


def build_news_filter(
    include_all: Optional[str] = None,
    archived: Optional[str] = None,
    is_read: Optional[str] = None,
) -> NewsFilter:
    """
    Filter for the plain news list, built from raw query-string values.
    Archived items are hidden unless archived=true is requested.
    """
    if parse_bool(include_all):
        return NewsFilter.everything()
    archived_flag = parse_bool(archived)
    return NewsFilter(
        archived=False if archived_flag is None else archived_flag,
        is_read=parse_bool(is_read),
    )


def build_keeper_filter(
    archived: Optional[str] = None,
    is_read: Optional[str] = None,
    admin_only: Optional[str] = None,
    user_only: Optional[str] = None,
) -> NewsFilter:
    """
    Filter for the keepers view. adminOnly is checked before userOnly; with
    neither set, an item qualifies through either keeper flag.
    """
    if parse_bool(admin_only):
        mode = KeeperMode.ADMIN
    elif parse_bool(user_only):
        mode = KeeperMode.USER
    else:
        mode = KeeperMode.ANY
    archived_flag = parse_bool(archived)
    return NewsFilter(
        archived=False if archived_flag is None else archived_flag,
        is_read=parse_bool(is_read),
        keeper_mode=mode,
    )

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TEXT_FIELDS = ("title", "summary", "link")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NewsItem(_CamelModel):
    id: str = Field(..., description="Unique identifier of the news item")
    title: str
    summary: str
    link: str
    date: datetime
    is_favorite: bool = False
    is_admin_keeper: bool = False
    is_archived: bool = False
    is_read: bool = False
    last_read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_keeper(self) -> bool:
        return self.is_favorite or self.is_admin_keeper


class NewsCreate(_CamelModel):
    """Fields are optional here; crud.create_news rejects missing or blank ones."""

    title: Optional[str] = None
    summary: Optional[str] = None
    link: Optional[str] = None


class NewsUpdate(_CamelModel):
    title: Optional[str] = None
    summary: Optional[str] = None
    link: Optional[str] = None


class CallerOut(_CamelModel):
    name: str
    is_admin: bool


class MessageOut(BaseModel):
    message: str

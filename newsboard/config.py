from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    store_backend: str = "memory"
    supabase_url: str = ""
    supabase_key: str = ""
    news_table: str = "news_items"
    admin_token: str = ""
    admin_name: str = "admin"
    reader_token: str = ""
    reader_name: str = "reader"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


def _split_origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Read settings from the environment (and a .env file, if present).
    Cached; call get_settings.cache_clear() after changing the environment.
    """
    return Settings(
        store_backend=os.environ.get("NEWSBOARD_STORE", "memory").strip().lower(),
        supabase_url=os.environ.get("SUPABASE_URL", ""),
        supabase_key=os.environ.get("SUPABASE_KEY", ""),
        news_table=os.environ.get("NEWS_TABLE", "news_items"),
        admin_token=os.environ.get("ADMIN_TOKEN", ""),
        admin_name=os.environ.get("ADMIN_NAME", "admin"),
        reader_token=os.environ.get("READER_TOKEN", ""),
        reader_name=os.environ.get("READER_NAME", "reader"),
        cors_origins=_split_origins(os.environ.get("CORS_ORIGINS", "*")),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 8000)),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)

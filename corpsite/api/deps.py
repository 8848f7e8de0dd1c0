import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from corpsite.adapters.clock import SystemClock
from corpsite.adapters.sqlite.repos import SQLiteCmsContentRepo, SQLiteOrderedRepo
from corpsite.components.cms import CmsContentService
from corpsite.components.ordered import (
    ORDERED_CONTENT_TYPES,
    OrderedContentType,
    OrderedListService,
)
from corpsite.rules.loader import load_rules
from corpsite.rules.models import Rules

DEFAULT_ORIGINS = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173"


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("CORPSITE_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "corpsite.db")
        self.rules_path = Path(
            os.environ.get("CORPSITE_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.migrations_dir = os.environ.get(
            "CORPSITE_MIGRATIONS_DIR", str(self.base_dir / "migrations")
        )
        self.log_level = os.environ.get("CORPSITE_LOG_LEVEL", "INFO").upper()
        self.allowed_origins = [
            origin.strip()
            for origin in os.environ.get("CORPSITE_ALLOWED_ORIGINS", DEFAULT_ORIGINS).split(",")
            if origin.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


# --- Clock ---
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Repos ---
def get_cms_repo(settings: Settings = Depends(get_settings)) -> SQLiteCmsContentRepo:
    return SQLiteCmsContentRepo(settings.db_path)


def build_ordered_service(
    content_type: OrderedContentType, settings: Settings, clock: SystemClock
) -> OrderedListService:
    repo = SQLiteOrderedRepo(settings.db_path, content_type.table, content_type.model)
    return OrderedListService(repo=repo, model=content_type.model, clock=clock)


# --- Component Services ---
def get_cms_service(
    repo: SQLiteCmsContentRepo = Depends(get_cms_repo),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> CmsContentService:
    return CmsContentService(
        repo=repo, clock=clock, rules=rules.cms, known_pages=rules.site.pages
    )


def get_ordered_services(
    settings: Settings = Depends(get_settings),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, OrderedListService]:
    """One CRUD service per ordered-list content type, keyed by URL slug."""
    return {
        slug: build_ordered_service(content_type, settings, clock)
        for slug, content_type in ORDERED_CONTENT_TYPES.items()
    }

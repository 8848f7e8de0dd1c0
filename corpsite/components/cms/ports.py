"""
CMS component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from corpsite.domain.entities import CmsContent


class CmsContentRepoPort(Protocol):
    """Repository interface for per-section content."""

    def get(self, page: str, section: str) -> CmsContent | None:
        """Get one section, or None if it was never saved."""
        ...

    def list_by_page(self, page: str) -> list[CmsContent]:
        """All sections of a page, ordered by section."""
        ...

    def list_all(self) -> list[CmsContent]:
        """All sections, ordered by page then section."""
        ...

    def upsert(
        self, page: str, section: str, data: dict[str, Any], now: datetime
    ) -> tuple[CmsContent, bool]:
        """Insert or replace section data. Returns (content, created)."""
        ...

    def delete(self, page: str, section: str) -> bool:
        """Delete a section. Returns False if it did not exist."""
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        ...

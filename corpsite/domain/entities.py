from datetime import UTC, datetime
from typing import Any, NamedTuple

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Content Keys ---

class ContentKey(NamedTuple):
    page: str
    section: str

    def storage_key(self) -> str:
        return f"cms_{self.page}_{self.section}"


# --- Free-form Section Content ---

class CmsContent(BaseModel):
    id: int | None = None
    page: str
    section: str
    data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def key(self) -> ContentKey:
        return ContentKey(self.page, self.section)

# --- Ordered Lists ---

class OrderedItem(BaseModel):
    """Base for content rows rendered as an ordered list."""

    id: int | None = None
    order: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

class HeroSlide(OrderedItem):
    title: str
    subtitle: str = ""
    image_url: str = ""
    cta_text: str = ""
    cta_link: str = ""

class Offering(OrderedItem):
    title: str
    description: str = ""
    icon: str = ""
    link: str = ""

class Statistic(OrderedItem):
    label: str
    value: str
    unit: str = ""
    icon: str = ""

class RegulatoryApproval(OrderedItem):
    title: str
    description: str = ""
    image_url: str = ""

# Fields managed by the store rather than by request payloads
SYSTEM_FIELDS = frozenset({"id", "created_at", "updated_at"})

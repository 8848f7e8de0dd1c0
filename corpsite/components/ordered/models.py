"""
Ordered-list component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from corpsite.domain.entities import OrderedItem


@dataclass(frozen=True)
class CrudValidationError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class OrderedContentType:
    """Binds a URL slug to its table and row model."""

    slug: str
    table: str
    model: type[OrderedItem]
    label: str


@dataclass(frozen=True)
class CreateItemInput:
    payload: dict[str, Any]


@dataclass(frozen=True)
class UpdateItemInput:
    item_id: int
    payload: dict[str, Any]


@dataclass(frozen=True)
class DeleteItemInput:
    item_id: int


@dataclass(frozen=True)
class ItemOperationOutput:
    item: OrderedItem | None
    errors: tuple[CrudValidationError, ...] = ()
    success: bool = True
    not_found: bool = False


@dataclass(frozen=True)
class ItemListOutput:
    items: tuple[OrderedItem, ...]
    total: int

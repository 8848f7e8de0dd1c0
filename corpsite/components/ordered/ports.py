"""
Ordered-list component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol

from corpsite.domain.entities import OrderedItem


class OrderedRepoPort(Protocol):
    """Repository interface for one ordered-list table."""

    def list_ordered(self) -> list[OrderedItem]:
        """All rows ascending by order."""
        ...

    def get_by_id(self, item_id: int) -> OrderedItem | None:
        ...

    def create(self, item: OrderedItem) -> OrderedItem:
        """Persist a new row and return it with its id assigned."""
        ...

    def update(self, item: OrderedItem) -> OrderedItem:
        ...

    def delete(self, item_id: int) -> bool:
        """Delete a row. Returns False if it did not exist."""
        ...

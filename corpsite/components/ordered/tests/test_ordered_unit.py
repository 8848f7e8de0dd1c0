"""
Ordered-list component unit tests.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from corpsite.adapters.clock import FixedClock
from corpsite.components.ordered import (
    ORDERED_CONTENT_TYPES,
    CreateItemInput,
    DeleteItemInput,
    OrderedListService,
    UpdateItemInput,
    run_create,
    run_delete,
    run_list,
    run_update,
)
from corpsite.domain.entities import HeroSlide, OrderedItem, Statistic

T0 = datetime(2026, 1, 1, tzinfo=UTC)

# --- Mock Repository ---


class MockOrderedRepo:
    def __init__(self) -> None:
        self._rows: dict[int, OrderedItem] = {}
        self._next_id = 1

    def list_ordered(self) -> list[OrderedItem]:
        return sorted(self._rows.values(), key=lambda r: (r.order, r.id))

    def get_by_id(self, item_id: int) -> OrderedItem | None:
        return self._rows.get(item_id)

    def create(self, item: OrderedItem) -> OrderedItem:
        saved = item.model_copy(update={"id": self._next_id})
        self._rows[self._next_id] = saved
        self._next_id += 1
        return saved

    def update(self, item: OrderedItem) -> OrderedItem:
        assert item.id is not None
        self._rows[item.id] = item
        return item

    def delete(self, item_id: int) -> bool:
        return self._rows.pop(item_id, None) is not None


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T0)


@pytest.fixture
def service(clock: FixedClock) -> OrderedListService:
    return OrderedListService(repo=MockOrderedRepo(), model=HeroSlide, clock=clock)


class TestRegistry:
    def test_four_content_types(self) -> None:
        assert set(ORDERED_CONTENT_TYPES) == {"slides", "offerings", "statistics", "regulatory"}
        assert ORDERED_CONTENT_TYPES["slides"].model is HeroSlide
        assert ORDERED_CONTENT_TYPES["regulatory"].table == "regulatory_approvals"


class TestCreate:
    def test_create_success(self, service: OrderedListService) -> None:
        result = run_create(CreateItemInput({"title": "Wind", "order": 2}), service)
        assert result.success is True
        assert result.item.id == 1
        assert result.item.title == "Wind"
        assert result.item.created_at == T0

    def test_system_fields_ignored(self, service: OrderedListService) -> None:
        result = run_create(CreateItemInput({"title": "Wind", "id": 99}), service)
        assert result.item.id == 1

    def test_missing_required_field(self, service: OrderedListService) -> None:
        result = run_create(CreateItemInput({"order": 1}), service)
        assert result.success is False
        assert result.item is None
        assert result.errors[0].code == "required"
        assert result.errors[0].field == "title"

    def test_wrong_type(self, clock: FixedClock) -> None:
        service = OrderedListService(MockOrderedRepo(), Statistic, clock)
        result = run_create(CreateItemInput({"label": "x", "value": "1", "order": "first"}), service)
        assert result.success is False
        assert result.errors[0].field == "order"


class TestList:
    def test_sorted_by_order(self, service: OrderedListService) -> None:
        for title, order in [("C", 3), ("A", 1), ("B", 2)]:
            run_create(CreateItemInput({"title": title, "order": order}), service)

        result = run_list(service)
        assert [i.title for i in result.items] == ["A", "B", "C"]
        assert result.total == 3


class TestUpdate:
    def test_partial_update(self, service: OrderedListService, clock: FixedClock) -> None:
        created = run_create(
            CreateItemInput({"title": "Old", "subtitle": "keep", "order": 1}), service
        ).item
        clock.advance(hours=1)

        result = run_update(UpdateItemInput(created.id, {"title": "New"}), service)

        assert result.success is True
        assert result.item.title == "New"
        assert result.item.subtitle == "keep"
        assert result.item.created_at == T0
        assert result.item.updated_at > T0

    def test_not_found(self, service: OrderedListService) -> None:
        result = run_update(UpdateItemInput(42, {"title": "x"}), service)
        assert result.success is False
        assert result.not_found is True

    def test_invalid_update(self, service: OrderedListService) -> None:
        created = run_create(CreateItemInput({"title": "Old"}), service).item
        result = run_update(UpdateItemInput(created.id, {"order": "last"}), service)
        assert result.success is False
        assert result.not_found is False


class TestDelete:
    def test_delete(self, service: OrderedListService) -> None:
        created = run_create(CreateItemInput({"title": "Gone"}), service).item
        result = run_delete(DeleteItemInput(created.id), service)
        assert result.success is True
        assert run_list(service).total == 0

    def test_delete_missing(self, service: OrderedListService) -> None:
        result = run_delete(DeleteItemInput(7), service)
        assert result.not_found is True

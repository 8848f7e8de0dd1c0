"""
Ordered-list component - Shell layer entry points.
"""

from __future__ import annotations

from ._impl import OrderedListService
from .models import (
    CreateItemInput,
    DeleteItemInput,
    ItemListOutput,
    ItemOperationOutput,
    UpdateItemInput,
)


def run_list(service: OrderedListService) -> ItemListOutput:
    items = service.list()
    return ItemListOutput(items=tuple(items), total=len(items))


def run_create(input_data: CreateItemInput, service: OrderedListService) -> ItemOperationOutput:
    item, errors = service.create(input_data.payload)
    return ItemOperationOutput(item=item, errors=tuple(errors), success=item is not None)


def run_update(input_data: UpdateItemInput, service: OrderedListService) -> ItemOperationOutput:
    item, errors = service.update(input_data.item_id, input_data.payload)
    return ItemOperationOutput(
        item=item,
        errors=tuple(errors),
        success=item is not None,
        not_found=any(e.code == "not_found" for e in errors),
    )


def run_delete(input_data: DeleteItemInput, service: OrderedListService) -> ItemOperationOutput:
    deleted = service.remove(input_data.item_id)
    return ItemOperationOutput(item=None, success=deleted, not_found=not deleted)

"""
Ordered-list component - CRUD over hero slides, offerings, statistics and
regulatory approvals.
"""

from ._impl import ORDERED_CONTENT_TYPES, OrderedListService
from .component import run_create, run_delete, run_list, run_update
from .models import (
    CreateItemInput,
    CrudValidationError,
    DeleteItemInput,
    ItemListOutput,
    ItemOperationOutput,
    OrderedContentType,
    UpdateItemInput,
)
from .ports import OrderedRepoPort

__all__ = [
    # Entry points
    "run_list",
    "run_create",
    "run_update",
    "run_delete",
    # Models
    "CreateItemInput",
    "UpdateItemInput",
    "DeleteItemInput",
    "ItemOperationOutput",
    "ItemListOutput",
    "CrudValidationError",
    "OrderedContentType",
    # Ports
    "OrderedRepoPort",
    # Service
    "OrderedListService",
    "ORDERED_CONTENT_TYPES",
]

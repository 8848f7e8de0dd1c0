"""
OrderedListService - generic CRUD over one ordered-list content type.

One service instance is built per content type (hero slides, offerings,
statistics, regulatory approvals); the HTTP layer maps it onto four handlers.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from corpsite.adapters.clock import SystemClock
from corpsite.components.cms.ports import TimePort
from corpsite.domain.entities import (
    SYSTEM_FIELDS,
    HeroSlide,
    Offering,
    OrderedItem,
    RegulatoryApproval,
    Statistic,
)

from .models import CrudValidationError, OrderedContentType
from .ports import OrderedRepoPort

logger = logging.getLogger(__name__)


ORDERED_CONTENT_TYPES: dict[str, OrderedContentType] = {
    t.slug: t
    for t in (
        OrderedContentType("slides", "hero_slides", HeroSlide, "Hero slide"),
        OrderedContentType("offerings", "offerings", Offering, "Offering"),
        OrderedContentType("statistics", "statistics", Statistic, "Statistic"),
        OrderedContentType(
            "regulatory", "regulatory_approvals", RegulatoryApproval, "Regulatory approval"
        ),
    )
}


def _parse_pydantic_errors(exc: PydanticValidationError) -> list[CrudValidationError]:
    """Map pydantic errors onto field-specific validation errors."""
    errors: list[CrudValidationError] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        field = ".".join(str(part) for part in loc) if loc else None
        error_type = error.get("type", "unknown")
        if "missing" in error_type:
            code = "required"
        elif "int" in error_type or "string" in error_type:
            code = "invalid_type"
        else:
            code = "invalid_value"
        errors.append(
            CrudValidationError(
                code=code,
                message=f"Field '{field}': {error.get('msg', 'Invalid value')}",
                field=field,
            )
        )
    return errors


def _strip_system_fields(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if k not in SYSTEM_FIELDS}


class OrderedListService:
    def __init__(
        self,
        repo: OrderedRepoPort,
        model: type[OrderedItem],
        clock: TimePort | None = None,
    ) -> None:
        self._repo = repo
        self._model = model
        self._clock = clock or SystemClock()

    @property
    def model(self) -> type[OrderedItem]:
        return self._model

    def list(self) -> list[OrderedItem]:
        return self._repo.list_ordered()

    def get(self, item_id: int) -> OrderedItem | None:
        return self._repo.get_by_id(item_id)

    def create(
        self, payload: dict[str, Any]
    ) -> tuple[OrderedItem | None, list[CrudValidationError]]:
        """
        Validate and persist a new row.

        Returns:
            Tuple of (item, errors). Item is None if validation fails.
        """
        now = self._clock.now_utc()
        values = _strip_system_fields(payload)
        try:
            item = self._model.model_validate({**values, "created_at": now, "updated_at": now})
        except PydanticValidationError as e:
            return None, _parse_pydantic_errors(e)

        saved = self._repo.create(item)
        logger.info("Created %s #%s", self._model.__name__, saved.id)
        return saved, []

    def update(
        self, item_id: int, payload: dict[str, Any]
    ) -> tuple[OrderedItem | None, list[CrudValidationError]]:
        """
        Partially update an existing row.

        Returns:
            Tuple of (item, errors). Item is None if not found or validation
            fails; not found is reported with the "not_found" code.
        """
        existing = self._repo.get_by_id(item_id)
        if existing is None:
            return None, [
                CrudValidationError(
                    code="not_found",
                    message=f"{self._model.__name__} with ID {item_id} not found",
                )
            ]

        merged = existing.model_dump()
        merged.update(_strip_system_fields(payload))
        merged["updated_at"] = self._clock.now_utc()
        try:
            item = self._model.model_validate(merged)
        except PydanticValidationError as e:
            return None, _parse_pydantic_errors(e)

        return self._repo.update(item), []

    def remove(self, item_id: int) -> bool:
        deleted = self._repo.delete(item_id)
        if deleted:
            logger.info("Deleted %s #%s", self._model.__name__, item_id)
        return deleted

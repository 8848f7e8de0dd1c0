"""
CMS component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from corpsite.domain.entities import CmsContent


@dataclass(frozen=True)
class CmsValidationError:
    """Validation error with actionable message."""

    field: str
    code: str
    message: str


# --- Inputs ---


@dataclass(frozen=True)
class GetSectionInput:
    page: str
    section: str


@dataclass(frozen=True)
class SaveSectionInput:
    """Input for upserting one section. ``body`` is the raw request body."""

    page: str
    section: str
    body: Any


@dataclass(frozen=True)
class BulkSaveInput:
    """Input for upserting many sections of one page."""

    page: str
    sections: Any


@dataclass(frozen=True)
class DeleteSectionInput:
    page: str
    section: str


# --- Outputs ---


@dataclass(frozen=True)
class GetSectionOutput:
    content: CmsContent | None
    errors: tuple[CmsValidationError, ...] = ()

    @property
    def found(self) -> bool:
        return self.content is not None


@dataclass(frozen=True)
class SaveSectionOutput:
    content: CmsContent | None
    created: bool = False
    errors: tuple[CmsValidationError, ...] = ()
    success: bool = True


@dataclass(frozen=True)
class BulkSectionResult:
    section: str
    created: bool
    data: dict[str, Any]


@dataclass(frozen=True)
class BulkSaveOutput:
    results: tuple[BulkSectionResult, ...] = ()
    errors: tuple[CmsValidationError, ...] = ()
    success: bool = True


@dataclass(frozen=True)
class DeleteSectionOutput:
    deleted: bool
    errors: tuple[CmsValidationError, ...] = field(default_factory=tuple)

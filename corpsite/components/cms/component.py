"""
CMS component - Shell layer entry points.

Thin wrappers that turn service tuples into frozen output models.
"""

from __future__ import annotations

from ._impl import CmsContentService
from .models import (
    BulkSaveInput,
    BulkSaveOutput,
    DeleteSectionInput,
    DeleteSectionOutput,
    GetSectionInput,
    GetSectionOutput,
    SaveSectionInput,
    SaveSectionOutput,
)


def run_get_section(inp: GetSectionInput, service: CmsContentService) -> GetSectionOutput:
    errors = service.validate_key(inp.page, inp.section)
    if errors:
        return GetSectionOutput(content=None, errors=tuple(errors))
    return GetSectionOutput(content=service.get_section(inp.page, inp.section))


def run_save_section(inp: SaveSectionInput, service: CmsContentService) -> SaveSectionOutput:
    content, created, errors = service.save_section(inp.page, inp.section, inp.body)
    return SaveSectionOutput(
        content=content,
        created=created,
        errors=tuple(errors),
        success=content is not None,
    )


def run_bulk_save(inp: BulkSaveInput, service: CmsContentService) -> BulkSaveOutput:
    results, errors = service.bulk_save(inp.page, inp.sections)
    return BulkSaveOutput(results=tuple(results), errors=tuple(errors), success=not errors)


def run_delete_section(
    inp: DeleteSectionInput, service: CmsContentService
) -> DeleteSectionOutput:
    return DeleteSectionOutput(deleted=service.delete_section(inp.page, inp.section))

"""
CMS component - free-form section content keyed by (page, section).
"""

from ._impl import (
    CmsContentService,
    group_by_page,
    normalize_section_payload,
    validate_key,
    validate_payload_size,
)
from .component import (
    run_bulk_save,
    run_delete_section,
    run_get_section,
    run_save_section,
)
from .models import (
    BulkSaveInput,
    BulkSaveOutput,
    BulkSectionResult,
    CmsValidationError,
    DeleteSectionInput,
    DeleteSectionOutput,
    GetSectionInput,
    GetSectionOutput,
    SaveSectionInput,
    SaveSectionOutput,
)
from .ports import CmsContentRepoPort, TimePort

__all__ = [
    # Entry points
    "run_get_section",
    "run_save_section",
    "run_bulk_save",
    "run_delete_section",
    # Models
    "GetSectionInput",
    "GetSectionOutput",
    "SaveSectionInput",
    "SaveSectionOutput",
    "BulkSaveInput",
    "BulkSaveOutput",
    "BulkSectionResult",
    "DeleteSectionInput",
    "DeleteSectionOutput",
    "CmsValidationError",
    # Ports
    "CmsContentRepoPort",
    "TimePort",
    # Service
    "CmsContentService",
    "group_by_page",
    "normalize_section_payload",
    "validate_key",
    "validate_payload_size",
]

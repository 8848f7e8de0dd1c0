"""
CmsContentService - per-section JSON content keyed by (page, section).

Key behaviors:
- Reads of a missing section return None; the HTTP layer decides whether
  that is an empty payload (public read) or a 404 (admin read).
- Writes are upserts; the stored payload is always a JSON object.
- Page and section identifiers are validated against the site rules.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from corpsite.adapters.clock import SystemClock
from corpsite.domain.entities import CmsContent
from corpsite.rules.models import CmsRules

from .models import BulkSectionResult, CmsValidationError
from .ports import CmsContentRepoPort, TimePort

logger = logging.getLogger(__name__)

# Keys carried in the URL that admin forms also post in the body
_ROUTING_KEYS = ("page", "section")


# --- Payload Normalization ---


def normalize_section_payload(body: Any) -> dict[str, Any]:
    """
    Coerce a request body into the stored section object.

    - None becomes an empty object
    - a mapping is copied without its routing keys
    - anything else is wrapped as {"value": body}
    """
    if body is None:
        return {}
    if isinstance(body, Mapping):
        return {k: v for k, v in body.items() if k not in _ROUTING_KEYS}
    return {"value": body}


def group_by_page(contents: list[CmsContent]) -> dict[str, dict[str, Any]]:
    """Group section data as {page: {section: data}}."""
    grouped: dict[str, dict[str, Any]] = {}
    for content in contents:
        grouped.setdefault(content.page, {})[content.section] = content.data
    return grouped


# --- Validation Functions ---


def validate_key(
    page: str,
    section: str | None,
    rules: CmsRules,
    known_pages: list[str] | None = None,
) -> list[CmsValidationError]:
    """Validate page/section identifiers."""
    errors: list[CmsValidationError] = []
    pattern = re.compile(rules.identifier_pattern)

    if not pattern.match(page):
        errors.append(
            CmsValidationError(
                field="page",
                code="invalid_identifier",
                message=f"Page identifier '{page}' must match {rules.identifier_pattern}",
            )
        )
    elif rules.enforce_known_pages and known_pages is not None and page not in known_pages:
        errors.append(
            CmsValidationError(
                field="page",
                code="unknown_page",
                message=f"Unknown page '{page}'. Known pages: {', '.join(known_pages)}",
            )
        )

    if section is not None and not pattern.match(section):
        errors.append(
            CmsValidationError(
                field="section",
                code="invalid_identifier",
                message=f"Section identifier '{section}' must match {rules.identifier_pattern}",
            )
        )
    return errors


def validate_payload_size(data: dict[str, Any], rules: CmsRules) -> list[CmsValidationError]:
    size = len(json.dumps(data).encode("utf-8"))
    if size > rules.max_payload_bytes:
        return [
            CmsValidationError(
                field="data",
                code="payload_too_large",
                message=(
                    f"Section payload is {size} bytes; "
                    f"the limit is {rules.max_payload_bytes} bytes"
                ),
            )
        ]
    return []


# --- CMS Content Service ---


class CmsContentService:
    """Read and upsert free-form section content."""

    def __init__(
        self,
        repo: CmsContentRepoPort,
        clock: TimePort | None = None,
        rules: CmsRules | None = None,
        known_pages: list[str] | None = None,
    ) -> None:
        self._repo = repo
        self._clock = clock or SystemClock()
        self._rules = rules or CmsRules()
        self._known_pages = known_pages

    def validate_key(self, page: str, section: str | None = None) -> list[CmsValidationError]:
        return validate_key(page, section, self._rules, self._known_pages)

    def get_section(self, page: str, section: str) -> CmsContent | None:
        return self._repo.get(page, section)

    def get_page(self, page: str) -> dict[str, Any]:
        """All sections of a page as {section: data}."""
        return group_by_page(self._repo.list_by_page(page)).get(page, {})

    def get_all(self) -> dict[str, dict[str, Any]]:
        return group_by_page(self._repo.list_all())

    def save_section(
        self, page: str, section: str, body: Any
    ) -> tuple[CmsContent | None, bool, list[CmsValidationError]]:
        """
        Upsert one section.

        Returns:
            Tuple of (content, created, errors). Content is None when
            validation failed and nothing was written.
        """
        errors = self.validate_key(page, section)
        data = normalize_section_payload(body)
        errors.extend(validate_payload_size(data, self._rules))
        if errors:
            return None, False, errors

        content, created = self._repo.upsert(page, section, data, self._clock.now_utc())
        logger.info("%s cms section %s/%s", "Created" if created else "Updated", page, section)
        return content, created, []

    def bulk_save(
        self, page: str, sections: Any
    ) -> tuple[list[BulkSectionResult], list[CmsValidationError]]:
        """
        Upsert many sections of one page from {section: data}.

        All sections are validated before any is written.
        """
        if not isinstance(sections, Mapping):
            return [], [
                CmsValidationError(
                    field="body",
                    code="invalid_body",
                    message="Invalid request body. Expected object with section keys.",
                )
            ]

        errors = self.validate_key(page)
        prepared: list[tuple[str, dict[str, Any]]] = []
        for section, body in sections.items():
            errors.extend(
                e for e in self.validate_key(page, section) if e.field == "section"
            )
            data = normalize_section_payload(body)
            errors.extend(validate_payload_size(data, self._rules))
            prepared.append((section, data))
        if errors:
            return [], errors

        now = self._clock.now_utc()
        results: list[BulkSectionResult] = []
        for section, data in prepared:
            content, created = self._repo.upsert(page, section, data, now)
            results.append(BulkSectionResult(section=section, created=created, data=content.data))
        logger.info("Bulk saved %d cms sections for page %s", len(results), page)
        return results, []

    def delete_section(self, page: str, section: str) -> bool:
        deleted = self._repo.delete(page, section)
        if deleted:
            logger.info("Deleted cms section %s/%s", page, section)
        return deleted

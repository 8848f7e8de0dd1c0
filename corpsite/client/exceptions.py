"""Exception hierarchy for the content client."""

from __future__ import annotations


class CmsError(Exception):
    """Base exception for all content client errors."""


class CmsTransportError(CmsError):
    """HTTP-level failure (network, non-2xx status, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class CmsFetchError(CmsError):
    """Section content could not be read and no fallback was usable."""

    def __init__(self, message: str, *, page: str = "", section: str = "") -> None:
        self.page = page
        self.section = section
        super().__init__(message)


class CmsSaveError(CmsError):
    """The write endpoint rejected or failed to persist section content."""

    def __init__(
        self,
        message: str,
        *,
        page: str = "",
        section: str = "",
        status_code: int | None = None,
    ) -> None:
        self.page = page
        self.section = section
        self.status_code = status_code
        super().__init__(message)

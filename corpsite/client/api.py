"""
Read/write access to section content.

Reads go to the network first. Non-empty server data refreshes the local
store; empty server data or a transport failure falls back to the store,
then to the caller's default. Writes go to the admin upsert endpoint and,
on success, refresh the store and publish a :class:`ContentUpdate`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote

import aiohttp

from corpsite.client.config import ClientConfig
from corpsite.client.events import ContentBus, ContentUpdate
from corpsite.client.exceptions import CmsFetchError, CmsSaveError, CmsTransportError
from corpsite.client.storage import (
    JsonFileStore,
    LocalStore,
    MemoryStore,
    clear_cache,
    is_cache_stale,
    read_cached,
    write_cached,
)
from corpsite.client.transport import AiohttpTransport, Transport
from corpsite.domain.entities import ContentKey

_logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"cache-control": "no-cache", "pragma": "no-cache"}


@dataclass(frozen=True)
class SectionContent:
    """Section data as returned to callers (``updated_at`` is ISO-8601)."""

    data: dict[str, Any]
    updated_at: str | None = None


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def section_read_path(page: str, section: str) -> str:
    return f"/api/cms/{quote(page, safe='')}/cms/{quote(section, safe='')}"


def section_write_path(page: str, section: str) -> str:
    return f"/api/admin/cms/page/{quote(page, safe='')}/section/{quote(section, safe='')}"


class CmsApi:
    """Content API collaborator shared by every :class:`ContentHandle`."""

    def __init__(
        self,
        transport: Transport,
        *,
        store: LocalStore | None = None,
        bus: ContentBus | None = None,
    ) -> None:
        self._transport = transport
        self.store: LocalStore = store if store is not None else MemoryStore()
        self.bus = bus if bus is not None else ContentBus()

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        http_session: aiohttp.ClientSession,
        *,
        bus: ContentBus | None = None,
    ) -> CmsApi:
        store: LocalStore = (
            JsonFileStore(config.storage_path) if config.storage_path else MemoryStore()
        )
        return cls(AiohttpTransport(config, http_session), store=store, bus=bus)

    # --- Reads ---

    async def get_content(
        self,
        page: str,
        section: str,
        *,
        skip_cache: bool = False,
        default: Mapping[str, Any] | None = None,
    ) -> SectionContent:
        """
        Fetch one section.

        ``skip_cache`` asks intermediaries for a fresh copy and disables the
        local store fallback, so a failed refresh surfaces as an error
        instead of older cached data.

        Raises:
            CmsFetchError: transport failed and no cached entry was usable.
        """
        key = ContentKey(page, section)
        path = section_read_path(page, section)
        try:
            body = await self._transport.request(
                "GET", path, headers=NO_CACHE_HEADERS if skip_cache else None
            )
            if body.get("success") is False:
                raise CmsTransportError(
                    str(body.get("message") or "Request failed"), endpoint=path
                )
        except CmsTransportError as exc:
            if not skip_cache:
                cached = read_cached(self.store, key)
                if cached is not None:
                    _logger.warning(
                        "Serving cached content for %s/%s after fetch failure: %s",
                        page,
                        section,
                        exc,
                    )
                    return SectionContent(dict(cached["data"]), cached.get("updatedAt"))
            raise CmsFetchError(
                f"Failed to fetch content for {page}/{section}: {exc}",
                page=page,
                section=section,
            ) from exc

        data = body.get("data")
        if isinstance(data, dict) and data:
            updated_at = body.get("updatedAt") or _now_iso()
            # Disk-backed stores block; writes run in a worker thread
            await asyncio.to_thread(write_cached, self.store, key, data, updated_at)
            return SectionContent(data, updated_at)

        _logger.debug("No content stored for %s/%s", page, section)
        if not skip_cache:
            cached = read_cached(self.store, key)
            if cached is not None:
                return SectionContent(dict(cached["data"]), cached.get("updatedAt"))
        return SectionContent(dict(default) if default is not None else {}, None)

    async def get_page(self, page: str) -> dict[str, dict[str, Any]]:
        """All stored sections of a page as ``{section: data}``."""
        path = f"/api/cms/{quote(page, safe='')}/cms"
        try:
            body = await self._transport.request("GET", path)
        except CmsTransportError as exc:
            raise CmsFetchError(f"Failed to fetch page {page}: {exc}", page=page) from exc
        data = body.get("data")
        return data if isinstance(data, dict) else {}

    # --- Writes ---

    async def save_content(
        self,
        page: str,
        section: str,
        data: Mapping[str, Any],
        *,
        origin: Any = None,
    ) -> SectionContent:
        """
        Persist the full section content and broadcast the saved version.

        Raises:
            CmsSaveError: the request failed or the server reported failure.
        """
        path = section_write_path(page, section)
        payload = dict(data)
        try:
            body = await self._transport.request("POST", path, json_body=payload)
        except CmsTransportError as exc:
            _logger.error("Error saving content for %s/%s: %s", page, section, exc)
            raise CmsSaveError(
                f"Failed to save content for {page}/{section}: {exc}",
                page=page,
                section=section,
                status_code=exc.status_code,
            ) from exc

        if not body.get("success"):
            raise CmsSaveError(
                str(body.get("message") or "Failed to save content"),
                page=page,
                section=section,
            )

        saved_data = body.get("data")
        saved = SectionContent(
            saved_data if isinstance(saved_data, dict) else payload,
            body.get("updatedAt") or _now_iso(),
        )

        key = ContentKey(page, section)
        await asyncio.to_thread(write_cached, self.store, key, saved.data, saved.updated_at)
        self.bus.publish(
            ContentUpdate(
                page=page,
                section=section,
                data=saved.data,
                updated_at=saved.updated_at,
                origin=origin,
            )
        )
        return saved

    # --- Local store ---

    def is_cache_stale(self, page: str, section: str, api_updated_at: str) -> bool:
        return is_cache_stale(self.store, ContentKey(page, section), api_updated_at)

    def clear_cache(self, page: str | None = None, section: str | None = None) -> int:
        return clear_cache(self.store, page, section)


@contextlib.asynccontextmanager
async def connect(
    config: ClientConfig | None = None,
    *,
    bus: ContentBus | None = None,
) -> AsyncIterator[CmsApi]:
    """Open an HTTP session for the lifetime of the block.

    Usage::

        async with connect() as api:
            async with ContentHandle(api, "careers", "application") as handle:
                print(handle.data)
    """
    config = config or ClientConfig.from_env()
    async with aiohttp.ClientSession() as session:
        yield CmsApi.from_config(config, session, bus=bus)

"""
Per-component section content handle.

A ``ContentHandle`` owns the state one rendered component needs for one
(page, section) key: the merged data, loading and error flags and the
last server timestamp. Opening the handle subscribes it to the content bus
and runs the initial fetch; closing it unsubscribes and discards every
result that arrives afterwards.

Key behaviors:
- Concurrent fetches share one in-flight request
- Each request is tagged with the key generation; results for an older
  generation, or for a closed handle, are dropped
- Fetch failures are recorded in ``error``; save failures are re-raised
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from corpsite.client.api import CmsApi, SectionContent
from corpsite.client.events import ContentUpdate, Subscription
from corpsite.client.exceptions import CmsError
from corpsite.client.sections import SectionSchema
from corpsite.domain.entities import ContentKey
from corpsite.domain.merge import fill_blank_fields, merge_patch, merge_with_defaults

_logger = logging.getLogger(__name__)

OnUpdate = Callable[[dict[str, Any]], None]


@dataclass(frozen=True)
class ContentState:
    data: dict[str, Any]
    loading: bool
    error: CmsError | None
    updated_at: str | None


@dataclass
class _InFlight:
    task: asyncio.Task[SectionContent]
    key: ContentKey
    generation: int


class ContentHandle:
    """Live view of one section's content.

    Usage::

        async with ContentHandle(api, "careers", "application", default=defaults) as h:
            render(h.data)
            await h.save({"title": "New Title"})
    """

    def __init__(
        self,
        api: CmsApi,
        page: str,
        section: str,
        *,
        default: Mapping[str, Any] | None = None,
        auto_fetch: bool = True,
        on_update: OnUpdate | None = None,
        fill_blank: bool = False,
    ) -> None:
        self._api = api
        self._key = ContentKey(page, section)
        self._default = dict(default) if default is not None else None
        self._auto_fetch = auto_fetch
        self._on_update = on_update
        self._fill_blank = fill_blank

        self._data: dict[str, Any] = dict(default) if default is not None else {}
        self._loading = auto_fetch
        self._error: CmsError | None = None
        self._updated_at: str | None = None

        self._inflight: _InFlight | None = None
        self._generation = 0
        self._closed = False
        self._opened = False
        self._subscription: Subscription | None = None
        self._fetched_key: ContentKey | None = None

    @classmethod
    def for_schema(cls, api: CmsApi, schema: SectionSchema, **kwargs: Any) -> ContentHandle:
        kwargs.setdefault("fill_blank", schema.fill_blank)
        return cls(api, schema.page, schema.section, default=schema.defaults, **kwargs)

    # --- State ---

    @property
    def key(self) -> ContentKey:
        return self._key

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> CmsError | None:
        return self._error

    @property
    def updated_at(self) -> str | None:
        return self._updated_at

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def fetching(self) -> bool:
        return self._inflight is not None

    def snapshot(self) -> ContentState:
        return ContentState(
            data=dict(self._data),
            loading=self._loading,
            error=self._error,
            updated_at=self._updated_at,
        )

    # --- Lifecycle ---

    async def open(self) -> None:
        """Subscribe to updates and run the initial fetch for this key."""
        if self._opened and not self._closed:
            return
        self._opened = True
        self._closed = False
        self._subscribe()
        if self._auto_fetch and self._fetched_key != self._key:
            self._fetched_key = self._key
            await self.fetch()

    def close(self) -> None:
        """
        Unsubscribe and stop applying results.

        A request still in flight is not cancelled; its result is discarded.
        """
        self._closed = True
        self._unsubscribe()

    async def __aenter__(self) -> ContentHandle:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _subscribe(self) -> None:
        self._unsubscribe()
        self._subscription = self._api.bus.subscribe(self._key, self._on_broadcast)

    def _unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    async def set_key(self, page: str, section: str) -> None:
        """
        Point the handle at another section.

        Any request in flight for the previous key is abandoned. An open
        handle re-subscribes and, with auto fetch, fetches the new key once.
        """
        new_key = ContentKey(page, section)
        if new_key == self._key:
            return
        self._key = new_key
        self._generation += 1
        self._inflight = None
        self._error = None
        # Nothing is pending for the new key until a fetch starts
        self._loading = False

        if not self._opened or self._closed:
            return
        self._subscribe()
        if self._auto_fetch and self._fetched_key != new_key:
            self._fetched_key = new_key
            await self.fetch()

    # --- Operations ---

    def _merge(self, data: Mapping[str, Any]) -> dict[str, Any]:
        if self._default is not None and self._fill_blank:
            return fill_blank_fields(self._default, data)
        return merge_with_defaults(self._default, data)

    def _is_current(self, inflight: _InFlight) -> bool:
        return not self._closed and inflight.generation == self._generation

    def _start_request(self, skip_cache: bool) -> _InFlight:
        task = asyncio.ensure_future(
            self._api.get_content(
                self._key.page,
                self._key.section,
                skip_cache=skip_cache,
                default=self._default,
            )
        )
        inflight = _InFlight(task=task, key=self._key, generation=self._generation)
        self._inflight = inflight
        task.add_done_callback(lambda t: self._request_done(inflight))
        return inflight

    def _request_done(self, inflight: _InFlight) -> None:
        if self._inflight is inflight:
            self._inflight = None
        task = inflight.task
        if not task.cancelled():
            # Mark retrieved; the outcome is handled by the awaiting fetch
            task.exception()

    async def fetch(self, skip_cache: bool = False) -> None:
        """
        Fetch the section and apply it merged over the defaults.

        A call made while a request is in flight awaits that request instead
        of starting another. Failures are recorded in ``error`` and never
        raised.
        """
        joined = self._inflight is not None
        inflight = self._inflight if joined else self._start_request(skip_cache)
        assert inflight is not None

        if not self._closed:
            self._loading = True

        try:
            result = await asyncio.shield(inflight.task)
        except CmsError as exc:
            self._apply_failure(inflight, exc)
            return
        self._apply_result(inflight, result, notify=not joined)

    def _apply_result(self, inflight: _InFlight, result: SectionContent, notify: bool) -> None:
        if not self._is_current(inflight):
            _logger.debug(
                "Dropping stale result for %s/%s", inflight.key.page, inflight.key.section
            )
            return
        merged = self._merge(result.data)
        self._data = merged
        self._updated_at = result.updated_at
        self._error = None
        self._loading = False
        if notify and self._on_update is not None:
            self._on_update(merged)

    def _apply_failure(self, inflight: _InFlight, exc: CmsError) -> None:
        if not self._is_current(inflight):
            _logger.debug(
                "Dropping stale failure for %s/%s", inflight.key.page, inflight.key.section
            )
            return
        _logger.warning(
            "Fetch failed for %s/%s: %s", inflight.key.page, inflight.key.section, exc
        )
        if self._default is not None:
            self._data = dict(self._default)
        self._error = exc
        self._loading = False

    async def refresh(self) -> None:
        await self.fetch(skip_cache=True)

    async def save(self, partial: Mapping[str, Any]) -> None:
        """
        Merge ``partial`` into the current data and persist it.

        On success the handle takes the server's saved data and timestamp.

        Raises:
            CmsSaveError: the write failed; ``data`` is left unchanged.
        """
        key = self._key
        generation = self._generation
        if not self._closed:
            self._loading = True
            self._error = None

        updated = merge_patch(self._data, partial)
        try:
            result = await self._api.save_content(key.page, key.section, updated, origin=self)
        except CmsError as exc:
            if not self._closed:
                self._error = exc
                self._loading = False
            raise

        if self._closed:
            return
        if generation != self._generation:
            if self._inflight is None:
                self._loading = False
            return
        self._data = dict(result.data)
        self._updated_at = result.updated_at
        self._loading = False
        if self._on_update is not None:
            self._on_update(self._data)

    # --- Broadcasts ---

    def _on_broadcast(self, update: ContentUpdate) -> None:
        if update.origin is self or self._closed or update.key != self._key:
            return
        self._data = dict(update.data)
        self._updated_at = update.updated_at
        if self._on_update is not None:
            self._on_update(self._data)

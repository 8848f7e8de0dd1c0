"""
In-process content update bus.

Writers publish a :class:`ContentUpdate` after a successful save; every
subscriber registered for the same (page, section) receives it
synchronously, in subscription order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from corpsite.domain.entities import ContentKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentUpdate:
    page: str
    section: str
    data: dict[str, Any]
    updated_at: str | None = None
    # Publisher identity, so a writer can ignore its own broadcast
    origin: Any = field(default=None, compare=False, repr=False)

    @property
    def key(self) -> ContentKey:
        return ContentKey(self.page, self.section)


UpdateCallback = Callable[[ContentUpdate], None]


class Subscription:
    """Handle returned by :meth:`ContentBus.subscribe`."""

    def __init__(self, bus: ContentBus, key: ContentKey, callback: UpdateCallback) -> None:
        self._bus = bus
        self.key = key
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop receiving updates. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._bus._remove(self)


class ContentBus:
    def __init__(self) -> None:
        self._subscribers: dict[ContentKey, list[Subscription]] = {}

    def subscribe(self, key: ContentKey, callback: UpdateCallback) -> Subscription:
        sub = Subscription(self, key, callback)
        self._subscribers.setdefault(key, []).append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        subs = self._subscribers.get(sub.key)
        if not subs:
            return
        if sub in subs:
            subs.remove(sub)
        if not subs:
            del self._subscribers[sub.key]

    def subscriber_count(self, key: ContentKey | None = None) -> int:
        if key is not None:
            return len(self._subscribers.get(key, []))
        return sum(len(subs) for subs in self._subscribers.values())

    def publish(self, update: ContentUpdate) -> int:
        """
        Deliver an update to every subscriber of its key.

        A subscriber that raises is logged and skipped. Returns the number
        of subscribers that received the update without error.
        """
        delivered = 0
        # Copy: callbacks may cancel their own subscription
        for sub in list(self._subscribers.get(update.key, [])):
            if not sub.active:
                continue
            try:
                sub.callback(update)
            except Exception:
                logger.exception(
                    "Content update subscriber failed for %s/%s", update.page, update.section
                )
                continue
            delivered += 1
        return delivered

"""Content client configuration."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

DEFAULT_BASE_URL = "http://localhost:8080"


@dataclasses.dataclass(frozen=True)
class ClientConfig:
    """Content client configuration.

    Parameters
    ----------
    base_url : str
        API host. Defaults to the local development server.
    timeout : float
        Total per-request timeout in seconds.
    storage_path : str or None
        JSON file backing the local fallback store. ``None`` keeps the
        fallback in memory for the lifetime of the process.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 10.0
    storage_path: str | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> ClientConfig:
        """Create configuration from ``CORPSITE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        kwargs: dict[str, Any] = {}

        base_url = env.get("CORPSITE_API_URL")
        if base_url:
            kwargs["base_url"] = base_url.rstrip("/")

        timeout_env = env.get("CORPSITE_API_TIMEOUT")
        if timeout_env is not None:
            kwargs["timeout"] = float(timeout_env)

        storage_path = env.get("CORPSITE_CACHE_FILE")
        if storage_path:
            kwargs["storage_path"] = storage_path

        kwargs.update(overrides)
        return cls(**kwargs)

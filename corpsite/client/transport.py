"""JSON-over-HTTP transport for the CMS API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from corpsite.client.config import ClientConfig
from corpsite.client.exceptions import CmsTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by :class:`~corpsite.client.api.CmsApi`.

    Implementations return the decoded JSON object body of a 2xx response
    and raise :class:`CmsTransportError` for everything else.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        ...


class AiohttpTransport:
    """Transport backed by a caller-owned :class:`aiohttp.ClientSession`."""

    def __init__(self, config: ClientConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._config.base_url}{path}"
        request_headers = {"accept": "application/json"}
        if headers:
            request_headers.update(headers)

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                json=json_body,
                headers=request_headers,
                timeout=aiohttp.ClientTimeout(total=self._config.timeout),
            ) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise CmsTransportError(
                        f"HTTP {resp.status} from {path}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=path,
                    )
        except CmsTransportError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise CmsTransportError(
                f"Request to {path} failed: {exc!r}",
                endpoint=path,
            ) from exc

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CmsTransportError(
                f"Invalid JSON from {path}: {text[:200]}",
                status_code=resp.status,
                endpoint=path,
            ) from exc

        if not isinstance(body, dict):
            raise CmsTransportError(
                f"Expected a JSON object from {path}",
                status_code=resp.status,
                endpoint=path,
            )
        return body

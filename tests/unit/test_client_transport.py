"""
Client configuration and aiohttp transport tests.

The transport is exercised against a stand-in session object so no socket
is opened.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator
from typing import Any

import aiohttp
import pytest

from corpsite.client.config import DEFAULT_BASE_URL, ClientConfig
from corpsite.client.exceptions import CmsTransportError
from corpsite.client.transport import AiohttpTransport


class _Response:
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self._body = body

    async def text(self) -> str:
        return self._body


class _Session:
    def __init__(self, status: int = 200, body: str = "{}", error: Exception | None = None):
        self.status = status
        self.body = body
        self.error = error
        self.requests: list[tuple[str, str, dict[str, Any]]] = []

    @contextlib.asynccontextmanager
    async def _respond(self) -> AsyncIterator[_Response]:
        if self.error is not None:
            raise self.error
        yield _Response(self.status, self.body)

    def request(self, method: str, url: str, **kwargs: Any):
        self.requests.append((method, url, kwargs))
        return self._respond()


CONFIG = ClientConfig(base_url="http://cms.test", timeout=2.5)


class TestClientConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CORPSITE_API_URL", raising=False)
        monkeypatch.delenv("CORPSITE_CACHE_FILE", raising=False)
        monkeypatch.delenv("CORPSITE_API_TIMEOUT", raising=False)
        config = ClientConfig.from_env()
        assert config.base_url == DEFAULT_BASE_URL == "http://localhost:8080"
        assert config.storage_path is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CORPSITE_API_URL", "https://api.example.com/")
        monkeypatch.setenv("CORPSITE_API_TIMEOUT", "3")
        monkeypatch.setenv("CORPSITE_CACHE_FILE", "/tmp/cms.json")
        config = ClientConfig.from_env()
        assert config.base_url == "https://api.example.com"
        assert config.timeout == 3.0
        assert config.storage_path == "/tmp/cms.json"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("CORPSITE_API_URL", "https://api.example.com")
        assert ClientConfig.from_env(base_url="http://x").base_url == "http://x"


class TestAiohttpTransport:
    @pytest.mark.asyncio
    async def test_returns_json_object(self):
        session = _Session(body='{"success": true, "data": {"a": 1}}')
        transport = AiohttpTransport(CONFIG, session)  # type: ignore[arg-type]

        body = await transport.request("GET", "/api/cms/about/cms/hero")

        assert body == {"success": True, "data": {"a": 1}}
        method, url, kwargs = session.requests[0]
        assert method == "GET"
        assert url == "http://cms.test/api/cms/about/cms/hero"
        assert kwargs["headers"]["accept"] == "application/json"
        assert kwargs["timeout"].total == 2.5

    @pytest.mark.asyncio
    async def test_sends_json_body_and_headers(self):
        session = _Session(status=201, body='{"success": true}')
        transport = AiohttpTransport(CONFIG, session)  # type: ignore[arg-type]

        await transport.request(
            "POST", "/x", json_body={"title": "t"}, headers={"cache-control": "no-cache"}
        )

        _, _, kwargs = session.requests[0]
        assert kwargs["json"] == {"title": "t"}
        assert kwargs["headers"]["cache-control"] == "no-cache"

    @pytest.mark.asyncio
    async def test_error_status(self):
        transport = AiohttpTransport(CONFIG, _Session(status=500, body="boom"))  # type: ignore[arg-type]
        with pytest.raises(CmsTransportError) as exc_info:
            await transport.request("GET", "/x")
        assert exc_info.value.status_code == 500
        assert exc_info.value.endpoint == "/x"

    @pytest.mark.asyncio
    async def test_network_error(self):
        session = _Session(error=aiohttp.ClientConnectionError("refused"))
        transport = AiohttpTransport(CONFIG, session)  # type: ignore[arg-type]
        with pytest.raises(CmsTransportError) as exc_info:
            await transport.request("GET", "/x")
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientError)

    @pytest.mark.asyncio
    async def test_timeout(self):
        transport = AiohttpTransport(CONFIG, _Session(error=TimeoutError()))  # type: ignore[arg-type]
        with pytest.raises(CmsTransportError):
            await transport.request("GET", "/x")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        transport = AiohttpTransport(CONFIG, _Session(body="<html>"))  # type: ignore[arg-type]
        with pytest.raises(CmsTransportError, match="Invalid JSON"):
            await transport.request("GET", "/x")

    @pytest.mark.asyncio
    async def test_non_object_body(self):
        transport = AiohttpTransport(CONFIG, _Session(body="[1, 2]"))  # type: ignore[arg-type]
        with pytest.raises(CmsTransportError, match="JSON object"):
            await transport.request("GET", "/x")

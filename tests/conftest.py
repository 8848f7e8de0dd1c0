import asyncio
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from corpsite.adapters.sqlite.migrator import SQLiteMigrator
from corpsite.api.deps import Settings, get_settings
from corpsite.api.main import app
from corpsite.client.api import CmsApi
from corpsite.client.events import ContentBus
from corpsite.client.exceptions import CmsTransportError
from corpsite.client.storage import MemoryStore
from corpsite.rules.loader import load_rules

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MIGRATIONS_DIR = str(PROJECT_ROOT / "migrations")
RULES_PATH = PROJECT_ROOT / "rules.yaml"


# --- Server ---


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    """Settings pointing at a temporary data directory and the real rules."""
    monkeypatch.setenv("CORPSITE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("CORPSITE_RULES_PATH", str(RULES_PATH))
    monkeypatch.setenv("CORPSITE_MIGRATIONS_DIR", MIGRATIONS_DIR)
    return Settings()


@pytest.fixture
def db_path(settings: Settings) -> str:
    """Migrated database for the test settings."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    SQLiteMigrator(settings.db_path, MIGRATIONS_DIR).run_migrations()
    return settings.db_path


@pytest.fixture
def rules():
    return load_rules(RULES_PATH)


@pytest.fixture
def client(settings: Settings, db_path: str) -> Iterator[TestClient]:
    """Client for the real app wired to a fresh database."""
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


# --- Content client ---


def ok(data: Any, updated_at: str | None = "2026-01-01T00:00:00+00:00") -> dict[str, Any]:
    return {"success": True, "message": "OK", "data": data, "updatedAt": updated_at}


class FakeTransport:
    """
    Scripted transport.

    Responses are set per (method, path); each call takes the next scripted
    result and the last one repeats. Unscripted POSTs echo the body back as
    the saved content. Anything else unscripted is an HTTP 404.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._responses: dict[tuple[str, str], list[Any]] = {}
        self._gate: asyncio.Event | None = None
        self.saved_at = "2026-02-01T12:00:00+00:00"

    def respond(self, method: str, path: str, *results: Any) -> None:
        self._responses[(method, path)] = list(results)

    def hold(self) -> asyncio.Event:
        """Block every request until the returned event is set."""
        self._gate = asyncio.Event()
        return self._gate

    def count(self, method: str, path: str) -> int:
        return sum(1 for c in self.calls if c["method"] == method and c["path"] == path)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        headers: Any = None,
    ) -> dict[str, Any]:
        self.calls.append(
            {"method": method, "path": path, "json": json_body, "headers": headers}
        )
        if self._gate is not None:
            await self._gate.wait()

        scripted = self._responses.get((method, path))
        if scripted:
            result = scripted.pop(0) if len(scripted) > 1 else scripted[0]
        elif method == "POST":
            result = ok(json_body, self.saved_at) | {"message": "Updated"}
        else:
            result = CmsTransportError("HTTP 404", status_code=404, endpoint=path)

        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def bus() -> ContentBus:
    return ContentBus()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def api(fake_transport: FakeTransport, store: MemoryStore, bus: ContentBus) -> CmsApi:
    return CmsApi(fake_transport, store=store, bus=bus)

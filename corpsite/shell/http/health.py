"""
Health endpoints.

Key behaviors:
- /api/health: liveness plus a snapshot of every registered check
- /api/health/ready: 503 while any check is unhealthy
"""

from __future__ import annotations

import sqlite3
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from corpsite.api.deps import Settings, get_settings

# --- Types ---


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0.0
    details: dict[str, Any] = field(default_factory=dict)


class HealthCheck(Protocol):
    name: str

    def check(self) -> CheckResult:
        ...


# --- Startup Tracker ---


class StartupTracker:
    """Tracks application startup time for uptime calculation."""

    _start_time: float | None = None

    @classmethod
    def mark_started(cls) -> None:
        cls._start_time = time.time()

    @classmethod
    def get_uptime_seconds(cls) -> float:
        if cls._start_time is None:
            return 0.0
        return time.time() - cls._start_time


# --- Built-in Checks ---


class DatabaseCheck:
    """Verifies the SQLite file opens and the schema has been migrated."""

    name = "database"

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def check(self) -> CheckResult:
        start = time.perf_counter()
        try:
            conn = sqlite3.connect(f"file:{self._db_path}?mode=rw", uri=True)
            try:
                row = conn.execute(
                    "SELECT name FROM sqlite_master WHERE type='table' AND name='cms_content'"
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            return CheckResult(
                name=self.name,
                status=HealthStatus.UNHEALTHY,
                message=f"Database unavailable: {e}",
                latency_ms=(time.perf_counter() - start) * 1000,
            )

        latency = (time.perf_counter() - start) * 1000
        if row is None:
            return CheckResult(
                name=self.name,
                status=HealthStatus.UNHEALTHY,
                message="Schema not migrated",
                latency_ms=latency,
            )
        return CheckResult(name=self.name, status=HealthStatus.HEALTHY, latency_ms=latency)


def run_checks(checks: list[HealthCheck]) -> tuple[HealthStatus, list[CheckResult]]:
    results = [c.check() for c in checks]
    overall = (
        HealthStatus.HEALTHY
        if all(r.status == HealthStatus.HEALTHY for r in results)
        else HealthStatus.UNHEALTHY
    )
    return overall, results


def get_health_checks(settings: Settings = Depends(get_settings)) -> list[HealthCheck]:
    return [DatabaseCheck(settings.db_path)]


def _serialize(results: list[CheckResult]) -> list[dict[str, Any]]:
    return [
        {
            "name": r.name,
            "status": r.status.value,
            "message": r.message,
            "latency_ms": round(r.latency_ms, 2),
        }
        for r in results
    ]


# --- Routes ---

router = APIRouter()


@router.get("/health")
def health(checks: list[HealthCheck] = Depends(get_health_checks)) -> dict[str, Any]:
    """Liveness: always 200 while the process serves requests."""
    overall, results = run_checks(checks)
    return {
        "success": True,
        "message": "Server is running well",
        "status": overall.value,
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime_seconds": round(StartupTracker.get_uptime_seconds(), 1),
        "checks": _serialize(results),
    }


@router.get("/health/ready")
def ready(checks: list[HealthCheck] = Depends(get_health_checks)) -> JSONResponse:
    overall, results = run_checks(checks)
    code = (
        status.HTTP_200_OK
        if overall == HealthStatus.HEALTHY
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(
        status_code=code,
        content={
            "success": overall == HealthStatus.HEALTHY,
            "status": overall.value,
            "checks": _serialize(results),
        },
    )

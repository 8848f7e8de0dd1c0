import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from corpsite.adapters.sqlite.migrator import SQLiteMigrator
from corpsite.api.deps import Settings, get_settings
from corpsite.api.responses import envelope, install_error_handlers
from corpsite.rules.loader import load_rules
from corpsite.shell.http.health import StartupTracker

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def prepare_storage(settings: Settings) -> None:
    """Create the data directory and bring the schema up to date."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
    if applied:
        logger.info("Applied %d migration(s): %s", len(applied), ", ".join(applied))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings_factory = app.dependency_overrides.get(get_settings, get_settings)
    settings: Settings = settings_factory()
    configure_logging(settings.log_level)

    # Fail fast on a broken rules file or schema
    try:
        rules = load_rules(settings.rules_path)
        prepare_storage(settings)
    except Exception:
        logger.critical("Startup failed", exc_info=True)
        raise

    logger.info("Rules loaded for site %s from %s", rules.site.name, settings.rules_path)
    StartupTracker.mark_started()
    yield


app = FastAPI(
    title="Corporate Site CMS API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

install_error_handlers(app)

# --- Routers ---
from corpsite.api.routes import admin_cms, page_cms  # noqa: E402
from corpsite.shell.http import health  # noqa: E402

app.include_router(health.router, prefix="/api", tags=["System"])
app.include_router(page_cms.router, prefix="/api/cms", tags=["CMS"])
app.include_router(admin_cms.router, prefix="/api/admin/cms", tags=["Admin CMS"])


@app.api_route(
    "/api/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def endpoint_not_found(path: str) -> JSONResponse:
    return envelope(404, "Endpoint Not Found")


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def run(**kwargs: Any) -> None:
    """Serve the API with uvicorn (CORPSITE_PORT, default 8080)."""
    uvicorn.run(
        "corpsite.api.main:app",
        host=os.environ.get("CORPSITE_HOST", "127.0.0.1"),
        port=int(os.environ.get("CORPSITE_PORT", "8080")),
        **kwargs,
    )


if __name__ == "__main__":
    run()

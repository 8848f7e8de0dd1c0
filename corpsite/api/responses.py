"""
Response envelope and error handlers shared by every CMS route.

Every response body has the shape {"success", "message", "data"?, ...extra}.
Unexpected exceptions become a uniform 500 that never carries internals.
"""

import logging
from collections.abc import Iterable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def envelope(
    status_code: int,
    message: str,
    data: Any = None,
    **extra: Any,
) -> JSONResponse:
    content: dict[str, Any] = {"success": status_code < 400, "message": message}
    if data is not None:
        content["data"] = data
    content.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def error_details(errors: Iterable[Any]) -> list[dict[str, Any]]:
    """Serialize validation error dataclasses for an HTTP 400 detail."""
    return [
        {"code": err.code, "message": err.message, "field": err.field} for err in errors
    ]


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("HTTP %s on %s %s", exc.status_code, request.method, request.url.path)
    if isinstance(exc.detail, str):
        return envelope(exc.status_code, exc.detail)
    return envelope(exc.status_code, "Validation failed", errors=exc.detail)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return envelope(422, "Invalid request", errors=jsonable_encoder(exc.errors()))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return envelope(500, "Internal error")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)

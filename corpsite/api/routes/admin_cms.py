"""Admin routes for editing per-section CMS content."""

import json
from typing import Any
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from corpsite.api.deps import get_cms_service
from corpsite.api.responses import envelope, error_details
from corpsite.components.cms import (
    BulkSaveInput,
    CmsContentService,
    DeleteSectionInput,
    GetSectionInput,
    SaveSectionInput,
    run_bulk_save,
    run_delete_section,
    run_get_section,
    run_save_section,
)

router = APIRouter()


async def read_body(request: Request) -> Any:
    """Decode a JSON or URL-encoded form body. An empty body is None."""
    raw = await request.body()
    if not raw:
        return None
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/x-www-form-urlencoded"):
        return dict(parse_qsl(raw.decode("utf-8"), keep_blank_values=True))
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from e


def _check_page(service: CmsContentService, page: str) -> None:
    errors = service.validate_key(page)
    if errors:
        raise HTTPException(status_code=400, detail=error_details(errors))


# --- Routes ---


@router.get("")
@router.get("/", include_in_schema=False)
def get_all_content(service: CmsContentService = Depends(get_cms_service)) -> JSONResponse:
    """All content grouped as {page: {section: data}}."""
    return envelope(200, "OK", service.get_all())


@router.get("/page/{page}")
def get_page_content(
    page: str,
    service: CmsContentService = Depends(get_cms_service),
) -> JSONResponse:
    _check_page(service, page)
    return envelope(200, "OK", service.get_page(page))


@router.get("/page/{page}/section/{section}")
def get_section_content(
    page: str,
    section: str,
    service: CmsContentService = Depends(get_cms_service),
) -> JSONResponse:
    result = run_get_section(GetSectionInput(page=page, section=section), service)
    if result.errors:
        raise HTTPException(status_code=400, detail=error_details(result.errors))
    if result.content is None:
        raise HTTPException(status_code=404, detail="Content not found")
    return envelope(
        200, "OK", result.content.data, updatedAt=result.content.updated_at.isoformat()
    )


@router.api_route("/page/{page}/section/{section}", methods=["POST", "PUT"])
async def save_section_content(
    page: str,
    section: str,
    request: Request,
    service: CmsContentService = Depends(get_cms_service),
) -> JSONResponse:
    """Create or replace one section (upsert)."""
    body = await read_body(request)
    result = run_save_section(SaveSectionInput(page=page, section=section, body=body), service)
    if not result.success:
        raise HTTPException(status_code=400, detail=error_details(result.errors))

    content = result.content
    assert content is not None
    return envelope(
        201 if result.created else 200,
        "Created" if result.created else "Updated",
        content.data,
        updatedAt=content.updated_at.isoformat(),
    )


@router.api_route("/page/{page}/bulk", methods=["POST", "PUT"])
async def bulk_update_sections(
    page: str,
    request: Request,
    service: CmsContentService = Depends(get_cms_service),
) -> JSONResponse:
    """Upsert several sections from {section: data}."""
    body = await read_body(request)
    result = run_bulk_save(BulkSaveInput(page=page, sections=body), service)
    if not result.success:
        raise HTTPException(status_code=400, detail=error_details(result.errors))
    return envelope(
        200,
        "Bulk update completed",
        [
            {"section": r.section, "created": r.created, "data": r.data}
            for r in result.results
        ],
    )


@router.delete("/page/{page}/section/{section}")
def delete_section_content(
    page: str,
    section: str,
    service: CmsContentService = Depends(get_cms_service),
) -> JSONResponse:
    result = run_delete_section(DeleteSectionInput(page=page, section=section), service)
    if not result.deleted:
        raise HTTPException(status_code=404, detail="Content not found")
    return envelope(200, "Deleted")

"""Public CMS read routes consumed by the site pages."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from corpsite.api.crud import build_crud_router
from corpsite.api.deps import get_cms_service, get_ordered_services
from corpsite.api.responses import envelope, error_details
from corpsite.components.cms import CmsContentService, GetSectionInput, run_get_section
from corpsite.components.ordered import (
    ORDERED_CONTENT_TYPES,
    OrderedListService,
    run_list,
)

router = APIRouter()


@router.get("/home")
def get_home(
    services: dict[str, OrderedListService] = Depends(get_ordered_services),
) -> JSONResponse:
    """All ordered lists shown on the home page."""
    data = {
        slug: [item.model_dump(mode="json") for item in run_list(service).items]
        for slug, service in services.items()
    }
    return envelope(200, "OK", data)


for _content_type in ORDERED_CONTENT_TYPES.values():
    router.include_router(build_crud_router(_content_type), prefix="/home")


@router.get("/{page}/cms")
def get_page_sections(
    page: str,
    service: CmsContentService = Depends(get_cms_service),
) -> JSONResponse:
    """All sections of one page as {section: data}."""
    errors = service.validate_key(page)
    if errors:
        raise HTTPException(status_code=400, detail=error_details(errors))
    return envelope(200, "OK", service.get_page(page))


@router.get("/{page}/cms/{section}")
def get_section(
    page: str,
    section: str,
    service: CmsContentService = Depends(get_cms_service),
) -> JSONResponse:
    """
    One section's data.

    A section that was never saved is an empty payload, not an error, so
    pages can render their defaults.
    """
    result = run_get_section(GetSectionInput(page=page, section=section), service)
    if result.errors:
        raise HTTPException(status_code=400, detail=error_details(result.errors))

    if result.content is None:
        return envelope(200, "OK", {}, updatedAt=None)
    return envelope(
        200,
        "OK",
        result.content.data,
        updatedAt=result.content.updated_at.isoformat(),
    )

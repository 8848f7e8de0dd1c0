"""Generic CRUD router factory for ordered-list content types."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse

from corpsite.adapters.clock import SystemClock
from corpsite.api.deps import Settings, build_ordered_service, get_clock, get_settings
from corpsite.api.responses import envelope, error_details
from corpsite.components.ordered import (
    CreateItemInput,
    DeleteItemInput,
    OrderedContentType,
    OrderedListService,
    UpdateItemInput,
    run_create,
    run_delete,
    run_list,
    run_update,
)


def build_crud_router(content_type: OrderedContentType) -> APIRouter:
    """
    Map one ordered-list content type onto list/create/update/delete handlers.

    Mounted under the router prefix as:
        GET    /{slug}            -> 200 rows ascending by order
        POST   /{slug}            -> 201 created row
        PUT    /{slug}/{item_id}  -> 200 updated row | 404
        DELETE /{slug}/{item_id}  -> 200 | 404
    """
    router = APIRouter()
    slug = content_type.slug

    def get_service(
        settings: Settings = Depends(get_settings),
        clock: SystemClock = Depends(get_clock),
    ) -> OrderedListService:
        return build_ordered_service(content_type, settings, clock)

    @router.get(f"/{slug}", name=f"list_{slug}")
    def list_items(service: OrderedListService = Depends(get_service)) -> JSONResponse:
        result = run_list(service)
        return envelope(200, "OK", [item.model_dump(mode="json") for item in result.items])

    @router.post(f"/{slug}", name=f"create_{slug}")
    def create_item(
        payload: dict[str, Any] = Body(...),
        service: OrderedListService = Depends(get_service),
    ) -> JSONResponse:
        result = run_create(CreateItemInput(payload=payload), service)
        if not result.success:
            raise HTTPException(status_code=400, detail=error_details(result.errors))
        assert result.item is not None
        return envelope(201, "Created", result.item.model_dump(mode="json"))

    @router.put(f"/{slug}/{{item_id}}", name=f"update_{slug}")
    def update_item(
        item_id: int,
        payload: dict[str, Any] = Body(...),
        service: OrderedListService = Depends(get_service),
    ) -> JSONResponse:
        result = run_update(UpdateItemInput(item_id=item_id, payload=payload), service)
        if result.not_found:
            raise HTTPException(status_code=404, detail="Not found")
        if not result.success:
            raise HTTPException(status_code=400, detail=error_details(result.errors))
        assert result.item is not None
        return envelope(200, "Updated", result.item.model_dump(mode="json"))

    @router.delete(f"/{slug}/{{item_id}}", name=f"delete_{slug}")
    def delete_item(
        item_id: int,
        service: OrderedListService = Depends(get_service),
    ) -> JSONResponse:
        result = run_delete(DeleteItemInput(item_id=item_id), service)
        if result.not_found:
            raise HTTPException(status_code=404, detail="Not found")
        return envelope(200, "Deleted")

    return router

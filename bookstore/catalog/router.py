"""
Route definitions for the catalogue.

Page routes (server-rendered, one controller per application):
- GET  /                         : the page; ``q`` and ``sort`` fire search/sort events
- POST /form/toggle              : expand or collapse the add form
- POST /form/cancel              : collapse the add form and reset it
- POST /products                 : submit the add form
- GET  /products/{id}/delete     : delete confirmation prompt
- POST /products/{id}/delete     : answer the prompt (``answer=yes|no``)

JSON endpoints under /api/catalog:
- GET    /products               : derived list (search + sort)
- POST   /products               : add a product
- DELETE /products/{id}          : remove a product
- GET    /debug/store            : store status and a small sample
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from .controller import CatalogController
from .errors import ItemValidationError
from .schemas import CatalogItem, CatalogItemInput, DebugStore, SortKey
from .view_model import derive


def get_controller(request: Request) -> CatalogController:
    return request.app.state.controller


def _back_to_page() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


page_router = APIRouter(tags=["page"])
router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@page_router.get("/", response_class=HTMLResponse)
def show_page(
    q: Optional[str] = Query(default=None, description="Tìm kiếm theo tên"),
    sort: Optional[str] = Query(default=None, description="Sắp xếp"),
    controller: CatalogController = Depends(get_controller),
) -> HTMLResponse:
    if q is not None and q != controller.query:
        controller.on_search(q)
    if sort is not None and sort != controller.sort_key:
        controller.on_sort(sort)
    return HTMLResponse(controller.view.html)


@page_router.post("/form/toggle")
def toggle_form(controller: CatalogController = Depends(get_controller)) -> RedirectResponse:
    controller.on_toggle_form()
    return _back_to_page()


@page_router.post("/form/cancel")
def cancel_form(controller: CatalogController = Depends(get_controller)) -> RedirectResponse:
    controller.on_cancel_form()
    return _back_to_page()


@page_router.post("/products")
def submit_product(
    name: str = Form(default=""),
    price: str = Form(default=""),
    description: str = Form(default=""),
    image_url: str = Form(default=""),
    controller: CatalogController = Depends(get_controller),
):
    form = {"name": name, "price": price, "description": description, "image_url": image_url}
    if controller.on_submit(form) is None:
        return HTMLResponse(controller.view.html, status_code=400)
    return _back_to_page()


@page_router.get("/products/{item_id}/delete", response_class=HTMLResponse)
def confirm_delete(
    item_id: int, controller: CatalogController = Depends(get_controller)
) -> HTMLResponse:
    item = controller.store.get(item_id)
    if item is None or item_id not in controller.view.actions:
        raise HTTPException(status_code=404, detail="Product not found")
    message = controller.confirmation_message(item)
    return HTMLResponse(controller.renderer.render_confirmation(item, message))


@page_router.post("/products/{item_id}/delete")
def answer_delete(
    item_id: int,
    answer: str = Form(default="no"),
    controller: CatalogController = Depends(get_controller),
) -> RedirectResponse:
    action = controller.view.actions.get(item_id)
    if action is not None:
        action(confirm=lambda _message: answer == "yes")
    return _back_to_page()


@router.get("/products", response_model=List[CatalogItem])
def list_products(
    q: Optional[str] = Query(default=None, description="Tìm kiếm theo tên"),
    sort: SortKey = Query(default="none", description="Sắp xếp"),
    controller: CatalogController = Depends(get_controller),
) -> List[CatalogItem]:
    return derive(controller.store.list_items(), q, sort)


@router.post("/products", response_model=CatalogItem, status_code=201)
def add_product(
    req: CatalogItemInput, controller: CatalogController = Depends(get_controller)
) -> CatalogItem:
    try:
        item = controller.store.add(req)
    except ItemValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    controller.refresh()
    return item


@router.delete("/products/{item_id}")
def remove_product(item_id: int, controller: CatalogController = Depends(get_controller)):
    removed = controller.store.remove(item_id)
    controller.refresh()
    return {"status": "ok", "removed": removed}


@router.get("/debug/store", response_model=DebugStore)
def debug_store(controller: CatalogController = Depends(get_controller)) -> DebugStore:
    """
    Debug endpoint to check what the store currently holds.
    Visit: http://127.0.0.1:8000/api/catalog/debug/store
    """
    items = controller.store.list_items()
    return DebugStore(status=controller.status, count=len(items), sample=items[:5])

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

from messvote.api.deps import AppContext, get_context, require_admin
from messvote.api.uploads import read_image
from messvote.utilities.validators import MenuItemUpdateInput

router = APIRouter(prefix="/api/menu", tags=["menu"])


@router.get("")
def list_menu(meal_type: Optional[str] = Query(default=None), active_only: bool = Query(default=False),
              ctx: AppContext = Depends(get_context)):
    items = ctx.catalog.list_items(meal_type, active_only=active_only)
    return {"items": [i.to_public() for i in items]}


@router.post("/recount")
def recount(ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    """Rebuild the advisory vote counters from the stored votes."""
    return ctx.engine.recount_counters()


@router.get("/{item_id}")
def get_menu_item(item_id: str, ctx: AppContext = Depends(get_context)):
    return ctx.catalog.get_item(item_id).to_public()


@router.post("")
async def create_menu_item(
    name: str = Form(...),
    meal_type: str = Form(...),
    description: str = Form(""),
    is_active: bool = Form(True),
    image: UploadFile = File(None),
    ctx: AppContext = Depends(get_context),
    admin: str = Depends(require_admin),
):
    upload = await read_image(image)
    item = await run_in_threadpool(ctx.catalog.create_item, name, meal_type, description, image=upload,
                                   is_active=is_active)
    return JSONResponse(status_code=201, content=item.to_public())


@router.patch("/{item_id}")
def update_menu_item(item_id: str, payload: MenuItemUpdateInput, ctx: AppContext = Depends(get_context),
                     admin: str = Depends(require_admin)):
    item = ctx.catalog.update_item(item_id, **payload.model_dump(exclude_none=True))
    return item.to_public()


@router.post("/{item_id}/image")
async def replace_menu_image(item_id: str, image: UploadFile = File(...), ctx: AppContext = Depends(get_context),
                             admin: str = Depends(require_admin)):
    upload = await read_image(image)
    if upload is None:
        return JSONResponse(status_code=400, content={"error": "No image received", "code": "ValidationError"})
    item = await run_in_threadpool(ctx.catalog.update_item, item_id, image=upload)
    return item.to_public()


@router.post("/{item_id}/deactivate")
def deactivate_menu_item(item_id: str, ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    return ctx.catalog.deactivate_or_delete_item(item_id).to_public()


@router.post("/{item_id}/activate")
def activate_menu_item(item_id: str, ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    return ctx.catalog.set_active(item_id, True).to_public()


@router.delete("/{item_id}")
def delete_menu_item(item_id: str, ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    ctx.catalog.delete_item(item_id)
    return {"deleted": item_id}

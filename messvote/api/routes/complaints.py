from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse, Response
from fastapi.concurrency import run_in_threadpool

from messvote.api.deps import AppContext, get_context, require_admin
from messvote.api.uploads import parse_form, read_image
from messvote.utilities.validators import ComplaintInput, ComplaintStatusInput

router = APIRouter(prefix="/api/complaints", tags=["complaints"])


@router.post("")
async def submit_complaint(
    name: str = Form(""),
    room_number: str = Form(""),
    category: str = Form(""),
    urgency: str = Form(""),
    text: str = Form(""),
    photo: UploadFile = File(None),
    ctx: AppContext = Depends(get_context),
):
    data = parse_form(ComplaintInput, name=name, room_number=room_number or None, category=category,
                      urgency=urgency, text=text)
    upload = await read_image(photo)
    complaint = await run_in_threadpool(ctx.complaints.submit, data.name, data.room_number, data.category,
                                        data.text, data.urgency, photo=upload)
    return JSONResponse(status_code=201, content=complaint.to_public())


@router.get("")
def list_complaints(filter: str = Query(default="all"), ctx: AppContext = Depends(get_context),
                    admin: str = Depends(require_admin)):
    return {"complaints": [c.to_public() for c in ctx.complaints.list_complaints(filter)]}


@router.get("/mine")
def my_complaints(name: str = Query(...), ctx: AppContext = Depends(get_context)):
    return {"complaints": [c.to_public() for c in ctx.complaints.complaints_for_student(name)]}


@router.get("/stats")
def complaint_stats(ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    return ctx.complaints.stats()


@router.get("/export")
def export_complaints(filter: str = Query(default="all"), ctx: AppContext = Depends(get_context),
                      admin: str = Depends(require_admin)):
    content, filename = ctx.complaints.export_csv(filter)
    return Response(content=content, media_type="text/csv",
                    headers={"Content-Disposition": f'attachment; filename="{filename}"'})


@router.post("/bulk-resolve")
def bulk_resolve(ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    return {"resolved": ctx.complaints.bulk_resolve()}


@router.patch("/{complaint_id}")
def update_complaint(complaint_id: str, payload: ComplaintStatusInput, ctx: AppContext = Depends(get_context),
                     admin: str = Depends(require_admin)):
    return ctx.complaints.update_status(complaint_id, payload.status, payload.response).to_public()


@router.delete("/{complaint_id}")
def delete_complaint(complaint_id: str, ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    ctx.complaints.delete(complaint_id)
    return {"deleted": complaint_id}

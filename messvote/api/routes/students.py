from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from messvote.api.deps import AppContext, get_context, require_admin
from messvote.utilities.validators import LoginInput, StudentInput

router = APIRouter(tags=["students"])


@router.post("/api/auth/login")
def login(payload: LoginInput, ctx: AppContext = Depends(get_context)):
    student = ctx.students.login(payload.name, payload.student_id)
    return {"name": student.name, "student_id": student.student_id}


@router.get("/api/auth/admin")
def admin_check(admin: str = Depends(require_admin)):
    return {"admin": admin}


@router.get("/api/students")
def list_students(ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    return {"students": [s.to_dict() for s in ctx.students.list_students()]}


@router.post("/api/students")
def register_student(payload: StudentInput, ctx: AppContext = Depends(get_context),
                     admin: str = Depends(require_admin)):
    student = ctx.students.register_student(payload.name, payload.student_id)
    return JSONResponse(status_code=201, content=student.to_dict())


@router.delete("/api/students/{student_id}")
def delete_student(student_id: str, ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    ctx.students.delete_student(student_id)
    return {"deleted": student_id}

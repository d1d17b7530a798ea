from typing import Optional

from fastapi import APIRouter, Depends, Query

from messvote.api.deps import AppContext, get_context, require_student
from messvote.domain.Student import Student
from messvote.utilities.validators import VoteInput

router = APIRouter(prefix="/api/votes", tags=["votes"])


@router.post("")
def submit_vote(payload: VoteInput, student: Student = Depends(require_student),
                ctx: AppContext = Depends(get_context)):
    outcome = ctx.engine.submit_vote(student.student_id, payload.meal_type, payload.item_id)
    # Re-read only after the write has committed
    outcome["results"] = ctx.results.meal_results(outcome["vote"]["date"], payload.meal_type)
    return outcome


@router.get("/me")
def my_votes(day: Optional[str] = Query(default=None), student: Student = Depends(require_student),
             ctx: AppContext = Depends(get_context)):
    return {"student_id": student.student_id, "votes": ctx.students.votes_for_student(student.student_id, day)}

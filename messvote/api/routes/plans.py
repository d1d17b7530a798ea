import json
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import StreamingResponse

from messvote.api.deps import AppContext, get_context, require_admin
from messvote.events.plan_subscriptions import PlanSubscription
from messvote.utilities.config import SUBSCRIPTION_KEEPALIVE_SECONDS
from messvote.utilities.constants import MEAL_TYPES
from messvote.utilities.errors import NotFound, ValidationError
from messvote.utilities.validators import PlanInput, PlanItemInput

router = APIRouter(prefix="/api/plans", tags=["plans"])


@router.get("")
def list_plans(start: Optional[str] = Query(default=None), end: Optional[str] = Query(default=None),
               ctx: AppContext = Depends(get_context)):
    return {"plans": [p.to_dict() for p in ctx.planner.list_plans(start, end)]}


@router.get("/upcoming")
def upcoming_plans(ctx: AppContext = Depends(get_context)):
    """The rolling calendar the admin plans against (menu cycle days from today)."""
    return {"days": ctx.planner.upcoming()}


def _plan_events(ctx: AppContext, sub: PlanSubscription):
    try:
        while not sub.closed:
            snapshot = sub.next(timeout=SUBSCRIPTION_KEEPALIVE_SECONDS)
            if snapshot is None:
                if sub.closed:
                    break
                yield ": keepalive\n\n"
                continue
            yield f"event: plans\ndata: {json.dumps(snapshot)}\n\n"
    finally:
        ctx.subscriptions.release(sub)


@router.get("/stream")
def stream_plans(x_session_id: Optional[str] = Header(default=None), session_id: Optional[str] = Query(default=None),
                 ctx: AppContext = Depends(get_context)):
    """Server-sent events: the full plan set now and after every change."""
    sid = x_session_id or session_id
    if not sid:
        raise ValidationError("A session id is required to subscribe")
    sub = ctx.subscriptions.open(sid)
    return StreamingResponse(_plan_events(ctx, sub), media_type="text/event-stream")


@router.delete("/stream/{session_id}")
def unsubscribe_plans(session_id: str, ctx: AppContext = Depends(get_context)):
    return {"closed": ctx.subscriptions.close(session_id)}


@router.get("/{day}")
def get_plan(day: str, ctx: AppContext = Depends(get_context)):
    plan = ctx.planner.get_plan(day)
    if plan is None:
        raise NotFound(f"No plan for {day}")
    return plan.to_dict()


@router.get("/{day}/votable")
def votable_items(day: str, meal_type: Optional[str] = Query(default=None), ctx: AppContext = Depends(get_context)):
    meals = [meal_type] if meal_type else list(MEAL_TYPES)
    return {meal: [e.to_dict() for e in ctx.planner.votable_items(day, meal)] for meal in meals}


@router.put("/{day}")
def save_plan(day: str, payload: PlanInput, ctx: AppContext = Depends(get_context),
              admin: str = Depends(require_admin)):
    return ctx.planner.save_plan(day, payload.as_mapping()).to_dict()


@router.delete("/{day}")
def clear_plan(day: str, ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    return {"cleared": ctx.planner.clear_plan(day)}


@router.post("/{day}/{meal_type}/items")
def add_plan_item(day: str, meal_type: str, payload: PlanItemInput, ctx: AppContext = Depends(get_context),
                  admin: str = Depends(require_admin)):
    return ctx.planner.add_item_to_plan(day, meal_type, payload.item_id).to_dict()


@router.delete("/{day}/{meal_type}/items/{item_id}")
def remove_plan_item(day: str, meal_type: str, item_id: str, ctx: AppContext = Depends(get_context),
                     admin: str = Depends(require_admin)):
    plan = ctx.planner.remove_item_from_plan(day, meal_type, item_id)
    return plan.to_dict() if plan else {"date": day, "plan": None}

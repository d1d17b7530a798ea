from typing import Optional

from fastapi import APIRouter, Depends, Query

from messvote.api.deps import AppContext, get_context, require_admin
from messvote.logic.reporting.dashboard import build_dashboard

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard")
def dashboard(ctx: AppContext = Depends(get_context), admin: str = Depends(require_admin)):
    return build_dashboard(ctx.student_repo, ctx.vote_repo, ctx.complaint_repo, ctx.clock)


@router.get("/events")
def events(since: Optional[int] = Query(default=None), ctx: AppContext = Depends(get_context)):
    """Recent plan, settings and vote events; poll with since=next_cursor."""
    return ctx.feed.get_events(since)

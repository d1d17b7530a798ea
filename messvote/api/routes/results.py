from typing import Optional

from fastapi import APIRouter, Depends, Query

from messvote.api.deps import AppContext, get_context
from messvote.logic.voting.window import voting_status
from messvote.utilities.config import RESULTS_POLL_SECONDS, SETTINGS_POLL_SECONDS

router = APIRouter(prefix="/api", tags=["results"])


@router.get("/results")
def results(day: Optional[str] = Query(default=None), ctx: AppContext = Depends(get_context)):
    return ctx.results.results_for_day(day)


@router.get("/status")
def status(ctx: AppContext = Depends(get_context)):
    """Window state plus how often clients should poll results and settings."""
    data = voting_status(ctx.clock(), ctx.settings.get_window())
    data["poll"] = {"results_seconds": RESULTS_POLL_SECONDS, "settings_seconds": SETTINGS_POLL_SECONDS}
    return data

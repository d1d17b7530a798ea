from fastapi import APIRouter, Depends

from messvote.api.deps import AppContext, get_context, require_admin
from messvote.utilities.validators import SettingsInput

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("")
def get_settings(ctx: AppContext = Depends(get_context)):
    return ctx.settings.get_window().to_dict()


@router.put("")
def save_settings(payload: SettingsInput, ctx: AppContext = Depends(get_context),
                  admin: str = Depends(require_admin)):
    window = ctx.settings.save_window(payload.voting_start_time, payload.voting_end_time, payload.menu_cycle_days)
    return window.to_dict()

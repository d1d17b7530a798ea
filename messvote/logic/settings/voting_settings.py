"""Process-wide voting window configuration."""
import logging
from typing import Optional

from messvote.domain.VotingWindow import VotingWindow
from messvote.events.Event_Bus import EventBus
from messvote.events.event_helpers import publish_settings_changed
from messvote.infra.Settings_Repository import SettingsRepository

logger = logging.getLogger(__name__)


class VotingSettings:
    def __init__(self, repo: SettingsRepository, bus: EventBus):
        self.repo = repo
        self.bus = bus

    def get_window(self) -> VotingWindow:
        """Stored settings merged over the configured defaults."""
        return self.repo.get_window()

    def save_window(self, start_time: Optional[str] = None, end_time: Optional[str] = None,
                    menu_cycle_days: Optional[int] = None) -> VotingWindow:
        current = self.get_window()
        window = VotingWindow(
            start_time=start_time or current.start_time,
            end_time=end_time or current.end_time,
            menu_cycle_days=menu_cycle_days if menu_cycle_days is not None else current.menu_cycle_days,
        )
        if window.is_degenerate:
            logger.warning(f"Voting window {window.start_time}-{window.end_time} starts after it ends; voting will stay closed")
        self.repo.save_window(window)
        logger.info(f"Voting window saved: {window}")
        publish_settings_changed(self.bus, window.to_dict())
        return window

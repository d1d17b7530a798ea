from messvote.domain.VotingWindow import VotingWindow
from messvote.infra.Document_Store import JsonDocumentStore
from messvote.utilities.constants import SETTINGS, SYSTEM_SETTINGS_KEY


class SettingsRepository:
    """The single settings/system document."""

    def __init__(self, store: JsonDocumentStore):
        self.store = store

    def get_window(self) -> VotingWindow:
        return VotingWindow.from_dict(self.store.get(SETTINGS, SYSTEM_SETTINGS_KEY))

    def save_window(self, window: VotingWindow) -> None:
        self.store.set(SETTINGS, SYSTEM_SETTINGS_KEY, window.to_dict())

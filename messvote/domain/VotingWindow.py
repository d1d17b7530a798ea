"""VotingWindow: process-wide daily voting hours and the planning cycle length."""
import re

from messvote.utilities.config import DEFAULT_VOTING_START, DEFAULT_VOTING_END, DEFAULT_MENU_CYCLE_DAYS
from messvote.utilities.constants import (
    TIME_OF_DAY_PATTERN, MIN_MENU_CYCLE_DAYS, MAX_MENU_CYCLE_DAYS,
)
from messvote.utilities.errors import ValidationError

_TIME_RE = re.compile(TIME_OF_DAY_PATTERN)


def parse_time_of_day(value: str) -> int:
    """'HH:MM' -> minutes since midnight."""
    if not isinstance(value, str) or not _TIME_RE.match(value):
        raise ValidationError(f"Invalid time '{value}'. Expected HH:MM")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class VotingWindow:
    def __init__(self, start_time: str = DEFAULT_VOTING_START, end_time: str = DEFAULT_VOTING_END,
                 menu_cycle_days: int = DEFAULT_MENU_CYCLE_DAYS):
        # Parse eagerly so a bad value never reaches the store
        self.start_minutes = parse_time_of_day(start_time)
        self.end_minutes = parse_time_of_day(end_time)
        if not (MIN_MENU_CYCLE_DAYS <= int(menu_cycle_days) <= MAX_MENU_CYCLE_DAYS):
            raise ValidationError(
                f"Menu cycle must be between {MIN_MENU_CYCLE_DAYS} and {MAX_MENU_CYCLE_DAYS} days")
        self.start_time = start_time
        self.end_time = end_time
        self.menu_cycle_days = int(menu_cycle_days)

    @property
    def is_degenerate(self) -> bool:
        """start after end: the window never opens."""
        return self.start_minutes > self.end_minutes

    def __repr__(self) -> str:
        return f"VotingWindow({self.start_time}-{self.end_time}, cycle={self.menu_cycle_days})"

    def __eq__(self, other):
        return isinstance(other, VotingWindow) and self.to_dict() == other.to_dict()

    @staticmethod
    def from_dict(data):
        '''Stored values override the configured defaults key by key.'''
        d = dict(data) if isinstance(data, dict) else {}
        return VotingWindow(
            start_time=d.get("voting_start_time") or DEFAULT_VOTING_START,
            end_time=d.get("voting_end_time") or DEFAULT_VOTING_END,
            menu_cycle_days=d.get("menu_cycle_days") or DEFAULT_MENU_CYCLE_DAYS,
        )

    def to_dict(self):
        return {
            "voting_start_time": self.start_time,
            "voting_end_time": self.end_time,
            "menu_cycle_days": self.menu_cycle_days,
        }

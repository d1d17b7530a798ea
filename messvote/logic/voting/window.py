"""Voting window rules.

Pure functions of a wall-clock time and a VotingWindow: no state, no I/O.
The window is same-day and inclusive at both ends; a window whose start is
after its end never opens.
"""
from datetime import date, datetime
from typing import Dict

from messvote.domain.VotingWindow import VotingWindow


def minutes_of(now: datetime) -> int:
    return now.hour * 60 + now.minute


def is_voting_open(now: datetime, window: VotingWindow) -> bool:
    return window.start_minutes <= minutes_of(now) <= window.end_minutes


def time_remaining(now: datetime, window: VotingWindow) -> Dict[str, int]:
    """Hours/minutes/seconds until HH:MM:00 of the window end; zeros once past it."""
    end = now.replace(hour=window.end_minutes // 60, minute=window.end_minutes % 60, second=0, microsecond=0)
    remaining = int((end - now).total_seconds())
    if remaining <= 0 or window.is_degenerate:
        return {"hours": 0, "minutes": 0, "seconds": 0}
    return {"hours": remaining // 3600, "minutes": (remaining % 3600) // 60, "seconds": remaining % 60}


def window_elapsed(day: date, now: datetime, window: VotingWindow) -> bool:
    """True once voting for `day` can no longer happen."""
    today = now.date()
    if day < today:
        return True
    if day > today:
        return False
    return minutes_of(now) > window.end_minutes or window.is_degenerate


def voting_status(now: datetime, window: VotingWindow) -> Dict:
    return {
        "is_open": is_voting_open(now, window),
        "time_remaining": time_remaining(now, window),
        "voting_start_time": window.start_time,
        "voting_end_time": window.end_time,
        "now": now.isoformat(),
        "date": now.date().isoformat(),
    }

"""Vote domain entity: one choice per (student, day, meal type)."""
from datetime import date, datetime
from typing import NamedTuple, Optional

from messvote.utilities.clock import format_day, from_iso, parse_day, to_iso
from messvote.utilities.constants import SKIP_CHOICE


class VoteKey(NamedTuple):
    """Composite identity of a vote. Stored as a tuple, never as a joined string."""
    student_id: str
    day: str
    meal_type: str


class Vote:
    def __init__(self, student_id: str, day: date, meal_type: str, item_id: str,
                 timestamp: Optional[datetime] = None):
        self.student_id = student_id
        self.day = day
        self.meal_type = meal_type
        self.item_id = item_id
        self.timestamp = timestamp

    @property
    def key(self) -> VoteKey:
        return VoteKey(self.student_id, format_day(self.day), self.meal_type)

    @property
    def is_skip(self) -> bool:
        return self.item_id == SKIP_CHOICE

    def __repr__(self) -> str:
        return f"Vote({self.student_id}, {format_day(self.day)}, {self.meal_type} -> {self.item_id})"

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Vote(
            student_id=str(d.get("student_id", "")),
            day=parse_day(d.get("date")),
            meal_type=d.get("meal_type", ""),
            item_id=d.get("item_id", ""),
            timestamp=from_iso(d.get("timestamp")),
        )

    def to_dict(self):
        return {
            "student_id": self.student_id,
            "meal_type": self.meal_type,
            "item_id": self.item_id,
            "date": format_day(self.day),
            "timestamp": to_iso(self.timestamp),
        }

"""Student domain entity: a registered resident allowed to vote."""
from datetime import datetime
from typing import Optional

from messvote.utilities.clock import from_iso, to_iso


class Student:
    def __init__(self, student_id: str, name: str, total_votes: int = 0, last_vote: Optional[datetime] = None,
                 last_login: Optional[datetime] = None, created_at: Optional[datetime] = None):
        self.student_id = student_id
        self.name = name
        self.total_votes = total_votes
        self.last_vote = last_vote
        self.last_login = last_login
        self.created_at = created_at

    def matches_name(self, name: str) -> bool:
        return self.name.strip().lower() == (name or "").strip().lower()

    def __repr__(self) -> str:
        return f"Student({self.student_id}, {self.name!r})"

    @staticmethod
    def from_dict(data, student_id: str = ""):
        d = dict(data) if isinstance(data, dict) else {}
        return Student(
            student_id=student_id or str(d.get("student_id", "")),
            name=d.get("name", ""),
            total_votes=int(d.get("total_votes") or 0),
            last_vote=from_iso(d.get("last_vote")),
            last_login=from_iso(d.get("last_login")),
            created_at=from_iso(d.get("created_at")),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "student_id": self.student_id,
            "total_votes": self.total_votes,
            "last_vote": to_iso(self.last_vote),
            "last_login": to_iso(self.last_login),
            "created_at": to_iso(self.created_at),
        }

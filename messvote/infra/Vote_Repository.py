"""Votes keyed by the (student_id, day, meal_type) tuple."""
from datetime import date
from typing import List, Optional

from messvote.domain.Vote import Vote, VoteKey
from messvote.infra.Document_Store import JsonDocumentStore
from messvote.utilities.clock import format_day
from messvote.utilities.constants import VOTES


class VoteRepository:
    def __init__(self, store: JsonDocumentStore):
        self.store = store

    def get(self, key: VoteKey) -> Optional[Vote]:
        doc = self.store.get(VOTES, tuple(key))
        return Vote.from_dict(doc) if doc is not None else None

    def upsert(self, vote: Vote) -> None:
        """Last writer wins for the key."""
        self.store.set(VOTES, tuple(vote.key), vote.to_dict())

    def votes_for_day(self, day: date) -> List[Vote]:
        """Every vote cast for `day`, all meal types together."""
        rows = self.store.query(VOTES, where={"date": format_day(day)}, order_by="timestamp")
        return [Vote.from_dict(doc) for _, doc in rows]

    def votes_for_student(self, student_id: str, day: Optional[date] = None) -> List[Vote]:
        where = {"student_id": student_id}
        if day is not None:
            where["date"] = format_day(day)
        return [Vote.from_dict(doc) for _, doc in self.store.query(VOTES, where=where, order_by="timestamp")]

    def all_votes(self) -> List[Vote]:
        return [Vote.from_dict(doc) for _, doc in self.store.query(VOTES)]

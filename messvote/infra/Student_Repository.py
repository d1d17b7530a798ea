from typing import List, Optional

from messvote.domain.Student import Student
from messvote.infra.Document_Store import Increment, JsonDocumentStore
from messvote.utilities.clock import to_iso
from messvote.utilities.constants import USERS


class StudentRepository:
    def __init__(self, store: JsonDocumentStore):
        self.store = store

    def get(self, student_id: str) -> Optional[Student]:
        doc = self.store.get(USERS, student_id)
        return Student.from_dict(doc, student_id) if doc is not None else None

    def exists(self, student_id: str) -> bool:
        return self.store.exists(USERS, student_id)

    def save(self, student: Student) -> None:
        self.store.set(USERS, student.student_id, student.to_dict())

    def touch_login(self, student_id: str, when) -> None:
        self.store.update(USERS, student_id, {"last_login": to_iso(when)})

    def record_vote(self, student_id: str, when, amount: int = 1) -> None:
        changes = {"last_vote": to_iso(when)}
        if amount:
            changes["total_votes"] = Increment(amount)
        self.store.update(USERS, student_id, changes)

    def set_total_votes(self, student_id: str, total: int) -> None:
        self.store.update(USERS, student_id, {"total_votes": total})

    def delete(self, student_id: str) -> bool:
        return self.store.delete(USERS, student_id)

    def list_students(self) -> List[Student]:
        rows = self.store.query(USERS, order_by="created_at", descending=True)
        return [Student.from_dict(doc, key[0]) for key, doc in rows]

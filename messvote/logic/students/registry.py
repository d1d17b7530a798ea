"""Student registry: admin-managed residents and the name + id login lookup.

Login is a plain lookup against the users collection, not an authentication
scheme.
"""
import logging
import re
from datetime import datetime
from typing import Callable, Dict, List

from messvote.domain.Student import Student
from messvote.infra.Student_Repository import StudentRepository
from messvote.infra.Vote_Repository import VoteRepository
from messvote.utilities.clock import parse_day
from messvote.utilities.constants import STUDENT_ID_PATTERN
from messvote.utilities.errors import DuplicateRegistration, NotAuthenticated, NotFound, ValidationError
from messvote.utilities.validators import sanitize_input

logger = logging.getLogger(__name__)

_STUDENT_ID_RE = re.compile(STUDENT_ID_PATTERN)


def _check_fields(name: str, student_id: str):
    if not (name or "").strip() or not (student_id or "").strip():
        raise ValidationError("Please fill in all fields")
    if not _STUDENT_ID_RE.match(student_id.strip()):
        raise ValidationError("Student ID must be 1-10 digits only")


class StudentRegistry:
    def __init__(self, repo: StudentRepository, votes: VoteRepository, clock: Callable[[], datetime]):
        self.repo = repo
        self.votes = votes
        self.clock = clock

    def register_student(self, name: str, student_id: str) -> Student:
        _check_fields(name, student_id)
        student_id = student_id.strip()
        if self.repo.exists(student_id):
            raise DuplicateRegistration(details={"student_id": student_id})
        student = Student(student_id, sanitize_input(name.strip()), created_at=self.clock())
        self.repo.save(student)
        logger.info(f"Student registered: {student_id}")
        return student

    def login(self, name: str, student_id: str) -> Student:
        _check_fields(name, student_id)
        student = self.repo.get(student_id.strip())
        if student is None:
            raise NotAuthenticated("Student ID not found. Please contact admin to register first.")
        if not student.matches_name(sanitize_input(name.strip())):
            raise NotAuthenticated("Name does not match registered student ID")
        now = self.clock()
        self.repo.touch_login(student.student_id, now)
        student.last_login = now
        return student

    def get_student(self, student_id: str) -> Student:
        student = self.repo.get(student_id)
        if student is None:
            raise NotFound(f"Student '{student_id}' not found")
        return student

    def delete_student(self, student_id: str) -> None:
        if not self.repo.delete(student_id):
            raise NotFound(f"Student '{student_id}' not found")
        logger.info(f"Student deleted: {student_id}")

    def list_students(self) -> List[Student]:
        return self.repo.list_students()

    def votes_for_student(self, student_id: str, day=None) -> Dict[str, str]:
        """meal_type -> chosen item id for the day (today by default)."""
        day = parse_day(day) if day is not None else self.clock().date()
        return {v.meal_type: v.item_id for v in self.votes.votes_for_student(student_id, day)}

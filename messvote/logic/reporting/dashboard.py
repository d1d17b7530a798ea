"""Admin dashboard tallies."""
from datetime import datetime
from typing import Callable, Dict

from messvote.infra.Complaint_Repository import ComplaintRepository
from messvote.infra.Student_Repository import StudentRepository
from messvote.infra.Vote_Repository import VoteRepository
from messvote.utilities.clock import format_day
from messvote.utilities.constants import COMPLAINT_PENDING, MEAL_TYPES


def build_dashboard(students: StudentRepository, votes: VoteRepository, complaints: ComplaintRepository,
                    clock: Callable[[], datetime]) -> Dict:
    today = clock().date()
    today_votes = votes.votes_for_day(today)
    all_complaints = complaints.list_complaints()
    per_meal = {meal: 0 for meal in MEAL_TYPES}
    for v in today_votes:
        if v.meal_type in per_meal:
            per_meal[v.meal_type] += 1
    return {
        "date": format_day(today),
        "registered_students": len(students.list_students()),
        "students_voted_today": len({v.student_id for v in today_votes}),
        "votes_today": per_meal,
        "pending_complaints": sum(1 for c in all_complaints if c.status == COMPLAINT_PENDING),
        "total_complaints": len(all_complaints),
    }

"""Vote engine.

One vote per (student, day, meal type). Re-voting overwrites the stored
choice; the denormalized counters (student total_votes, item vote_count)
move with it inside the same store batch so they mirror the vote set:
  - total_votes counts distinct keys, so only a first vote bumps it
  - vote_count moves from the previous item to the new one
  - resubmitting the same choice writes nothing
`recount_counters` rebuilds both from the votes if they ever drift.

Transient store failures are retried a bounded number of times with a
linear backoff; other errors propagate immediately.
"""
import logging
import time
from collections import Counter
from datetime import datetime
from typing import Callable, Dict, Optional

from messvote.domain.Vote import Vote
from messvote.events.Event_Bus import EventBus
from messvote.events.event_helpers import publish_vote_recorded
from messvote.infra.Document_Store import JsonDocumentStore
from messvote.infra.Menu_Repository import MenuRepository
from messvote.infra.Student_Repository import StudentRepository
from messvote.infra.Vote_Repository import VoteRepository
from messvote.logic.planning.planner import MenuPlanner
from messvote.logic.settings.voting_settings import VotingSettings
from messvote.logic.voting.window import is_voting_open
from messvote.utilities.clock import format_day, parse_day
from messvote.utilities.config import VOTE_RETRY_ATTEMPTS, VOTE_RETRY_BACKOFF_SECONDS
from messvote.utilities.constants import SKIP_CHOICE
from messvote.utilities.errors import InvalidChoice, NotAuthenticated, TransientStoreError, VotingClosed
from messvote.utilities.validators import validate_meal_type

logger = logging.getLogger(__name__)


class VotingEngine:
    def __init__(self, store: JsonDocumentStore, votes: VoteRepository, students: StudentRepository,
                 menu: MenuRepository, planner: MenuPlanner, settings: VotingSettings, bus: EventBus,
                 clock: Callable[[], datetime], retry_attempts: int = VOTE_RETRY_ATTEMPTS,
                 retry_backoff: float = VOTE_RETRY_BACKOFF_SECONDS, sleep: Callable[[float], None] = time.sleep):
        self.store = store
        self.votes = votes
        self.students = students
        self.menu = menu
        self.planner = planner
        self.settings = settings
        self.bus = bus
        self.clock = clock
        self.retry_attempts = max(1, retry_attempts)
        self.retry_backoff = retry_backoff
        self.sleep = sleep

    def submit_vote(self, student_id: Optional[str], meal_type: str, item_id: str, day=None) -> Dict:
        """Record `student_id`'s choice for `meal_type` today.

        Raises NotAuthenticated for an unknown student, VotingClosed outside
        the window (or for any day other than today) and InvalidChoice when
        a non-skip item is not votable for that day and meal.
        """
        if not student_id or self.students.get(student_id) is None:
            raise NotAuthenticated()
        validate_meal_type(meal_type)

        now = self.clock()
        if not is_voting_open(now, self.settings.get_window()):
            raise VotingClosed()
        day = parse_day(day) if day is not None else now.date()
        if day != now.date():
            raise VotingClosed("Voting is only open for today's menu")

        if item_id != SKIP_CHOICE and item_id not in self.planner.votable_ids(day, meal_type):
            raise InvalidChoice(f"'{item_id}' is not on the {meal_type} menu for {format_day(day)}",
                                details={"meal_type": meal_type, "item_id": item_id})

        vote = Vote(student_id, day, meal_type, item_id, timestamp=now)
        # Later attempts reuse what the first one read as the prior vote
        seen: Dict[str, Optional[Vote]] = {}
        previous = self._with_retry(lambda: self._apply(vote, seen))
        changed = previous is None or previous.item_id != item_id
        if changed:
            logger.info(f"Vote recorded: {vote!r}")
            publish_vote_recorded(self.bus, format_day(day), meal_type, changed=True)
        return {
            "vote": vote.to_dict(),
            "changed": changed,
            "previous_item_id": previous.item_id if previous else None,
        }

    def _apply(self, vote: Vote, seen: Dict[str, Optional[Vote]]) -> Optional[Vote]:
        with self.store.batch():
            if "previous" not in seen:
                seen["previous"] = self.votes.get(vote.key)
            previous = seen["previous"]
            if previous is not None and previous.item_id == vote.item_id:
                return previous
            self.votes.upsert(vote)
            self.students.record_vote(vote.student_id, vote.timestamp, amount=0 if previous else 1)
            if previous is not None and not previous.is_skip:
                self.menu.bump_vote_count(previous.item_id, -1)
            if not vote.is_skip:
                self.menu.bump_vote_count(vote.item_id, 1)
            return previous

    def _with_retry(self, operation):
        for attempt in range(1, self.retry_attempts + 1):
            try:
                return operation()
            except TransientStoreError as e:
                if attempt == self.retry_attempts:
                    logger.error(f"Vote write failed after {attempt} attempts: {e.message}")
                    raise
                logger.warning(f"Vote write attempt {attempt} failed ({e.message}); retrying")
                self.sleep(self.retry_backoff * attempt)

    def recount_counters(self) -> Dict[str, int]:
        """Rebuild item vote_count and student total_votes from the stored votes."""
        with self.store.batch():
            all_votes = self.votes.all_votes()
            per_item = Counter(v.item_id for v in all_votes if not v.is_skip)
            per_student = Counter(v.student_id for v in all_votes)
            items = self.menu.list_items()
            for item in items:
                if item.vote_count != per_item.get(item.item_id, 0):
                    self.menu.set_vote_count(item.item_id, per_item.get(item.item_id, 0))
            students = self.students.list_students()
            for student in students:
                if student.total_votes != per_student.get(student.student_id, 0):
                    self.students.set_total_votes(student.student_id, per_student.get(student.student_id, 0))
        logger.info(f"Counters recounted from {len(all_votes)} votes")
        return {"votes": len(all_votes), "items": len(items), "students": len(students)}

"""Vote aggregation and winner resolution.

Results are always recomputed from the vote set; item vote_count is never
read here. A winner is only reported once the day's voting window has
elapsed, and ties go to the lexicographically smallest item id.
"""
from collections import Counter
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from messvote.domain.Vote import Vote
from messvote.infra.Menu_Repository import MenuRepository
from messvote.infra.Vote_Repository import VoteRepository
from messvote.logic.planning.planner import MenuPlanner
from messvote.logic.settings.voting_settings import VotingSettings
from messvote.logic.voting.window import is_voting_open, window_elapsed
from messvote.utilities.clock import format_day, parse_day
from messvote.utilities.constants import MEAL_TYPES, SKIP_CHOICE
from messvote.utilities.validators import validate_meal_type

SKIP_LABEL = "Skip"


def compute_results(votes: Iterable[Vote], day, meal_type: str) -> Dict[str, int]:
    """item_id (including skip) -> count, for votes matching both day and meal type."""
    day = parse_day(day)
    return dict(Counter(v.item_id for v in votes if v.day == day and v.meal_type == meal_type))


def resolve_winner(counts: Dict[str, int], candidates: Iterable[str]) -> Optional[str]:
    """Highest count among candidates plus skip; None when none of them has a vote."""
    pool = set(candidates) | {SKIP_CHOICE}
    scored = [(counts.get(item_id, 0), item_id) for item_id in pool]
    scored = [s for s in scored if s[0] > 0]
    if not scored:
        return None
    best = max(count for count, _ in scored)
    return min(item_id for count, item_id in scored if count == best)


def summarize_results(counts: Dict[str, int], names: Dict[str, str], include: Iterable[str] = ()) -> List[Dict]:
    """Rows sorted by count (desc) then id, with a share of the meal's total.

    Ids in `include` get a row even without votes.
    """
    total = sum(counts.values())
    tallies = dict.fromkeys(include, 0)
    tallies.update(counts)
    rows = []
    for item_id, count in sorted(tallies.items(), key=lambda kv: (-kv[1], kv[0])):
        rows.append({
            "item_id": item_id,
            "name": names.get(item_id, SKIP_LABEL if item_id == SKIP_CHOICE else "Unknown item"),
            "count": count,
            "percentage": round(count * 100.0 / total, 1) if total else 0.0,
        })
    return rows


class ResultsService:
    def __init__(self, votes: VoteRepository, menu: MenuRepository, planner: MenuPlanner,
                 settings: VotingSettings, clock: Callable[[], datetime]):
        self.votes = votes
        self.menu = menu
        self.planner = planner
        self.settings = settings
        self.clock = clock

    def meal_results(self, day, meal_type: str, day_votes: Optional[List[Vote]] = None) -> Dict:
        day = parse_day(day)
        validate_meal_type(meal_type)
        now = self.clock()
        window = self.settings.get_window()
        if day_votes is None:
            day_votes = self.votes.votes_for_day(day)
        counts = compute_results(day_votes, day, meal_type)
        votable = self.planner.votable_items(day, meal_type)
        names = {e.item_id: e.name for e in votable}
        for item_id in counts:
            if item_id not in names and item_id != SKIP_CHOICE:
                item = self.menu.get(item_id)
                if item is not None:
                    names[item_id] = item.name

        winner = None
        if window_elapsed(day, now, window):
            winner_id = resolve_winner(counts, [e.item_id for e in votable])
            if winner_id is not None:
                winner = {
                    "item_id": winner_id,
                    "name": names.get(winner_id, SKIP_LABEL),
                    "count": counts[winner_id],
                }
        return {
            "meal_type": meal_type,
            "counts": counts,
            "total": sum(counts.values()),
            "items": summarize_results(counts, names, include=[e.item_id for e in votable] + [SKIP_CHOICE]),
            "winner": winner,
        }

    def results_for_day(self, day=None) -> Dict:
        """Live tallies for all meals; winners only once voting for the day is over."""
        now = self.clock()
        day = parse_day(day) if day is not None else now.date()
        window = self.settings.get_window()
        day_votes = self.votes.votes_for_day(day)
        return {
            "date": format_day(day),
            "voting_open": day == now.date() and is_voting_open(now, window),
            "window_elapsed": window_elapsed(day, now, window),
            "meals": {meal: self.meal_results(day, meal, day_votes) for meal in MEAL_TYPES},
        }

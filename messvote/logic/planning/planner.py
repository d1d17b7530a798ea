"""Daily menu plan calendar.

A plan maps each meal type of one date to an ordered list of catalog item
snapshots. `votable_items` is what the vote engine accepts for a date and
meal: the planned list when it is non-empty, otherwise every active catalog
item of that meal type.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Mapping, Optional, Union

from messvote.domain.DailyPlan import DailyPlan, PlanEntry
from messvote.events.Event_Bus import EventBus
from messvote.events.event_helpers import publish_plans_changed
from messvote.infra.Menu_Repository import MenuRepository
from messvote.infra.Plan_Repository import PlanRepository
from messvote.utilities.clock import format_day, parse_day
from messvote.utilities.constants import MEAL_TYPES, SKIP_CHOICE
from messvote.utilities.errors import DuplicatePlanItem, NotFound, ValidationError
from messvote.utilities.validators import validate_meal_type

logger = logging.getLogger(__name__)

PlanLike = Union[DailyPlan, Mapping[str, List[str]]]


class MenuPlanner:
    def __init__(self, plans: PlanRepository, menu: MenuRepository, bus: EventBus,
                 clock: Callable[[], datetime], cycle_days: Callable[[], int]):
        self.plans = plans
        self.menu = menu
        self.bus = bus
        self.clock = clock
        self.cycle_days = cycle_days

    # -------------------- reads --------------------
    def get_plan(self, day) -> Optional[DailyPlan]:
        return self.plans.get(parse_day(day))

    def list_plans(self, start=None, end=None) -> List[DailyPlan]:
        return self.plans.list_plans(parse_day(start) if start else None, parse_day(end) if end else None)

    def snapshot(self) -> List[Dict]:
        """Every stored plan as dicts, ordered by date (what subscribers receive)."""
        return [p.to_dict() for p in self.plans.list_plans()]

    def upcoming(self, today: Optional[date] = None) -> List[Dict]:
        """The rolling planning horizon: one row per day starting today."""
        start = today or self.clock().date()
        horizon = self.cycle_days()
        stored = {p.day: p for p in self.plans.list_plans(start, start + timedelta(days=horizon - 1))}
        rows = []
        for offset in range(horizon):
            day = start + timedelta(days=offset)
            plan = stored.get(day)
            rows.append({
                "date": format_day(day),
                "weekday": day.strftime("%A"),
                "is_today": offset == 0,
                "plan": plan.to_dict() if plan else None,
            })
        return rows

    def votable_items(self, day, meal_type: str) -> List[PlanEntry]:
        """Planned items for the meal (dangling ones dropped), else active catalog items."""
        validate_meal_type(meal_type)
        plan = self.plans.get(parse_day(day))
        if plan is not None and plan.entries(meal_type):
            # A plan can reference items deleted from the catalog since
            planned = [e for e in plan.entries(meal_type) if self.menu.get(e.item_id) is not None]
            if planned:
                return planned
        return [PlanEntry.from_item(i) for i in self.menu.list_items(meal_type, active_only=True)]

    def votable_ids(self, day, meal_type: str) -> List[str]:
        return [e.item_id for e in self.votable_items(day, meal_type)]

    # -------------------- writes --------------------
    def add_item_to_plan(self, day, meal_type: str, item_id: str) -> DailyPlan:
        day = parse_day(day)
        validate_meal_type(meal_type)
        entry = self._entry_for(meal_type, item_id)
        plan = self.plans.get(day) or DailyPlan(day)
        if not plan.add_item(meal_type, entry):
            raise DuplicatePlanItem(details={"date": format_day(day), "meal_type": meal_type, "item_id": item_id})
        return self._persist(plan)

    def remove_item_from_plan(self, day, meal_type: str, item_id: str) -> Optional[DailyPlan]:
        """No-op when the item (or the plan) is absent."""
        day = parse_day(day)
        validate_meal_type(meal_type)
        plan = self.plans.get(day)
        if plan is None or not plan.remove_item(meal_type, item_id):
            return plan
        return self._persist(plan)

    def save_plan(self, day, plan: PlanLike) -> DailyPlan:
        """Overwrite the date's plan. Accepts a DailyPlan or {meal_type: [item_id, ...]}."""
        day = parse_day(day)
        if isinstance(plan, DailyPlan):
            new_plan = DailyPlan(day, {m: list(plan.entries(m)) for m in MEAL_TYPES})
        else:
            unknown = set(plan) - set(MEAL_TYPES)
            if unknown:
                raise ValidationError(f"Unknown meal type(s): {', '.join(sorted(unknown))}")
            new_plan = DailyPlan(day)
            for meal_type in MEAL_TYPES:
                for item_id in plan.get(meal_type) or []:
                    if not new_plan.add_item(meal_type, self._entry_for(meal_type, item_id)):
                        raise DuplicatePlanItem(details={"meal_type": meal_type, "item_id": item_id})
        return self._persist(new_plan)

    def clear_plan(self, day) -> bool:
        day = parse_day(day)
        removed = self.plans.clear(day)
        if removed:
            logger.info(f"Plan cleared for {format_day(day)}")
            publish_plans_changed(self.bus, format_day(day), self.snapshot())
        return removed

    def _entry_for(self, meal_type: str, item_id: str) -> PlanEntry:
        if item_id == SKIP_CHOICE:
            raise ValidationError("skip cannot be planned")
        item = self.menu.get(item_id)
        if item is None:
            raise NotFound(f"Menu item '{item_id}' not found")
        if item.meal_type != meal_type:
            raise ValidationError(f"'{item.name}' is a {item.meal_type} item, not {meal_type}")
        return PlanEntry.from_item(item)

    def _persist(self, plan: DailyPlan) -> DailyPlan:
        plan.updated_at = self.clock()
        self.plans.save(plan)
        logger.debug(f"Plan saved: {plan!r}")
        publish_plans_changed(self.bus, plan.date_key, self.snapshot())
        return plan

from datetime import date
from typing import List, Optional

from messvote.domain.DailyPlan import DailyPlan
from messvote.infra.Document_Store import JsonDocumentStore
from messvote.utilities.clock import format_day
from messvote.utilities.constants import WEEKLY_MENUS


class PlanRepository:
    """Daily plans keyed by ISO date; one document per day."""

    def __init__(self, store: JsonDocumentStore):
        self.store = store

    def get(self, day: date) -> Optional[DailyPlan]:
        doc = self.store.get(WEEKLY_MENUS, format_day(day))
        return DailyPlan.from_dict(doc, day) if doc is not None else None

    def save(self, plan: DailyPlan) -> None:
        # Overwrite, never merge
        self.store.set(WEEKLY_MENUS, plan.date_key, plan.to_dict())

    def clear(self, day: date) -> bool:
        return self.store.delete(WEEKLY_MENUS, format_day(day))

    def list_plans(self, start: Optional[date] = None, end: Optional[date] = None) -> List[DailyPlan]:
        """Plans ordered by date, optionally limited to [start, end]."""
        plans = []
        for key, doc in self.store.query(WEEKLY_MENUS, order_by="date"):
            plan = DailyPlan.from_dict(doc, key[0])
            if start and plan.day < start:
                continue
            if end and plan.day > end:
                continue
            plans.append(plan)
        return plans

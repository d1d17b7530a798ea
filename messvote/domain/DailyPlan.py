"""DailyPlan domain entity: the items planned per meal type for one calendar date.

Entries are snapshots of catalog items taken when they were planned, so later
catalog edits do not rewrite an existing plan.
"""
from datetime import date, datetime
from typing import Dict, List, Optional

from messvote.utilities.clock import format_day, from_iso, parse_day, to_iso
from messvote.utilities.constants import MEAL_TYPES


class PlanEntry:
    def __init__(self, item_id: str, name: str = "", description: str = "", image_url: Optional[str] = None,
                 meal_type: str = ""):
        self.item_id = item_id
        self.name = name
        self.description = description or ""
        self.image_url = image_url
        self.meal_type = meal_type

    @staticmethod
    def from_item(item):
        return PlanEntry(item.item_id, item.name, item.description, item.image_url, item.meal_type)

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {"id": str(data)}
        return PlanEntry(
            item_id=d.get("id", ""),
            name=d.get("name", ""),
            description=d.get("description") or "",
            image_url=d.get("image_url"),
            meal_type=d.get("meal_type", ""),
        )

    def to_dict(self):
        return {
            "id": self.item_id,
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "meal_type": self.meal_type,
        }

    def __eq__(self, other):
        return isinstance(other, PlanEntry) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"PlanEntry({self.item_id!r}, {self.name!r})"


class DailyPlan:
    def __init__(self, day: date, meals: Optional[Dict[str, List[PlanEntry]]] = None,
                 updated_at: Optional[datetime] = None):
        self.day = day
        meals = meals or {}
        self.meals: Dict[str, List[PlanEntry]] = {meal: list(meals.get(meal, [])) for meal in MEAL_TYPES}
        self.updated_at = updated_at

    @property
    def date_key(self) -> str:
        return format_day(self.day)

    def entries(self, meal_type: str) -> List[PlanEntry]:
        return self.meals.get(meal_type, [])

    def item_ids(self, meal_type: str) -> List[str]:
        return [e.item_id for e in self.entries(meal_type)]

    def has_item(self, meal_type: str, item_id: str) -> bool:
        return item_id in self.item_ids(meal_type)

    def add_item(self, meal_type: str, entry: PlanEntry) -> bool:
        '''Appends the entry; returns False when already planned for that meal.'''
        if self.has_item(meal_type, entry.item_id):
            return False
        self.meals[meal_type].append(entry)
        return True

    def remove_item(self, meal_type: str, item_id: str) -> bool:
        before = len(self.meals[meal_type])
        self.meals[meal_type] = [e for e in self.meals[meal_type] if e.item_id != item_id]
        return len(self.meals[meal_type]) != before

    def is_empty(self) -> bool:
        return not any(self.meals.values())

    def __eq__(self, other):
        return (isinstance(other, DailyPlan) and self.day == other.day
                and self.to_dict(include_timestamp=False) == other.to_dict(include_timestamp=False))

    def __repr__(self) -> str:
        counts = ", ".join(f"{m}={len(self.meals[m])}" for m in MEAL_TYPES)
        return f"DailyPlan({self.date_key}: {counts})"

    @staticmethod
    def from_dict(data, day=None):
        d = dict(data) if isinstance(data, dict) else {}
        meals = {meal: [PlanEntry.from_dict(e) for e in (d.get(meal) or [])] for meal in MEAL_TYPES}
        return DailyPlan(parse_day(day or d.get("date")), meals, updated_at=from_iso(d.get("updated_at")))

    def to_dict(self, include_timestamp: bool = True):
        doc = {"date": self.date_key}
        for meal in MEAL_TYPES:
            doc[meal] = [e.to_dict() for e in self.meals[meal]]
        if include_timestamp:
            doc["updated_at"] = to_iso(self.updated_at)
        return doc

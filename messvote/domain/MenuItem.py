"""MenuItem domain entity: a reusable catalog dish for one meal type."""
from datetime import datetime
from typing import Optional

from messvote.utilities.clock import from_iso, to_iso


class MenuItem:
    def __init__(self, item_id: str = "", name: str = "", meal_type: str = "", description: str = "",
                 image_url: Optional[str] = None, is_active: bool = True, vote_count: int = 0,
                 created_at: Optional[datetime] = None, updated_at: Optional[datetime] = None):
        self.item_id = item_id
        self.name = name
        self.meal_type = meal_type
        self.description = description or ""
        self.image_url = image_url
        self.is_active = is_active
        # Advisory running tally; results are always recomputed from votes
        self.vote_count = vote_count
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"{self.name} ({self.meal_type}, {state}) - {self.vote_count} votes"

    __repr__ = __str__

    @staticmethod
    def from_dict(data, item_id: str = ""):
        '''Creates a MenuItem from a stored document. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return MenuItem(
            item_id=item_id or d.get("id", ""),
            name=d.get("name", ""),
            meal_type=d.get("meal_type", ""),
            description=d.get("description") or "",
            image_url=d.get("image_url"),
            is_active=bool(d.get("is_active", True)),
            vote_count=int(d.get("vote_count") or 0),
            created_at=from_iso(d.get("created_at")),
            updated_at=from_iso(d.get("updated_at")),
        )

    def to_dict(self):
        '''Document form used by the store (the id is the document key).'''
        return {
            "name": self.name,
            "meal_type": self.meal_type,
            "description": self.description,
            "image_url": self.image_url,
            "is_active": self.is_active,
            "vote_count": self.vote_count,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }

    def to_public(self):
        return {"id": self.item_id, **self.to_dict()}

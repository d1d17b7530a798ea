"""Menu catalog persistence on the document store."""
import uuid
from typing import List, Optional

from messvote.domain.MenuItem import MenuItem
from messvote.infra.Document_Store import Increment, JsonDocumentStore
from messvote.utilities.constants import MENU_ITEMS


class MenuRepository:
    def __init__(self, store: JsonDocumentStore):
        self.store = store

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    def get(self, item_id: str) -> Optional[MenuItem]:
        doc = self.store.get(MENU_ITEMS, item_id)
        return MenuItem.from_dict(doc, item_id) if doc is not None else None

    def save(self, item: MenuItem) -> MenuItem:
        if not item.item_id:
            item.item_id = self.new_id()
        self.store.set(MENU_ITEMS, item.item_id, item.to_dict())
        return item

    def update(self, item_id: str, changes: dict) -> MenuItem:
        return MenuItem.from_dict(self.store.update(MENU_ITEMS, item_id, changes), item_id)

    def delete(self, item_id: str) -> bool:
        return self.store.delete(MENU_ITEMS, item_id)

    def bump_vote_count(self, item_id: str, amount: int = 1) -> None:
        # Silently ignores items deleted since they were voted for
        if self.store.exists(MENU_ITEMS, item_id):
            self.store.update(MENU_ITEMS, item_id, {"vote_count": Increment(amount)})

    def set_vote_count(self, item_id: str, count: int) -> None:
        self.store.update(MENU_ITEMS, item_id, {"vote_count": count})

    def list_items(self, meal_type: Optional[str] = None, active_only: bool = False) -> List[MenuItem]:
        """Items newest first, optionally restricted to one meal type."""
        where = {"meal_type": meal_type} if meal_type else None
        if active_only:
            where = dict(where or {}, is_active=True)
        rows = self.store.query(MENU_ITEMS, where=where)
        items = [MenuItem.from_dict(doc, key[0]) for key, doc in rows]
        items.sort(key=lambda i: (i.name.lower(), i.item_id))
        # Newest first; stable sort keeps name order among equal timestamps
        items.sort(key=lambda i: i.created_at.isoformat() if i.created_at else "", reverse=True)
        return items

"""Menu catalog: reusable items per meal type.

Free text is HTML-escaped before it is stored. Removing an item tries to
remove its image too; a failed image cleanup is logged and never fails the
removal. Plans keep the snapshot they took, so catalog edits do not touch
them.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from messvote.domain.MenuItem import MenuItem
from messvote.infra.Blob_Store import LocalBlobStore
from messvote.infra.Menu_Repository import MenuRepository
from messvote.utilities.clock import to_iso
from messvote.utilities.constants import MENU_IMAGE_FOLDER
from messvote.utilities.errors import NonFatalCleanupError, NotFound, ValidationError
from messvote.utilities.validators import sanitize_input, validate_meal_type

logger = logging.getLogger(__name__)

# (filename, content)
ImageUpload = Tuple[str, bytes]


class MenuCatalog:
    def __init__(self, repo: MenuRepository, blobs: LocalBlobStore, clock: Callable[[], datetime]):
        self.repo = repo
        self.blobs = blobs
        self.clock = clock

    def get_item(self, item_id: str) -> MenuItem:
        item = self.repo.get(item_id)
        if item is None:
            raise NotFound(f"Menu item '{item_id}' not found")
        return item

    def list_items(self, meal_type: Optional[str] = None, active_only: bool = False) -> List[MenuItem]:
        if meal_type is not None:
            validate_meal_type(meal_type)
        return self.repo.list_items(meal_type, active_only=active_only)

    def create_item(self, name: str, meal_type: str, description: str = "",
                    image: Optional[ImageUpload] = None, is_active: bool = True) -> MenuItem:
        validate_meal_type(meal_type)
        if not name or not name.strip():
            raise ValidationError("Item name is required")
        now = self.clock()
        item = MenuItem(
            name=sanitize_input(name.strip()),
            meal_type=meal_type,
            description=sanitize_input((description or "").strip()),
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        if image is not None:
            item.image_url = self.blobs.upload(MENU_IMAGE_FOLDER, image[0], image[1])
        self.repo.save(item)
        logger.info(f"Menu item created: {item.item_id} ({item.meal_type})")
        return item

    def update_item(self, item_id: str, name: Optional[str] = None, meal_type: Optional[str] = None,
                    description: Optional[str] = None, is_active: Optional[bool] = None,
                    image: Optional[ImageUpload] = None) -> MenuItem:
        existing = self.get_item(item_id)
        changes = {"updated_at": to_iso(self.clock())}
        if name is not None:
            if not name.strip():
                raise ValidationError("Item name cannot be empty")
            changes["name"] = sanitize_input(name.strip())
        if meal_type is not None:
            changes["meal_type"] = validate_meal_type(meal_type)
        if description is not None:
            changes["description"] = sanitize_input(description.strip())
        if is_active is not None:
            changes["is_active"] = bool(is_active)
        if image is not None:
            changes["image_url"] = self.blobs.upload(MENU_IMAGE_FOLDER, image[0], image[1])
        item = self.repo.update(item_id, changes)
        if image is not None and existing.image_url:
            self._cleanup_image(existing.image_url)
        return item

    def set_active(self, item_id: str, active: bool) -> MenuItem:
        return self.update_item(item_id, is_active=active)

    def delete_item(self, item_id: str) -> None:
        item = self.get_item(item_id)
        self.repo.delete(item_id)
        logger.info(f"Menu item deleted: {item_id}")
        if item.image_url:
            self._cleanup_image(item.image_url)

    def deactivate_or_delete_item(self, item_id: str, hard_delete: bool = False) -> Optional[MenuItem]:
        """Deactivate by default; remove entirely when `hard_delete`."""
        if hard_delete:
            self.delete_item(item_id)
            return None
        return self.set_active(item_id, False)

    def _cleanup_image(self, url: str) -> None:
        try:
            self.blobs.delete(url)
        except NonFatalCleanupError as e:
            logger.warning(f"Image cleanup failed: {e.message}")

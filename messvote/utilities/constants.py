from typing import Final

MEAL_TYPES: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner")
SKIP_CHOICE: Final[str] = "skip"

# ISO dates are used for plan keys and vote days
DATE_FORMAT: Final[str] = "%Y-%m-%d"
TIME_OF_DAY_PATTERN: Final[str] = r'^([01]\d|2[0-3]):[0-5]\d$'
STUDENT_ID_PATTERN: Final[str] = r'^[0-9]{1,10}$'

MIN_MENU_CYCLE_DAYS: Final[int] = 1
MAX_MENU_CYCLE_DAYS: Final[int] = 14

ROOM_NUMBER_MIN: Final[int] = 1
ROOM_NUMBER_MAX: Final[int] = 200

COMPLAINT_PENDING: Final[str] = "pending"
COMPLAINT_RESOLVED: Final[str] = "resolved"
COMPLAINT_STATUSES: Final[tuple[str, ...]] = (COMPLAINT_PENDING, COMPLAINT_RESOLVED)
COMPLAINT_FILTERS: Final[tuple[str, ...]] = ("all", "pending", "resolved", "today", "yesterday", "week")
BULK_RESOLVE_RESPONSE: Final[str] = "Bulk resolved by admin"
STUDENT_COMPLAINT_LIMIT: Final[int] = 5

# Document store collections
USERS: Final[str] = "users"
MENU_ITEMS: Final[str] = "menuItems"
VOTES: Final[str] = "votes"
WEEKLY_MENUS: Final[str] = "weeklyMenus"
COMPLAINTS: Final[str] = "complaints"
SETTINGS: Final[str] = "settings"
SYSTEM_SETTINGS_KEY: Final[tuple[str, ...]] = ("system",)

# Blob store folders
MENU_IMAGE_FOLDER: Final[str] = "menu-images"
COMPLAINT_PHOTO_FOLDER: Final[str] = "complaints"

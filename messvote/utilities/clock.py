"""Wall-clock helpers shared by domain objects, repositories and the API."""
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from messvote.utilities.config import TIMEZONE
from messvote.utilities.constants import DATE_FORMAT
from messvote.utilities.errors import ValidationError


def local_now() -> datetime:
    """Current time in the configured timezone (server local time if unset)."""
    if TIMEZONE:
        return datetime.now(ZoneInfo(TIMEZONE))
    return datetime.now()


def format_day(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def parse_day(value) -> date:
    """Accept a date, a datetime or an ISO 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date '{value}'. Expected YYYY-MM-DD")


def to_iso(ts: Optional[datetime]) -> Optional[str]:
    return ts.isoformat() if ts is not None else None


def from_iso(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None

"""
Input validation schemas using Pydantic, plus the HTML escaping applied to
free text before it is stored.
"""
import html
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from messvote.utilities.errors import ValidationError as DomainValidationError
from messvote.utilities.constants import (
    MEAL_TYPES, SKIP_CHOICE, STUDENT_ID_PATTERN, TIME_OF_DAY_PATTERN,
    MIN_MENU_CYCLE_DAYS, MAX_MENU_CYCLE_DAYS, ROOM_NUMBER_MIN, ROOM_NUMBER_MAX,
    COMPLAINT_STATUSES,
)

MEAL_TYPE_PATTERN = r'^(breakfast|lunch|dinner)$'


def sanitize_input(value: Optional[str]) -> str:
    """Escape markup so stored text renders as plain text."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


class LoginInput(BaseModel):
    """Student login: registry id plus the registered name."""
    name: str = Field(..., min_length=1, max_length=100)
    student_id: str = Field(..., pattern=STUDENT_ID_PATTERN)

    @field_validator('name')
    @classmethod
    def strip_whitespace(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Please fill in all fields')
        return v


class StudentInput(LoginInput):
    """Schema for registering a student."""


class MenuItemUpdateInput(BaseModel):
    """Partial update of a catalog item."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    meal_type: Optional[str] = Field(None, pattern=MEAL_TYPE_PATTERN)
    description: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Item name cannot be empty')
        return v.strip() if v is not None else v


class VoteInput(BaseModel):
    """Schema for a vote submission."""
    meal_type: str = Field(..., pattern=MEAL_TYPE_PATTERN)
    item_id: str = Field(..., min_length=1, max_length=100)


class PlanInput(BaseModel):
    """Full plan for one date, as catalog item ids per meal."""
    breakfast: List[str] = Field(default_factory=list)
    lunch: List[str] = Field(default_factory=list)
    dinner: List[str] = Field(default_factory=list)

    def as_mapping(self) -> Dict[str, List[str]]:
        return {meal: list(getattr(self, meal)) for meal in MEAL_TYPES}


class PlanItemInput(BaseModel):
    item_id: str = Field(..., min_length=1)

    @field_validator('item_id')
    @classmethod
    def reject_skip(cls, v):
        """The skip sentinel is implicit and never planned."""
        if v == SKIP_CHOICE:
            raise ValueError('skip cannot be planned')
        return v


class SettingsInput(BaseModel):
    """Schema for the voting window settings (all fields optional)."""
    voting_start_time: Optional[str] = Field(None, pattern=TIME_OF_DAY_PATTERN)
    voting_end_time: Optional[str] = Field(None, pattern=TIME_OF_DAY_PATTERN)
    menu_cycle_days: Optional[int] = Field(None, ge=MIN_MENU_CYCLE_DAYS, le=MAX_MENU_CYCLE_DAYS)


class ComplaintStatusInput(BaseModel):
    status: str = Field(..., pattern=r'^(pending|resolved)$')
    response: Optional[str] = Field(None, max_length=2000)

    @field_validator('status')
    @classmethod
    def known_status(cls, v):
        if v not in COMPLAINT_STATUSES:
            raise ValueError(f'Unknown status: {v}')
        return v


class ComplaintInput(BaseModel):
    """Complaint form fields (photo is uploaded separately)."""
    name: str = Field(..., min_length=1, max_length=100)
    room_number: int = Field(..., ge=ROOM_NUMBER_MIN, le=ROOM_NUMBER_MAX)
    category: str = Field(..., min_length=1, max_length=50)
    urgency: str = Field(..., min_length=1, max_length=20)
    text: str = Field(..., min_length=1, max_length=2000)

    @field_validator('name', 'category', 'urgency', 'text')
    @classmethod
    def required_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Please fill in all required fields')
        return v


def validate_meal_type(meal_type: str) -> str:
    """Service-level guard for meal types arriving outside a request model."""
    if meal_type not in MEAL_TYPES:
        raise DomainValidationError(f"Unknown meal type '{meal_type}'", details={"allowed": list(MEAL_TYPES)})
    return meal_type

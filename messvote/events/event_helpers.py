"""Event helper utilities.

Helpers for publishing the service events on a context's event bus.

Quick import:
    from messvote.events.event_helpers import (
        publish_plans_changed, publish_settings_changed, publish_vote_recorded
    )
"""
from __future__ import annotations
from typing import Iterable, Optional

from .Event_Bus import EventBus, PLANS_CHANGED, SETTINGS_CHANGED, VOTES_RECORDED

__all__ = [
    'publish_plans_changed', 'publish_settings_changed', 'publish_vote_recorded',
    'PLANS_CHANGED', 'SETTINGS_CHANGED', 'VOTES_RECORDED',
]


def publish_plans_changed(bus: EventBus, changed_date: Optional[str], plans: Iterable[dict]):
    """Publish a plans.changed event carrying the full plan set.

    Payload structure:
        {
          'date': 'YYYY-MM-DD' | None,
          'plans': [ {date, breakfast, lunch, dinner, updated_at}, ... ]
        }
    """
    bus.publish(PLANS_CHANGED, {
        'date': changed_date,
        'plans': list(plans),
    })


def publish_settings_changed(bus: EventBus, window: dict):
    """Publish a settings.changed event with the new voting window."""
    bus.publish(SETTINGS_CHANGED, dict(window))


def publish_vote_recorded(bus: EventBus, day: str, meal_type: str, changed: bool):
    """Publish a votes.recorded event (no student id: results are anonymous)."""
    bus.publish(VOTES_RECORDED, {
        'date': day,
        'meal_type': meal_type,
        'changed': changed,
    })

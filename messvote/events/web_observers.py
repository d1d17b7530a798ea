"""Web-facing observers for service events.

An EventFeed subscribes to an EventBus for:
  - plans.changed
  - settings.changed
  - votes.recorded

and stores a lightweight in-memory ring buffer of recent events that the web
layer exposes at /api/events so pages can refresh results, plans and the
voting window without a full reload.

Each event is stored with an auto-increment integer id (cursor) so clients
can request only newer events (since=<last_id_seen>). The buffer is capped at
MAX_FEED_EVENTS and is per-process.
"""
from __future__ import annotations
import logging
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List

from messvote.utilities.config import MAX_FEED_EVENTS
from .Event_Bus import EventBus, PLANS_CHANGED, SETTINGS_CHANGED, VOTES_RECORDED

logger = logging.getLogger(__name__)


class EventFeed:
    def __init__(self, max_events: int = MAX_FEED_EVENTS):
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1
        self.max_events = max_events
        self._bus = None

    def _record(self, event_name: str, payload: Any):  # signature expected by EventBus
        with self._lock:
            evt = {
                'id': self._next_id,
                'type': event_name,
                'ts': datetime.now(timezone.utc).isoformat(),
            }
            # Plan snapshots are fetched separately; keep only the changed date here
            if isinstance(payload, dict):
                for k in ('date', 'meal_type', 'changed',
                          'voting_start_time', 'voting_end_time', 'menu_cycle_days'):
                    if k in payload:
                        evt[k] = payload[k]
            self._events.append(evt)
            self._next_id += 1
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]
        logger.debug("Recorded %s event #%s", event_name, evt['id'])

    def start(self, bus: EventBus):
        """Idempotent start: subscribe once per bus."""
        if self._bus is bus:
            return
        if self._bus is not None:
            self.stop()
        for name in (PLANS_CHANGED, SETTINGS_CHANGED, VOTES_RECORDED):
            bus.subscribe(name, self._record)
        self._bus = bus

    def stop(self):
        if self._bus is None:
            return
        for name in (PLANS_CHANGED, SETTINGS_CHANGED, VOTES_RECORDED):
            self._bus.unsubscribe(name, self._record)
        self._bus = None

    @property
    def started(self) -> bool:
        return self._bus is not None

    def get_events(self, since: int | None = None) -> Dict[str, Any]:
        """Return events newer than 'since' (exclusive).

        If since is None, returns the buffered events (up to max_events).
        Response includes next_cursor (largest id) so client can poll with since=next_cursor.
        """
        with self._lock:
            if since is None:
                data = list(self._events)
            else:
                data = [e for e in self._events if e['id'] > since]
            next_cursor = self._events[-1]['id'] if self._events else since or 0
        return {'events': data, 'next_cursor': next_cursor}


__all__ = ['EventFeed']

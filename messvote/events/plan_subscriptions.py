"""Push-style plan subscriptions.

A PlanSubscription yields full plan-set snapshots: the current set when it is
opened, then one snapshot per plans.changed event. Consumers decide what to
do with them (the API streams them as server-sent events).

At most one subscription is active per client session; subscribing again
with the same session id returns the subscription already open, while
`open` refuses it with StateError. Each one must be closed when the session
ends.
"""
from __future__ import annotations
import logging
import queue
from threading import Lock
from typing import Any, Callable, Dict, Iterator, List, Optional

from messvote.utilities.errors import StateError
from .Event_Bus import EventBus, PLANS_CHANGED

logger = logging.getLogger(__name__)

Snapshot = List[Dict[str, Any]]


class PlanSubscription:
    def __init__(self, session_id: str, bus: EventBus, initial: Optional[Snapshot] = None):
        self.session_id = session_id
        self._bus = bus
        self._queue: "queue.Queue[Snapshot]" = queue.Queue()
        self._closed = False
        if initial is not None:
            self._queue.put(list(initial))
        bus.subscribe(PLANS_CHANGED, self._on_plans_changed)

    def _on_plans_changed(self, event_name: str, payload: Any):
        if self._closed:
            return
        plans = payload.get('plans', []) if isinstance(payload, dict) else []
        self._queue.put(list(plans))

    @property
    def closed(self) -> bool:
        return self._closed

    def next(self, timeout: Optional[float] = None) -> Optional[Snapshot]:
        """Next snapshot, or None on timeout or once closed."""
        if self._closed and self._queue.empty():
            return None
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def pending(self) -> int:
        return self._queue.qsize()

    def snapshots(self, timeout: Optional[float] = None) -> Iterator[Snapshot]:
        while not self._closed:
            snapshot = self.next(timeout=timeout)
            if snapshot is None:
                return
            yield snapshot

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._bus.unsubscribe(PLANS_CHANGED, self._on_plans_changed)
        logger.debug("Plan subscription closed for session %s", self.session_id)


class SubscriptionManager:
    def __init__(self, bus: EventBus, snapshot_provider: Callable[[], Snapshot]):
        self._bus = bus
        self._snapshot_provider = snapshot_provider
        self._lock = Lock()
        self._active: Dict[str, PlanSubscription] = {}

    def subscribe(self, session_id: str) -> PlanSubscription:
        with self._lock:
            existing = self._active.get(session_id)
            if existing is not None and not existing.closed:
                logger.info("Session %s already subscribed to plans", session_id)
                return existing
            sub = PlanSubscription(session_id, self._bus, initial=self._snapshot_provider())
            self._active[session_id] = sub
            return sub

    def open(self, session_id: str) -> PlanSubscription:
        """Like subscribe, but raises StateError when the session already has one open."""
        with self._lock:
            existing = self._active.get(session_id)
            if existing is not None and not existing.closed:
                raise StateError("Session already subscribed to plan updates", details={"session_id": session_id})
            sub = PlanSubscription(session_id, self._bus, initial=self._snapshot_provider())
            self._active[session_id] = sub
            return sub

    def get(self, session_id: str) -> Optional[PlanSubscription]:
        with self._lock:
            return self._active.get(session_id)

    def close(self, session_id: str) -> bool:
        with self._lock:
            sub = self._active.pop(session_id, None)
        if sub is None:
            return False
        sub.close()
        return True

    def release(self, sub: PlanSubscription) -> None:
        """Close `sub`, dropping it from the session table only if it is still the active one."""
        with self._lock:
            if self._active.get(sub.session_id) is sub:
                del self._active[sub.session_id]
        sub.close()

    def close_all(self):
        with self._lock:
            subs = list(self._active.values())
            self._active.clear()
        for sub in subs:
            sub.close()

    def active_count(self) -> int:
        with self._lock:
            return sum(1 for s in self._active.values() if not s.closed)


__all__ = ['PlanSubscription', 'SubscriptionManager']

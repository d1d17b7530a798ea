"""JSON-file document store.

One file per collection under the data directory. Documents are addressed by
tuple keys which are encoded as JSON arrays, so a composite key such as
(student_id, day, meal_type) can never collide the way a delimiter-joined
string could.

Writes are serialised by a lock acquired with a timeout and every collection
file is replaced atomically (temp file + os.replace). `batch()` stages writes
to several collections and commits them together, or not at all if the block
raises. Every file is staged before any is swapped in, and a failed swap
restores the ones already replaced.
"""
import copy
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from messvote.events.Event_Bus import EventBus, STORE_CHANGED
from messvote.infra.paths import collection_file
from messvote.utilities.config import STORE_LOCK_TIMEOUT_SECONDS
from messvote.utilities.errors import NotFound, TransientStoreError

logger = logging.getLogger(__name__)

Key = Union[str, Tuple[str, ...]]


class Increment:
    """Update sentinel: add `amount` to the stored numeric field."""

    def __init__(self, amount: int = 1):
        self.amount = amount

    def apply(self, current) -> int:
        try:
            return int(current or 0) + self.amount
        except (TypeError, ValueError):
            return self.amount

    def __repr__(self) -> str:
        return f"Increment({self.amount})"


def _normalize_key(key: Key) -> Tuple[str, ...]:
    if isinstance(key, str):
        return (key,)
    return tuple(str(part) for part in key)


def _encode_key(key: Key) -> str:
    return json.dumps(list(_normalize_key(key)), ensure_ascii=False)


def _decode_key(raw: str) -> Tuple[str, ...]:
    return tuple(json.loads(raw))


class JsonDocumentStore:
    def __init__(self, data_dir: Path, lock_timeout: float = STORE_LOCK_TIMEOUT_SECONDS,
                 bus: Optional[EventBus] = None):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.lock_timeout = lock_timeout
        self.bus = bus or EventBus()
        self._lock = RLock()
        self._pending: Optional[Dict[str, Dict[str, Any]]] = None
        self._pending_events: List[Dict[str, Any]] = []

    # -------------------- locking / files --------------------
    @contextmanager
    def _locked(self):
        if not self._lock.acquire(timeout=self.lock_timeout):
            raise TransientStoreError(f"Store busy (lock not acquired within {self.lock_timeout}s)")
        try:
            yield
        finally:
            self._lock.release()

    def _path(self, collection: str) -> Path:
        return collection_file(self.data_dir, collection)

    def _read_file(self, collection: str) -> Dict[str, Any]:
        path = self._path(collection)
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f) or {}
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {path}: {e}")
            raise TransientStoreError(f"Collection '{collection}' is unreadable")
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}")
            raise TransientStoreError(f"Collection '{collection}' is unavailable")

    def _write_temp(self, collection: str, docs: Dict[str, Any]) -> str:
        fd, tmp_path = tempfile.mkstemp(dir=str(self.data_dir), prefix=f".{collection}_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(docs, tmp, indent=2, ensure_ascii=False)
        except OSError as e:
            self._discard(tmp_path)
            logger.error(f"Failed to stage {collection}: {e}")
            raise TransientStoreError(f"Collection '{collection}' could not be written")
        return tmp_path

    def _replace(self, tmp_path: str, collection: str) -> None:
        os.replace(tmp_path, str(self._path(collection)))

    @staticmethod
    def _discard(tmp_path: str) -> None:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass

    def _restore(self, originals: Dict[str, Optional[bytes]]) -> None:
        for collection, content in originals.items():
            path = self._path(collection)
            try:
                if content is None:
                    path.unlink(missing_ok=True)
                else:
                    path.write_bytes(content)
            except OSError as e:
                logger.error(f"Could not restore {path}: {e}")

    def _commit(self, pending: Dict[str, Dict[str, Any]]) -> None:
        """Stage every collection in a temp file, then swap them all in.

        A failed swap puts back the files already replaced, so either every
        collection in `pending` is written or none is.
        """
        staged: Dict[str, str] = {}
        try:
            for collection, docs in pending.items():
                staged[collection] = self._write_temp(collection, docs)
            replaced: Dict[str, Optional[bytes]] = {}
            for collection, tmp_path in staged.items():
                path = self._path(collection)
                try:
                    original = path.read_bytes() if path.exists() else None
                    self._replace(tmp_path, collection)
                except OSError as e:
                    logger.error(f"Failed to write {path}: {e}")
                    self._restore(replaced)
                    raise TransientStoreError(f"Collection '{collection}' could not be written")
                replaced[collection] = original
        finally:
            for tmp_path in staged.values():
                self._discard(tmp_path)

    def _load(self, collection: str) -> Dict[str, Any]:
        if self._pending is not None:
            if collection not in self._pending:
                self._pending[collection] = self._read_file(collection)
            return self._pending[collection]
        return self._read_file(collection)

    def _store(self, collection: str, docs: Dict[str, Any], key: Tuple[str, ...], op: str) -> None:
        event = {"collection": collection, "key": key, "op": op}
        if self._pending is not None:
            self._pending[collection] = docs
            self._pending_events.append(event)
            return
        self._commit({collection: docs})
        self._notify([event])

    def _notify(self, events: List[Dict[str, Any]]) -> None:
        for event in events:
            self.bus.publish(STORE_CHANGED, event)

    # -------------------- batch --------------------
    @contextmanager
    def batch(self):
        """Group writes; they are committed only if the block completes."""
        with self._locked():
            if self._pending is not None:
                # Nested batch joins the outer one
                yield self
                return
            self._pending = {}
            self._pending_events = []
            try:
                yield self
                self._commit(self._pending)
                events = self._pending_events
            finally:
                self._pending = None
                self._pending_events = []
        self._notify(events)

    # -------------------- documents --------------------
    def get(self, collection: str, key: Key) -> Optional[Dict[str, Any]]:
        with self._locked():
            doc = self._load(collection).get(_encode_key(key))
            return copy.deepcopy(doc) if doc is not None else None

    def exists(self, collection: str, key: Key) -> bool:
        return self.get(collection, key) is not None

    def set(self, collection: str, key: Key, data: Dict[str, Any]) -> None:
        """Create or overwrite the document."""
        with self._locked():
            docs = dict(self._load(collection))
            docs[_encode_key(key)] = copy.deepcopy(data)
            self._store(collection, docs, _normalize_key(key), "set")

    def update(self, collection: str, key: Key, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Merge `changes` into an existing document; Increment values add to the field."""
        with self._locked():
            docs = dict(self._load(collection))
            encoded = _encode_key(key)
            if encoded not in docs:
                raise NotFound(f"{collection}/{'/'.join(_normalize_key(key))} not found")
            doc = copy.deepcopy(docs[encoded])
            for field, value in changes.items():
                doc[field] = value.apply(doc.get(field)) if isinstance(value, Increment) else copy.deepcopy(value)
            docs[encoded] = doc
            self._store(collection, docs, _normalize_key(key), "update")
            return copy.deepcopy(doc)

    def delete(self, collection: str, key: Key) -> bool:
        with self._locked():
            docs = dict(self._load(collection))
            if docs.pop(_encode_key(key), None) is None:
                return False
            self._store(collection, docs, _normalize_key(key), "delete")
            return True

    def query(self, collection: str, where: Optional[Dict[str, Any]] = None, order_by: Optional[str] = None,
              descending: bool = False) -> List[Tuple[Tuple[str, ...], Dict[str, Any]]]:
        """Equality filter on fields, optional ordering (missing values sort first)."""
        with self._locked():
            docs = self._load(collection)
            rows = []
            for raw_key, doc in docs.items():
                if where and any(doc.get(f) != v for f, v in where.items()):
                    continue
                rows.append((_decode_key(raw_key), copy.deepcopy(doc)))
        if order_by:
            rows.sort(key=lambda row: (row[1].get(order_by) is not None, row[1].get(order_by) or ""),
                      reverse=descending)
        return rows

    # -------------------- change listeners --------------------
    def listen(self, collection: str, callback: Callable[[str, Tuple[str, ...], str], None]) -> Callable[[], None]:
        """Call `callback(collection, key, op)` after each committed change. Returns an unsubscribe function."""
        def _on_change(event_name, payload):
            if payload.get("collection") == collection:
                callback(collection, payload.get("key"), payload.get("op"))

        self.bus.subscribe(STORE_CHANGED, _on_change)
        return lambda: self.bus.unsubscribe(STORE_CHANGED, _on_change)

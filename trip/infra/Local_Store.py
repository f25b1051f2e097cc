"""Local durable store (file persistence).

A key/value facade over one JSON file, the on-device copy of every trip
collection. Keys for canonical collections look like ``packing_items:<trip>``;
ephemeral entries use a ``temp_``/``cache_`` prefix and are swept by
``trip.infra.retention``.
"""
import copy
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def collection_key(entity: str, trip_id: str) -> str:
    return f"{entity}:{trip_id}"


class LocalStore:
    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = RLock()
        self._data: Optional[Dict[str, Any]] = None

    # --- file helpers -------------------------------------------------------
    def _read(self) -> Dict[str, Any]:
        if self._data is not None:
            return self._data
        if not self.path.exists():
            self._data = {}
            return self._data
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self._data = data if isinstance(data, dict) else {}
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Local store {self.path} unreadable, starting empty: {e}")
            self._data = {}
        return self._data

    def _atomic_write(self, data: Dict[str, Any]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".store_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(data, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, str(self.path))
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _commit(self, data: Dict[str, Any]):
        """Write ``data`` to disk, then make it the cached state."""
        self._atomic_write(data)
        self._data = data

    # --- key/value API ----------------------------------------------------
    def load(self, key: str, default: Any = None) -> Any:
        with self._lock:
            data = self._read()
            if key not in data:
                return default
            return copy.deepcopy(data[key])

    def save(self, key: str, value: Any) -> None:
        with self._lock:
            data = dict(self._read())
            data[key] = copy.deepcopy(value)
            self._commit(data)

    def delete(self, key: str) -> bool:
        with self._lock:
            data = dict(self._read())
            if key not in data:
                return False
            del data[key]
            self._commit(data)
            return True

    def delete_many(self, keys: List[str]) -> int:
        with self._lock:
            data = dict(self._read())
            removed = [k for k in keys if k in data]
            for k in removed:
                del data[k]
            if removed:
                self._commit(data)
            return len(removed)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._read().keys())


class LocalTransport:
    """Per-entity collection access on top of a LocalStore."""

    name = 'local'

    def __init__(self, store: LocalStore):
        self.store = store

    def load(self, entity: str, trip_id: str) -> List[Any]:
        value = self.store.load(collection_key(entity, trip_id), [])
        return value if isinstance(value, list) else []

    def save(self, entity: str, trip_id: str, records: List[Any]) -> None:
        self.store.save(collection_key(entity, trip_id), list(records))
        logger.debug(f"Saved {len(records)} {entity} locally for trip {trip_id}")


__all__ = ['LocalStore', 'LocalTransport', 'collection_key']

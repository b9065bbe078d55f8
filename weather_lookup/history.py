"""
Search history.

HistoryStore keeps the recently searched place names:
- each name at most once (exact, case-sensitive match)
- most recent first
- at most `limit` entries

The durable medium sits behind a two-method KeyValueStore, so the SQLite
table can be swapped for anything that can get/set a string by key.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Dict, List, Optional, Protocol

from sqlalchemy.orm import sessionmaker

from .errors import StorageReadError
from .models import StoredValue

logger = logging.getLogger(__name__)

HISTORY_KEY = "weatherHistory"
DEFAULT_LIMIT = 5


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class SqlKeyValueStore:
    """KeyValueStore backed by the `stored_values` table."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            row = db.get(StoredValue, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            db.merge(StoredValue(key=key, value=value, updated_at=datetime.utcnow()))
            db.commit()


class MemoryKeyValueStore:
    """In-process KeyValueStore; nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class HistoryStore:
    def __init__(self, store: KeyValueStore, key: str = HISTORY_KEY, limit: int = DEFAULT_LIMIT):
        self.store = store
        self.key = key
        self.limit = limit

    def load(self) -> List[str]:
        """Persisted history, or [] when it is missing or unreadable. Never raises."""
        try:
            return self._read()
        except StorageReadError as e:
            logger.warning("Ignoring stored search history: %s", e)
            return []

    def record(self, name: str) -> List[str]:
        """Move `name` to the front, drop older copies, cap the length, persist."""
        updated = [name] + [n for n in self.load() if n != name]
        updated = updated[: self.limit]
        self._write(updated)
        return updated

    def clear(self) -> List[str]:
        self._write([])
        return []

    def _read(self) -> List[str]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageReadError(f"{self.key} is not valid JSON") from e
        if not isinstance(data, list) or not all(isinstance(n, str) for n in data):
            raise StorageReadError(f"{self.key} is not a list of strings")
        return data[: self.limit]

    def _write(self, names: List[str]) -> None:
        # One whole-value write, never a partial update.
        self.store.set(self.key, json.dumps(names))

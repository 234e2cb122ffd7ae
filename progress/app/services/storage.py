from __future__ import annotations

from typing import Callable, Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from progress.app.models import ProgressEntry


class StorageError(Exception):
    """Raised when the underlying key-value store cannot be read or written."""


class StorageQuotaExceeded(StorageError):
    pass


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store. ``quota`` caps the total characters of keys plus values."""

    def __init__(self, quota: int | None = None) -> None:
        self._items: Dict[str, str] = {}
        self.quota = quota

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota is not None:
            used = sum(len(k) + len(v) for k, v in self._items.items() if k != key)
            if used + len(key) + len(value) > self.quota:
                raise StorageQuotaExceeded(f"storing {key!r} would exceed quota of {self.quota}")
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class SqlStore:
    """Durable store on the ``progress_entries`` table; each call runs in its own transaction."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        try:
            with self._session_factory() as db:
                entry = db.get(ProgressEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to read {key!r}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            with self._session_factory() as db, db.begin():
                entry = db.get(ProgressEntry, key)
                if entry:
                    entry.value = value
                else:
                    db.add(ProgressEntry(key=key, value=value))
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to write {key!r}") from exc

    def remove(self, key: str) -> None:
        try:
            with self._session_factory() as db, db.begin():
                entry = db.get(ProgressEntry, key)
                if entry:
                    db.delete(entry)
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to remove {key!r}") from exc

"""Local staging area for in-progress study and test sessions.

Every answered word is written here first so that a reload or a closed tab does
not lose progress. The remote backend only sees a session once it is completed,
after which the caller clears the local copy.

Nothing in this module raises to its caller: storage failures are logged and
turn the operation into a no-op (or an absent result for reads).
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping, Optional

from pydantic import ValidationError

from progress.app.schemas.progress import SessionRecord, SessionType, WordProgressEntry, utcnow
from progress.app.services.storage import KeyValueStore

DEFAULT_KEY_PREFIX = "200wad"

logger = logging.getLogger("progress.cache")


class SessionProgressCache:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        prefix: str = DEFAULT_KEY_PREFIX,
        log: logging.Logger | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.prefix = prefix
        self.log = log or logger
        self.clock = clock

    def session_key(self, session_type: SessionType, session_id: str) -> str:
        return f"{self.prefix}_{SessionType(session_type).value}_session_{session_id}"

    def lesson_key(self, session_type: SessionType, lesson_id: str) -> str:
        return f"{self.prefix}_{SessionType(session_type).value}_lesson_{lesson_id}"

    def initialize(self, session_type: SessionType, session_id: str, lesson_id: str) -> None:
        """Start a fresh record; resets any progress stored under the same session id."""
        record = SessionRecord(
            session_type=session_type,
            session_id=session_id,
            lesson_id=lesson_id,
            started_at=self.clock(),
        )
        self._publish(record)

    def save(
        self,
        session_type: SessionType,
        session_id: str,
        lesson_id: str,
        current_word_index: int,
        word_progress: Mapping[str, WordProgressEntry],
    ) -> None:
        """Write a full snapshot of a session, keeping the original start time if one is stored."""
        existing = self.load(session_type, session_id)
        record = SessionRecord(
            session_type=session_type,
            session_id=session_id,
            lesson_id=lesson_id,
            started_at=existing.started_at if existing else self.clock(),
            current_word_index=current_word_index,
            word_progress=dict(word_progress),
        )
        self._publish(record)

    def record_answer(
        self,
        session_type: SessionType,
        session_id: str,
        word_id: str,
        entry: WordProgressEntry,
        current_word_index: int,
    ) -> None:
        record = self.load(session_type, session_id)
        if record is None:
            # never creates a record implicitly
            self.log.debug("record_answer: no %s session %s, skipping", session_type, session_id)
            return

        record.word_progress[word_id] = entry
        record.current_word_index = current_word_index

        key = self.session_key(session_type, session_id)
        try:
            self.store.set(key, self._dump(record))
        except Exception as exc:
            self.log.error("Failed to update word progress for %s: %s", key, exc)

    def load(self, session_type: SessionType, session_id: str) -> Optional[SessionRecord]:
        key = self.session_key(session_type, session_id)
        try:
            raw = self.store.get(key)
        except Exception as exc:
            self.log.error("Failed to read session progress %s: %s", key, exc)
            return None
        if not raw:
            return None
        try:
            return SessionRecord.model_validate_json(raw)
        except ValidationError as exc:
            self.log.warning("Discarding unreadable session progress %s: %s", key, exc.errors()[:1])
            return None

    def find_incomplete(self, session_type: SessionType, lesson_id: str) -> Optional[str]:
        """Return the session id to resume for a lesson, dropping a dangling index entry."""
        index_key = self.lesson_key(session_type, lesson_id)
        try:
            session_id = self.store.get(index_key)
        except Exception as exc:
            self.log.error("Failed to check for incomplete session %s: %s", index_key, exc)
            return None
        if not session_id:
            return None

        if self.load(session_type, session_id) is None:
            self.log.info("Removing stale lesson index %s -> %s", index_key, session_id)
            self._remove(index_key)
            return None
        return session_id

    def clear(self, session_type: SessionType, session_id: str, lesson_id: str) -> None:
        """Drop local state for a session. Call only once the backend has accepted the completed session."""
        self._remove(self.session_key(session_type, session_id))
        self._remove(self.lesson_key(session_type, lesson_id))

    def _publish(self, record: SessionRecord) -> None:
        # record first, then index: a failure in between leaves an unindexed record,
        # and an index without a record is repaired by find_incomplete
        key = self.session_key(record.session_type, record.session_id)
        try:
            self.store.set(key, self._dump(record))
            self.store.set(self.lesson_key(record.session_type, record.lesson_id), record.session_id)
        except Exception as exc:
            self.log.error("Failed to save session progress %s: %s", key, exc)

    def _remove(self, key: str) -> None:
        try:
            self.store.remove(key)
        except Exception as exc:
            self.log.error("Failed to clear %s: %s", key, exc)

    @staticmethod
    def _dump(record: SessionRecord) -> str:
        return record.model_dump_json(by_alias=True)

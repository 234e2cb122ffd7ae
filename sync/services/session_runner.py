from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence

from progress.app.schemas import SessionType, WordProgressEntry
from progress.app.services.session_cache import SessionProgressCache
from sync.schemas import PendingWordUpdate, StudyStats, TestQuestionResult, TestStats
from sync.services.api_client import ApiClient
from sync.services.scoring import POINTS_PER_WORD, WordTestResult, grade_word, restored_result, score_percent

logger = logging.getLogger("sync.runner")

LOCAL_SESSION_PREFIXES = ("local_", "guest_")


def is_remote_session(session_id: str) -> bool:
    return not session_id.startswith(LOCAL_SESSION_PREFIXES)


class SessionRunner:
    """Drives one study or test session for a lesson.

    Progress goes to the local cache on every answer. The backend is contacted
    when the session is created and when it completes; local state is cleared
    only after the backend accepts the completed session.
    """

    def __init__(
        self,
        cache: SessionProgressCache,
        api: ApiClient,
        session_type: SessionType,
        lesson_id: str,
        *,
        guest: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache = cache
        self.api = api
        self.session_type = SessionType(session_type)
        self.lesson_id = lesson_id
        self.guest = guest
        self.clock = clock
        self.session_id: Optional[str] = None
        self.resumed = False
        self.current_word_index = 0
        self.word_progress: dict[str, WordProgressEntry] = {}
        # graded detail lives only in memory; a resumed test starts from placeholders built from is_correct
        self.test_results: dict[str, WordTestResult] = {}

    async def start(self) -> str:
        existing_id = self.cache.find_incomplete(self.session_type, self.lesson_id)
        if existing_id:
            record = self.cache.load(self.session_type, existing_id)
            if record:
                logger.info("Resuming %s session %s at word %s", self.session_type.value, existing_id, record.current_word_index)
                self.session_id = existing_id
                self.resumed = True
                self.current_word_index = record.current_word_index
                self.word_progress = dict(record.word_progress)
                self.test_results = {
                    word_id: restored_result(word_id, entry.is_correct)
                    for word_id, entry in record.word_progress.items()
                } if self.session_type is SessionType.TEST else {}
                return existing_id

        if self.guest:
            session_id = self._fallback_id("guest")
            logger.info("Guest %s session %s", self.session_type.value, session_id)
        else:
            session_id = await self.api.create_session(self.session_type, self.lesson_id)
            if session_id:
                logger.info("Created %s session %s", self.session_type.value, session_id)
            else:
                session_id = self._fallback_id("local")
                logger.warning("Backend session unavailable, using local %s", session_id)

        self.session_id = session_id
        self.resumed = False
        self.current_word_index = 0
        self.word_progress = {}
        self.test_results = {}
        self.cache.initialize(self.session_type, session_id, self.lesson_id)
        return session_id

    def answer_study(
        self,
        word_id: str,
        is_correct: bool,
        user_notes: str | None = None,
        current_word_index: int | None = None,
    ) -> WordProgressEntry:
        entry = WordProgressEntry(is_correct=is_correct, user_notes=user_notes)
        self._record(word_id, entry, current_word_index)
        return entry

    def answer_test(
        self,
        word_id: str,
        user_answer: str,
        valid_answers: Sequence[str],
        clue_level: int = 0,
        current_word_index: int | None = None,
    ) -> WordTestResult:
        result = grade_word(word_id, user_answer, valid_answers, clue_level)
        self.test_results[word_id] = result
        self._record(word_id, WordProgressEntry(is_correct=result.is_correct), current_word_index)
        return result

    async def complete(self, duration_seconds: int = 0, *, total_words: int | None = None) -> bool:
        """Push the session to the backend; returns whether local progress was cleared."""
        session_id = self._require_session()
        if self.guest:
            # nothing to reconcile for guests
            self.cache.clear(self.session_type, session_id, self.lesson_id)
            return True

        if not is_remote_session(session_id):
            logger.info("Session %s has no backend record, sending word progress only", session_id)
        if self.session_type is SessionType.STUDY:
            synced = await self._complete_study(session_id, duration_seconds)
        else:
            synced = await self._complete_test(session_id, duration_seconds, total_words)

        if synced:
            self.cache.clear(self.session_type, session_id, self.lesson_id)
        else:
            logger.error("Failed to complete %s session %s, keeping local progress", self.session_type.value, session_id)
        return synced

    async def restart(self) -> str:
        if self.session_id:
            self.cache.clear(self.session_type, self.session_id, self.lesson_id)
        return await self.start()

    def study_stats(self, duration_seconds: int = 0) -> StudyStats:
        return StudyStats(
            words_studied=len(self.word_progress),
            words_mastered=sum(1 for entry in self.word_progress.values() if entry.is_correct),
            duration_seconds=duration_seconds,
        )

    def test_stats(self, duration_seconds: int = 0, total_words: int | None = None) -> TestStats:
        total = total_words if total_words is not None else len(self.word_progress)
        points = sum(result.points_earned for result in self.test_results.values())
        possible = total * POINTS_PER_WORD
        return TestStats(
            total_questions=total,
            correct_answers=sum(1 for result in self.test_results.values() if result.is_correct),
            points_earned=points,
            max_points=possible,
            score_percent=score_percent(points, possible),
            duration_seconds=duration_seconds,
        )

    async def _complete_study(self, session_id: str, duration_seconds: int) -> bool:
        updates = [
            PendingWordUpdate(word_id=word_id, is_correct=entry.is_correct, user_notes=entry.user_notes)
            for word_id, entry in self.word_progress.items()
        ]
        return await self.api.complete_study_session(
            session_id, self.lesson_id, self.study_stats(duration_seconds), updates
        )

    async def _complete_test(self, session_id: str, duration_seconds: int, total_words: int | None) -> bool:
        results = [
            TestQuestionResult(
                word_id=result.word_id,
                user_answer=result.user_answer,
                correct_answer=result.correct_answer,
                clue_level=result.clue_level,
                mistake_count=result.mistake_count,
                points_earned=result.points_earned,
                max_points=result.max_points,
            )
            for result in self.test_results.values()
        ]
        return await self.api.complete_test_session(
            session_id, self.lesson_id, self.test_stats(duration_seconds, total_words), results
        )

    def _record(self, word_id: str, entry: WordProgressEntry, current_word_index: int | None) -> None:
        session_id = self._require_session()
        if current_word_index is not None:
            self.current_word_index = current_word_index
        self.word_progress[word_id] = entry
        self.cache.record_answer(self.session_type, session_id, word_id, entry, self.current_word_index)

    def _require_session(self) -> str:
        if not self.session_id:
            raise RuntimeError("session has not been started")
        return self.session_id

    def _fallback_id(self, kind: str) -> str:
        millis = int(self.clock() * 1000)
        if self.session_type is SessionType.TEST:
            return f"{kind}_test_{self.lesson_id}_{millis}"
        return f"{kind}_{self.lesson_id}_{millis}"

from __future__ import annotations

from pydantic import Field

from progress.app.schemas.progress import CamelModel


class StudyStats(CamelModel):
    words_studied: int = 0
    words_mastered: int = 0
    duration_seconds: int = 0


class PendingWordUpdate(CamelModel):
    word_id: str
    is_correct: bool
    user_notes: str | None = None
    has_answered: bool = True


class TestStats(CamelModel):
    total_questions: int
    correct_answers: int
    points_earned: int
    max_points: int
    score_percent: int
    duration_seconds: int = 0
    new_words_count: int = 0
    mastered_words_count: int = 0


class TestQuestionResult(CamelModel):
    word_id: str
    user_answer: str
    correct_answer: str
    clue_level: int = Field(ge=0, le=2)
    mistake_count: int
    points_earned: int
    max_points: int
    time_to_answer_ms: int | None = None

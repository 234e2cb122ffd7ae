from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionType(str, Enum):
    STUDY = "study"
    TEST = "test"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WordProgressEntry(CamelModel):
    is_correct: bool
    user_notes: str | None = None
    answered_at: datetime = Field(default_factory=utcnow)


class SessionRecord(CamelModel):
    session_type: SessionType
    session_id: str
    lesson_id: str
    started_at: datetime = Field(default_factory=utcnow)
    current_word_index: int = 0
    word_progress: dict[str, WordProgressEntry] = Field(default_factory=dict)


class SessionCreate(CamelModel):
    session_id: str = Field(min_length=1)
    lesson_id: str = Field(min_length=1)


class SessionSnapshot(CamelModel):
    lesson_id: str = Field(min_length=1)
    current_word_index: int = Field(default=0, ge=0)
    word_progress: dict[str, WordProgressEntry] = Field(default_factory=dict)


class AnswerCreate(CamelModel):
    word_id: str = Field(min_length=1)
    is_correct: bool
    user_notes: str | None = None
    current_word_index: int = Field(ge=0)
    answered_at: datetime | None = None

    def to_entry(self) -> WordProgressEntry:
        return WordProgressEntry(
            is_correct=self.is_correct,
            user_notes=self.user_notes,
            answered_at=self.answered_at or utcnow(),
        )


class IncompleteSessionRead(CamelModel):
    session_id: str

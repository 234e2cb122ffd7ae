from progress.app.schemas.progress import (
    AnswerCreate,
    IncompleteSessionRead,
    SessionCreate,
    SessionRecord,
    SessionSnapshot,
    SessionType,
    WordProgressEntry,
)

__all__ = [
    "AnswerCreate",
    "IncompleteSessionRead",
    "SessionCreate",
    "SessionRecord",
    "SessionSnapshot",
    "SessionType",
    "WordProgressEntry",
]

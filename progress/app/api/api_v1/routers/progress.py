from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from progress.app.dependencies.cache import get_cache
from progress.app.schemas import (
    AnswerCreate,
    IncompleteSessionRead,
    SessionCreate,
    SessionRecord,
    SessionSnapshot,
    SessionType,
)
from progress.app.services.session_cache import SessionProgressCache

router = APIRouter(prefix="/progress/{session_type}", tags=["progress"])


def _load_or_404(cache: SessionProgressCache, session_type: SessionType, session_id: str) -> SessionRecord:
    record = cache.load(session_type, session_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session progress not found")
    return record


def _stored_or_503(cache: SessionProgressCache, session_type: SessionType, session_id: str) -> SessionRecord:
    record = cache.load(session_type, session_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Session progress could not be stored")
    return record


@router.post("/sessions", response_model=SessionRecord, status_code=status.HTTP_201_CREATED)
def initialize_session(
    session_type: SessionType,
    payload: SessionCreate,
    cache: SessionProgressCache = Depends(get_cache),
):
    cache.initialize(session_type, payload.session_id, payload.lesson_id)
    return _stored_or_503(cache, session_type, payload.session_id)


@router.put("/sessions/{session_id}", response_model=SessionRecord)
def save_session(
    session_type: SessionType,
    session_id: str,
    payload: SessionSnapshot,
    cache: SessionProgressCache = Depends(get_cache),
):
    cache.save(session_type, session_id, payload.lesson_id, payload.current_word_index, payload.word_progress)
    return _stored_or_503(cache, session_type, session_id)


@router.get("/sessions/{session_id}", response_model=SessionRecord)
def load_session(
    session_type: SessionType,
    session_id: str,
    cache: SessionProgressCache = Depends(get_cache),
):
    return _load_or_404(cache, session_type, session_id)


@router.post("/sessions/{session_id}/answers", status_code=status.HTTP_204_NO_CONTENT)
def record_answer(
    session_type: SessionType,
    session_id: str,
    payload: AnswerCreate,
    cache: SessionProgressCache = Depends(get_cache),
):
    cache.record_answer(session_type, session_id, payload.word_id, payload.to_entry(), payload.current_word_index)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/lessons/{lesson_id}", response_model=IncompleteSessionRead)
def find_incomplete_session(
    session_type: SessionType,
    lesson_id: str,
    cache: SessionProgressCache = Depends(get_cache),
):
    session_id = cache.find_incomplete(session_type, lesson_id)
    if not session_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No incomplete session for lesson")
    return IncompleteSessionRead(session_id=session_id)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def clear_session(
    session_type: SessionType,
    session_id: str,
    lesson_id: str,
    cache: SessionProgressCache = Depends(get_cache),
):
    cache.clear(session_type, session_id, lesson_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from progress.app.schemas import SessionType
from sync.config import get_settings
from sync.schemas import PendingWordUpdate, StudyStats, TestQuestionResult, TestStats

logger = logging.getLogger("sync.api")


class ApiClient:
    """Client for the hosted backend that owns completed sessions.

    Failures never raise: ``create_session`` returns ``None`` and the completion
    calls return ``False`` so the caller can keep its local copy.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        access_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = base_url or str(settings.api_base_url)
        token = settings.access_token if access_token is None else access_token
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=settings.timeout_seconds,
            headers=headers,
            transport=transport,
        )

    async def create_session(self, session_type: SessionType, lesson_id: str) -> str | None:
        payload = {"lessonId": lesson_id, "sessionType": SessionType(session_type).value}
        data = await self._post("/sessions", payload)
        if not data or not data.get("sessionId"):
            logger.warning("create_session: no session id for %s lesson=%s", session_type, lesson_id)
            return None
        return str(data["sessionId"])

    async def complete_study_session(
        self,
        session_id: str,
        lesson_id: str,
        stats: StudyStats,
        pending_updates: Sequence[PendingWordUpdate],
    ) -> bool:
        payload = {
            "lessonId": lesson_id,
            "stats": stats.model_dump(by_alias=True),
            "pendingUpdates": [update.model_dump(by_alias=True) for update in pending_updates],
        }
        return self._succeeded(await self._post(f"/sessions/{session_id}/complete-study", payload))

    async def complete_test_session(
        self,
        session_id: str,
        lesson_id: str,
        stats: TestStats,
        question_results: Sequence[TestQuestionResult],
    ) -> bool:
        payload = {
            "lessonId": lesson_id,
            "stats": stats.model_dump(by_alias=True),
            "questionResults": [result.model_dump(by_alias=True) for result in question_results],
        }
        return self._succeeded(await self._post(f"/sessions/{session_id}/complete-test", payload))

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any] | None:
        try:
            response = await self._client.post(path, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("POST %s failed: status=%s body=%s", path, exc.response.status_code, exc.response.text[:200])
            return None
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("POST %s failed: %s", path, exc)
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _succeeded(data: dict[str, Any] | None) -> bool:
        if data is None:
            return False
        if data.get("success") is False:
            logger.error("backend rejected completion: %s", data.get("error"))
            return False
        return True

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

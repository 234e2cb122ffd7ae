from __future__ import annotations

from fastapi import Request

from progress.app.services.session_cache import SessionProgressCache


def get_cache(request: Request) -> SessionProgressCache:
    return request.app.state.cache

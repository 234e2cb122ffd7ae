import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from progress.app.api.api_v1.api import api_router
from progress.app.core.config import get_settings
from progress.app.db.session import SessionLocal, init_db
from progress.app.services.session_cache import SessionProgressCache
from progress.app.services.storage import SqlStore

logger = logging.getLogger("progress")


def setup_logging(level: str) -> None:
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def create_app(cache: SessionProgressCache | None = None) -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    if cache is None:
        init_db()
        cache = SessionProgressCache(SqlStore(SessionLocal), prefix=settings.storage_key_prefix)
    logger.info("Session progress cache ready: store=%s prefix=%s", type(cache.store).__name__, cache.prefix)

    app = FastAPI(title=settings.app_name)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # the study UI is served from another origin in dev
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.cache = cache
    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app

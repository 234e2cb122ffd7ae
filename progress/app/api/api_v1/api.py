from fastapi import APIRouter

from progress.app.api.api_v1.routers.progress import router as progress_router

api_router = APIRouter()
api_router.include_router(progress_router)

from fastapi import APIRouter

from leettracker.api import api_router
from leettracker.api.endpoints.auth import router as auth_router
from leettracker.api.endpoints.chat import router as chat_router
from leettracker.api.endpoints.problems import router as problems_router
from leettracker.api.endpoints.stats import router as stats_router

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """
    Basic health-check endpoint used by orchestrators and smoke tests.
    """

    return {"status": "healthy"}


api_router.include_router(router)
api_router.include_router(auth_router)
api_router.include_router(problems_router)
api_router.include_router(chat_router)
api_router.include_router(stats_router)

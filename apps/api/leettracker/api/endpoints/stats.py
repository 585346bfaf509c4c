from fastapi import APIRouter, Depends

from leettracker.dependencies import get_current_user, get_storage
from leettracker.schemas.problems import UserStats
from leettracker.services.storage import Storage

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=UserStats)
async def read_stats(
    current_user=Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> UserStats:
    return await storage.get_user_stats(current_user.id)

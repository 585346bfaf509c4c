from fastapi import APIRouter, Depends

from leettracker.dependencies import get_current_user
from leettracker.schemas.users import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/user", response_model=UserRead)
async def read_current_user(current_user=Depends(get_current_user)):
    return current_user

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from leettracker.dependencies import get_current_user, get_storage
from leettracker.schemas.problems import ProblemCreate, ProblemRead, ProblemUpdate
from leettracker.services.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/problems", tags=["problems"])


@router.get("", response_model=List[ProblemRead])
async def list_problems(
    search: Optional[str] = Query(default=None),
    difficulty: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    current_user=Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    if search or difficulty or category:
        return await storage.search_problems(
            current_user.id,
            query=search or "",
            difficulty=difficulty,
            category=category,
            limit=limit,
            offset=offset,
        )

    return await storage.list_problems(current_user.id, limit=limit, offset=offset)


@router.post("", response_model=ProblemRead, status_code=status.HTTP_201_CREATED)
async def create_problem(
    payload: ProblemCreate,
    current_user=Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    problem = await storage.create_problem(payload, current_user.id)
    logger.info("Created problem %s (#%s) for %s", problem.id, problem.problem_number, current_user.id)
    return problem


@router.get("/{problem_id}", response_model=ProblemRead)
async def read_problem(
    problem_id: int,
    current_user=Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    problem = await storage.get_problem(problem_id, current_user.id)
    if problem is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Problem not found")
    return problem


@router.put("/{problem_id}", response_model=ProblemRead)
async def update_problem(
    problem_id: int,
    payload: ProblemUpdate,
    current_user=Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    problem = await storage.update_problem(problem_id, payload, current_user.id)
    if problem is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Problem not found")
    return problem


@router.delete("/{problem_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_problem(
    problem_id: int,
    current_user=Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> Response:
    deleted = await storage.delete_problem(problem_id, current_user.id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Problem not found")

    logger.info("Deleted problem %s for %s", problem_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

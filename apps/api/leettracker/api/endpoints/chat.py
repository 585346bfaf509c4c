import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from leettracker.dependencies import get_cache_service, get_current_user, get_storage
from leettracker.schemas.chat import AnalysisResponse, ChatExchange, ChatMessageRead, ChatRequest
from leettracker.services.analyzer import analyze_solution
from leettracker.services.cache import CacheService
from leettracker.services.responder import generate_reply
from leettracker.services.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/problems/{problem_id}", tags=["chat"])


async def _owned_problem(problem_id: int, user_id: str, storage: Storage):
    problem = await storage.get_problem(problem_id, user_id)
    if problem is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Problem not found")
    return problem


@router.get("/chat", response_model=List[ChatMessageRead])
async def list_chat_messages(
    problem_id: int,
    current_user=Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    await _owned_problem(problem_id, current_user.id, storage)
    return await storage.list_chat_messages(problem_id, current_user.id)


@router.post("/chat", response_model=ChatExchange)
async def create_chat_exchange(
    problem_id: int,
    request: ChatRequest,
    current_user=Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> ChatExchange:
    problem = await _owned_problem(problem_id, current_user.id, storage)
    history = await storage.list_chat_messages(problem_id, current_user.id)

    # Two independent writes: a failure after the first leaves the question
    # without a reply.
    user_message = await storage.create_chat_message(problem_id, current_user.id, request.message, is_ai=False)

    reply = generate_reply(
        request.message,
        problem.title,
        problem.description,
        problem.solution,
        [{"message": message.message, "is_ai": message.is_ai} for message in history],
    )
    ai_message = await storage.create_chat_message(problem_id, current_user.id, reply, is_ai=True)

    return ChatExchange(
        user_message=ChatMessageRead.model_validate(user_message),
        ai_message=ChatMessageRead.model_validate(ai_message),
    )


@router.api_route("/analyze", methods=["GET", "POST"], response_model=AnalysisResponse)
async def analyze_problem_solution(
    problem_id: int,
    current_user=Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    cache: CacheService | None = Depends(get_cache_service),
) -> AnalysisResponse:
    problem = await _owned_problem(problem_id, current_user.id, storage)

    cache_key = CacheService.build_key("analysis", {"problem_id": problem.id, "solution": problem.solution})
    if cache is not None:
        cached = await cache.get(cache_key)
        if cached:
            return AnalysisResponse(**cached)

    analysis = analyze_solution(problem.solution, problem.title, problem.description or "")
    response = AnalysisResponse.model_validate(analysis, from_attributes=True)

    if cache is not None:
        await cache.set(cache_key, response.model_dump())
    return response

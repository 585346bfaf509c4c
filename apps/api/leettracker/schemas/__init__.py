from leettracker.schemas.chat import (
    AnalysisResponse,
    ChatExchange,
    ChatMessageRead,
    ChatRequest,
)
from leettracker.schemas.problems import (
    DIFFICULTIES,
    Difficulty,
    ProblemCreate,
    ProblemRead,
    ProblemUpdate,
    UserStats,
)
from leettracker.schemas.users import UserRead, UserUpsert

__all__ = [
    "AnalysisResponse",
    "ChatExchange",
    "ChatMessageRead",
    "ChatRequest",
    "DIFFICULTIES",
    "Difficulty",
    "ProblemCreate",
    "ProblemRead",
    "ProblemUpdate",
    "UserStats",
    "UserRead",
    "UserUpsert",
]

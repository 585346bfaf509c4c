from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import BeforeValidator, Field, model_validator

from leettracker.schemas.common import CamelModel

DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")


def _normalise_difficulty(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


Difficulty = Annotated[Literal["easy", "medium", "hard"], BeforeValidator(_normalise_difficulty)]


class ProblemCreate(CamelModel):
    problem_number: int = Field(ge=1)
    title: str = Field(min_length=1, max_length=512)
    difficulty: Difficulty
    category: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    solution: str


class ProblemUpdate(CamelModel):
    """
    Partial update: omitted fields stay untouched. Required columns may be
    omitted but not nulled.
    """

    problem_number: Optional[int] = Field(default=None, ge=1)
    title: Optional[str] = Field(default=None, min_length=1, max_length=512)
    difficulty: Optional[Difficulty] = None
    category: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    solution: Optional[str] = None

    @model_validator(mode="after")
    def check_required_not_null(self) -> "ProblemUpdate":
        for name in ("problem_number", "title", "difficulty", "solution"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ProblemRead(CamelModel):
    id: int
    user_id: str
    problem_number: int
    title: str
    difficulty: str
    category: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    solution: str
    created_at: datetime
    updated_at: datetime


class UserStats(CamelModel):
    total: int = 0
    easy: int = 0
    medium: int = 0
    hard: int = 0

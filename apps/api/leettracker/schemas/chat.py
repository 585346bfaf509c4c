from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import Field, field_validator

from leettracker.schemas.common import CamelModel


class ChatMessageRead(CamelModel):
    id: int
    problem_id: int
    user_id: str
    message: str
    is_ai: bool
    created_at: datetime


class ChatRequest(CamelModel):
    message: str = Field(min_length=1)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message cannot be empty.")
        return value


class ChatExchange(CamelModel):
    user_message: ChatMessageRead
    ai_message: ChatMessageRead


class AnalysisResponse(CamelModel):
    time_complexity: str
    space_complexity: str
    suggestions: List[str] = Field(default_factory=list)
    patterns: List[str] = Field(default_factory=list)

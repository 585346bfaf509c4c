from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from leettracker.db.base import EmbeddedBase
from leettracker.db.types import EpochTimestamp, utcnow


class User(EmbeddedBase):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(Text, unique=True)
    first_name: Mapped[Optional[str]] = mapped_column(Text)
    last_name: Mapped[Optional[str]] = mapped_column(Text)
    profile_image_url: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(EpochTimestamp, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(EpochTimestamp, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"User(id={self.id!r})"


class Problem(EmbeddedBase):
    __tablename__ = "problems"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    problem_number: Mapped[int] = mapped_column(Integer)
    title: Mapped[str] = mapped_column(Text)
    difficulty: Mapped[str] = mapped_column(String(16), index=True)
    category: Mapped[Optional[str]] = mapped_column(Text, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    solution: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(EpochTimestamp, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(EpochTimestamp, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"Problem(id={self.id}, number={self.problem_number}, user_id={self.user_id!r})"


class ChatMessage(EmbeddedBase):
    __tablename__ = "chat_messages"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    problem_id: Mapped[int] = mapped_column(
        ForeignKey("problems.id", ondelete="CASCADE"),
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    message: Mapped[str] = mapped_column(Text)
    is_ai: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(EpochTimestamp, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"ChatMessage(id={self.id}, problem_id={self.problem_id}, is_ai={self.is_ai})"

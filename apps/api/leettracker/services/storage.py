from __future__ import annotations

import abc
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from sqlalchemy import MetaData, and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leettracker.db.base import EmbeddedBase, RelationalBase
from leettracker.db.types import utcnow
from leettracker.models import embedded, relational
from leettracker.schemas.problems import DIFFICULTIES, ProblemCreate, ProblemUpdate, UserStats
from leettracker.schemas.users import UserUpsert

logger = logging.getLogger(__name__)


class ProblemNotFoundError(LookupError):
    """Raised when a problem does not exist or belongs to another user."""


class UserConflictError(ValueError):
    """Raised when a profile update collides with another user's unique email."""


@dataclass(frozen=True)
class StorageSchema:
    """
    One physical encoding of the users/problems/chat_messages tables.
    """

    name: str
    metadata: MetaData
    user: Any
    problem: Any
    chat_message: Any


RELATIONAL = StorageSchema(
    name="relational",
    metadata=RelationalBase.metadata,
    user=relational.User,
    problem=relational.Problem,
    chat_message=relational.ChatMessage,
)

EMBEDDED = StorageSchema(
    name="embedded",
    metadata=EmbeddedBase.metadata,
    user=embedded.User,
    problem=embedded.Problem,
    chat_message=embedded.ChatMessage,
)

SCHEMAS = {schema.name: schema for schema in (RELATIONAL, EMBEDDED)}


def get_schema(name: str) -> StorageSchema:
    try:
        return SCHEMAS[name]
    except KeyError:
        raise ValueError(f"Unknown storage backend {name!r}; expected one of {sorted(SCHEMAS)}") from None


class Storage(abc.ABC):
    """
    Persistence operations for the tracker. Every problem and chat operation
    is scoped by ``user_id``; rows owned by someone else behave as missing.
    """

    @abc.abstractmethod
    async def get_user(self, user_id: str) -> Optional[Any]: ...

    @abc.abstractmethod
    async def upsert_user(self, data: UserUpsert) -> Any: ...

    @abc.abstractmethod
    async def get_or_create_user(self, user_id: str, **profile: Optional[str]) -> Any: ...

    @abc.abstractmethod
    async def list_problems(self, user_id: str, limit: int = 50, offset: int = 0) -> List[Any]: ...

    @abc.abstractmethod
    async def search_problems(
        self,
        user_id: str,
        query: str = "",
        difficulty: Optional[str] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Any]: ...

    @abc.abstractmethod
    async def get_problem(self, problem_id: int, user_id: str) -> Optional[Any]: ...

    @abc.abstractmethod
    async def create_problem(self, data: ProblemCreate, user_id: str) -> Any: ...

    @abc.abstractmethod
    async def update_problem(self, problem_id: int, data: ProblemUpdate, user_id: str) -> Optional[Any]: ...

    @abc.abstractmethod
    async def delete_problem(self, problem_id: int, user_id: str) -> bool: ...

    @abc.abstractmethod
    async def get_user_stats(self, user_id: str) -> UserStats: ...

    @abc.abstractmethod
    async def list_chat_messages(self, problem_id: int, user_id: str) -> List[Any]: ...

    @abc.abstractmethod
    async def create_chat_message(
        self,
        problem_id: int,
        user_id: str,
        message: str,
        is_ai: bool = False,
    ) -> Any: ...


class SQLAlchemyStorage(Storage):
    def __init__(self, session: AsyncSession, schema: StorageSchema = RELATIONAL) -> None:
        self._session = session
        self._schema = schema

    @property
    def schema(self) -> StorageSchema:
        return self._schema

    # Users

    async def get_user(self, user_id: str):
        return await self._session.get(self._schema.user, user_id)

    async def upsert_user(self, data: UserUpsert):
        User = self._schema.user
        user = await self._session.get(User, data.id)
        if user is None:
            user = User(**data.model_dump())
            self._session.add(user)
        else:
            for field, value in data.model_dump(exclude_unset=True, exclude={"id"}).items():
                setattr(user, field, value)
            user.updated_at = utcnow()

        await self._session.commit()
        await self._session.refresh(user)
        return user

    async def get_or_create_user(self, user_id: str, **profile: Optional[str]):
        fields = {key: value for key, value in profile.items() if value is not None}
        user = await self.get_user(user_id)
        if user is not None and all(getattr(user, key) == value for key, value in fields.items()):
            return user

        try:
            return await self.upsert_user(UserUpsert(id=user_id, **fields))
        except IntegrityError:
            await self._session.rollback()
            user = await self.get_user(user_id)
            if user is None or ("email" in fields and user.email != fields["email"]):
                raise UserConflictError(f"Email {fields.get('email')!r} is already in use") from None
            # Another request created the row first.
            logger.debug("User %s created concurrently, reloading", user_id)
            return user

    # Problems

    def _ordered(self, stmt):
        Problem = self._schema.problem
        return stmt.order_by(Problem.updated_at.desc(), Problem.id.desc())

    async def list_problems(self, user_id: str, limit: int = 50, offset: int = 0):
        Problem = self._schema.problem
        stmt = self._ordered(select(Problem).where(Problem.user_id == user_id)).limit(limit).offset(offset)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def search_problems(
        self,
        user_id: str,
        query: str = "",
        difficulty: Optional[str] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ):
        Problem = self._schema.problem
        conditions = [Problem.user_id == user_id]

        if query:
            conditions.append(
                or_(
                    Problem.title.icontains(query, autoescape=True),
                    Problem.description.icontains(query, autoescape=True),
                ),
            )
        if difficulty:
            conditions.append(Problem.difficulty == difficulty.lower())
        if category:
            conditions.append(Problem.category.icontains(category, autoescape=True))

        stmt = self._ordered(select(Problem).where(and_(*conditions))).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_problem(self, problem_id: int, user_id: str):
        Problem = self._schema.problem
        stmt = select(Problem).where(Problem.id == problem_id, Problem.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_problem(self, data: ProblemCreate, user_id: str):
        problem = self._schema.problem(**data.model_dump(), user_id=user_id)
        self._session.add(problem)
        await self._session.commit()
        await self._session.refresh(problem)
        return problem

    async def update_problem(self, problem_id: int, data: ProblemUpdate, user_id: str):
        problem = await self.get_problem(problem_id, user_id)
        if problem is None:
            return None

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(problem, field, value)
        problem.updated_at = utcnow()

        await self._session.commit()
        await self._session.refresh(problem)
        return problem

    async def delete_problem(self, problem_id: int, user_id: str) -> bool:
        Problem = self._schema.problem
        result = await self._session.execute(
            delete(Problem).where(Problem.id == problem_id, Problem.user_id == user_id),
        )
        await self._session.commit()
        return (result.rowcount or 0) > 0

    async def get_user_stats(self, user_id: str) -> UserStats:
        Problem = self._schema.problem
        stmt = (
            select(Problem.difficulty, func.count(Problem.id))
            .where(Problem.user_id == user_id)
            .group_by(Problem.difficulty)
        )
        result = await self._session.execute(stmt)
        counts = {difficulty: count for difficulty, count in result.all()}

        return UserStats(
            total=sum(counts.values()),
            **{difficulty: counts.get(difficulty, 0) for difficulty in DIFFICULTIES},
        )

    # Chat

    async def list_chat_messages(self, problem_id: int, user_id: str):
        ChatMessage = self._schema.chat_message
        stmt = (
            select(ChatMessage)
            .where(ChatMessage.problem_id == problem_id, ChatMessage.user_id == user_id)
            .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def create_chat_message(
        self,
        problem_id: int,
        user_id: str,
        message: str,
        is_ai: bool = False,
    ):
        if await self.get_problem(problem_id, user_id) is None:
            raise ProblemNotFoundError(f"Problem {problem_id} not found")

        chat_message = self._schema.chat_message(
            problem_id=problem_id,
            user_id=user_id,
            message=message,
            is_ai=is_ai,
        )
        self._session.add(chat_message)
        await self._session.commit()
        await self._session.refresh(chat_message)
        return chat_message


def build_storage(session: AsyncSession, backend: str) -> Storage:
    return SQLAlchemyStorage(session=session, schema=get_schema(backend))



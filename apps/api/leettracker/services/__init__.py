from leettracker.services.analyzer import Analysis, analyze_solution
from leettracker.services.cache import CacheService
from leettracker.services.responder import generate_reply
from leettracker.services.storage import (
    EMBEDDED,
    RELATIONAL,
    ProblemNotFoundError,
    SQLAlchemyStorage,
    Storage,
    StorageSchema,
    UserConflictError,
    build_storage,
    get_schema,
)

__all__ = [
    "Analysis",
    "analyze_solution",
    "CacheService",
    "generate_reply",
    "EMBEDDED",
    "RELATIONAL",
    "ProblemNotFoundError",
    "SQLAlchemyStorage",
    "Storage",
    "StorageSchema",
    "UserConflictError",
    "build_storage",
    "get_schema",
]

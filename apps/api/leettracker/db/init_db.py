import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from leettracker.core.config import settings
from leettracker.db.session import engine as default_engine
from leettracker.services.storage import get_schema

logger = logging.getLogger(__name__)


async def init_db(engine: AsyncEngine | None = None, backend: str | None = None) -> None:
    """
    Ensure the tables of the configured storage backend exist before serving traffic.
    """

    schema = get_schema(backend or settings.storage_backend)
    target = engine or default_engine

    async with target.begin() as connection:
        await connection.run_sync(schema.metadata.create_all)

    logger.info("Database ready (backend=%s)", schema.name)

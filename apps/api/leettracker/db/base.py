from sqlalchemy.orm import DeclarativeBase


class RelationalBase(DeclarativeBase):
    """Registry for the PostgreSQL-flavoured tables (native timestamps)."""


class EmbeddedBase(DeclarativeBase):
    """Registry for the SQLite-flavoured tables (epoch-integer timestamps)."""

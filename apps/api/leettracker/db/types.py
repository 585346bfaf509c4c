"""
Column types that let the two physical schemas expose the same Python values.

The relational schema keeps native timestamps but stores the assistant flag as
``"true"``/``"false"`` text; the embedded schema stores timestamps as integer
epoch seconds and the flag as 0/1. Storage code only ever sees ``datetime``
and ``bool``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.types import TypeDecorator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EpochTimestamp(TypeDecorator):
    """``datetime`` stored as whole seconds since the Unix epoch."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[int]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())

    def process_result_value(self, value: Optional[int], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return datetime.fromtimestamp(value, tz=timezone.utc)


class TextBoolean(TypeDecorator):
    """``bool`` stored as the strings ``"true"`` and ``"false"``."""

    impl = String(5)
    cache_ok = True

    def process_bind_param(self, value: Optional[bool], dialect) -> Optional[str]:
        if value is None:
            return None
        return "true" if value else "false"

    def process_result_value(self, value: Optional[str], dialect) -> Optional[bool]:
        if value is None:
            return None
        return value == "true"

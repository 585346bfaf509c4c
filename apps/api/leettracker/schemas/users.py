from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from leettracker.schemas.common import CamelModel


class UserUpsert(CamelModel):
    id: str = Field(min_length=1)
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class UserRead(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

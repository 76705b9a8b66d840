from datetime import datetime
from typing import Optional

from propfind.schemas.base_schema import CamelModel


class FavoriteCreate(CamelModel):
    property_id: Optional[str] = None


class FavoriteOut(CamelModel):
    id: str
    user_id: str
    property_id: str
    created_at: datetime


class FavoriteRemoved(CamelModel):
    success: bool = True
    removed: bool

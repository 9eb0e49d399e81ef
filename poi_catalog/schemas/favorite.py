from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from poi_catalog.schemas.activity import ActivityRead


class FavoriteCreate(BaseModel):
    activity_id: int = Field(..., ge=1)
    user_id: Optional[str] = Field(None, min_length=1, max_length=128)


class FavoriteRead(BaseModel):
    id: int
    user_id: str
    activity_id: int
    created_at: Optional[datetime] = None
    activity: Optional[ActivityRead] = None

"""
Dependency providers for FastAPI routes.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from poi_catalog.config import get_settings
from poi_catalog.core.db import get_db
from poi_catalog.services.activity_service import ActivityService
from poi_catalog.services.favorite_service import FavoriteService


def get_activity_service(db: Session = Depends(get_db)) -> ActivityService:
    """Activity service bound to the request's session."""
    return ActivityService(db, result_limit=get_settings().query.unbounded_result_limit)


def get_favorite_service(db: Session = Depends(get_db)) -> FavoriteService:
    """Favorite service bound to the request's session."""
    return FavoriteService(db, default_user_id=get_settings().query.default_user_id)

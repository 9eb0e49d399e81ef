"""
Favorites API endpoints - per-user bookmarks of activities
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from poi_catalog.core.dependencies import get_favorite_service
from poi_catalog.schemas.base import Envelope, ListEnvelope, Message
from poi_catalog.schemas.favorite import FavoriteCreate, FavoriteRead
from poi_catalog.services.favorite_service import FavoriteService, favorite_to_read

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


@router.get("", response_model=ListEnvelope[List[FavoriteRead]])
def list_favorites(
    user_id: Optional[str] = Query(None, alias="userId"),
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    List a user's favorites with activity detail, newest first

    - **userId**: Free-text user identifier (default: default-user)
    """
    favorites = [favorite_to_read(f) for f in service.list_favorites(user_id)]
    return ListEnvelope(status="ok", count=len(favorites), data=favorites)


@router.post("", response_model=Envelope[FavoriteRead], status_code=status.HTTP_201_CREATED)
def add_favorite(
    payload: FavoriteCreate,
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    Add an activity to favorites

    Answers 404 for an unknown activity and 409 when already a favorite.
    """
    favorite = service.add_favorite(payload.activity_id, payload.user_id)
    return Envelope(status="ok", data=favorite_to_read(favorite))


@router.delete("/{activity_id}", response_model=Envelope[Message])
def remove_favorite(
    activity_id: int,
    user_id: Optional[str] = Query(None, alias="userId"),
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    Remove an activity from favorites
    """
    service.remove_favorite(activity_id, user_id)
    return Envelope(status="ok", data=Message(message="Favorite removed"))

"""
Favorite Service - per-user bookmarks of activities
"""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from poi_catalog.core.exceptions import ConflictError, NotFoundError
from poi_catalog.models.activity import Activity
from poi_catalog.models.favorite import Favorite
from poi_catalog.schemas.favorite import FavoriteRead
from poi_catalog.services.activity_service import to_read

logger = logging.getLogger(__name__)

DEFAULT_USER_ID = "default-user"


def favorite_to_read(favorite: Favorite) -> FavoriteRead:
    return FavoriteRead(
        id=favorite.id,
        user_id=favorite.user_id,
        activity_id=favorite.activity_id,
        created_at=favorite.created_at,
        activity=to_read(favorite.activity) if favorite.activity is not None else None,
    )


class FavoriteService:
    """Manages favorites; at most one per (user, activity) pair"""

    def __init__(self, db: Session, default_user_id: str = DEFAULT_USER_ID):
        self.db = db
        self.default_user_id = default_user_id

    def _user(self, user_id: str | None) -> str:
        return user_id or self.default_user_id

    def _find(self, user_id: str, activity_id: int) -> Favorite | None:
        stmt = select(Favorite).where(
            Favorite.user_id == user_id,
            Favorite.activity_id == activity_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_favorites(self, user_id: str | None = None) -> List[Favorite]:
        """
        List a user's favorites with their activities, newest first

        Args:
            user_id: Free-text user identifier (default user when omitted)
        """
        stmt = (
            select(Favorite)
            .where(Favorite.user_id == self._user(user_id))
            .options(selectinload(Favorite.activity))
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def add_favorite(self, activity_id: int, user_id: str | None = None) -> Favorite:
        """
        Add an activity to a user's favorites

        Raises:
            NotFoundError: activity does not exist
            ConflictError: activity already in the user's favorites
        """
        user_id = self._user(user_id)
        if self.db.get(Activity, activity_id) is None:
            raise NotFoundError("Activity", activity_id)

        if self._find(user_id, activity_id) is not None:
            raise ConflictError(
                "Activity is already in favorites",
                details={"user_id": user_id, "activity_id": activity_id},
            )

        favorite = Favorite(user_id=user_id, activity_id=activity_id)
        self.db.add(favorite)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Lost a race against a concurrent insert of the same pair
            self.db.rollback()
            raise ConflictError(
                "Activity is already in favorites",
                details={"user_id": user_id, "activity_id": activity_id},
            ) from exc
        self.db.refresh(favorite)
        logger.info(
            f"User {user_id} favorited activity {activity_id}",
            extra={"user_id": user_id, "activity_id": activity_id},
        )
        return favorite

    def remove_favorite(self, activity_id: int, user_id: str | None = None) -> None:
        """
        Remove an activity from a user's favorites

        Raises:
            NotFoundError: no such favorite
        """
        user_id = self._user(user_id)
        favorite = self._find(user_id, activity_id)
        if favorite is None:
            raise NotFoundError("Favorite", activity_id)
        self.db.delete(favorite)
        self.db.commit()

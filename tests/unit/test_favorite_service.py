"""
Unit tests for favorites and their uniqueness per user
"""
import pytest

from poi_catalog.core.exceptions import ConflictError, NotFoundError
from poi_catalog.schemas.activity import ActivityCreate
from poi_catalog.services.activity_service import ActivityService
from poi_catalog.services.favorite_service import DEFAULT_USER_ID, FavoriteService, favorite_to_read


@pytest.fixture
def activity(db_session):
    return ActivityService(db_session).create(
        ActivityCreate(name="Piscine Pontoise", category="piscine", latitude=48.849, longitude=2.353)
    )


def test_add_and_list(db_session, activity):
    service = FavoriteService(db_session)
    favorite = service.add_favorite(activity.id, "alice")
    assert favorite.user_id == "alice"

    favorites = service.list_favorites("alice")
    assert [f.activity_id for f in favorites] == [activity.id]
    detail = favorite_to_read(favorites[0])
    assert detail.activity.name == "Piscine Pontoise"


def test_duplicate_favorite_conflicts(db_session, activity):
    service = FavoriteService(db_session)
    service.add_favorite(activity.id, "alice")
    with pytest.raises(ConflictError):
        service.add_favorite(activity.id, "alice")


def test_same_activity_for_different_users(db_session, activity):
    service = FavoriteService(db_session)
    service.add_favorite(activity.id, "alice")
    service.add_favorite(activity.id, "bob")
    assert len(service.list_favorites("alice")) == 1
    assert len(service.list_favorites("bob")) == 1
    assert service.list_favorites("carol") == []


def test_default_user(db_session, activity):
    service = FavoriteService(db_session)
    favorite = service.add_favorite(activity.id)
    assert favorite.user_id == DEFAULT_USER_ID
    assert len(service.list_favorites()) == 1


def test_configured_default_user(db_session, activity):
    service = FavoriteService(db_session, default_user_id="kiosk")
    assert service.add_favorite(activity.id).user_id == "kiosk"


def test_favorite_unknown_activity(db_session):
    with pytest.raises(NotFoundError):
        FavoriteService(db_session).add_favorite(12345, "alice")


def test_remove_favorite(db_session, activity):
    service = FavoriteService(db_session)
    service.add_favorite(activity.id, "alice")
    service.remove_favorite(activity.id, "alice")
    assert service.list_favorites("alice") == []

    with pytest.raises(NotFoundError):
        service.remove_favorite(activity.id, "alice")


def test_readd_after_remove(db_session, activity):
    service = FavoriteService(db_session)
    service.add_favorite(activity.id, "alice")
    service.remove_favorite(activity.id, "alice")
    assert service.add_favorite(activity.id, "alice").activity_id == activity.id

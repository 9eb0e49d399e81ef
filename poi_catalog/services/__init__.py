# Business logic services

from .geo import haversine_distance, EARTH_RADIUS_M
from .categories import normalize_category, category_from_filename, FALLBACK_CATEGORY
from .geojson_converter import (
    feature_to_record,
    osm_feature_to_record,
    record_to_feature,
    collection_to_records,
    records_to_collection,
)
from .activity_query import ActivityQuery, GeoPoint, query_activities, UNBOUNDED_RESULT_LIMIT
from .activity_service import ActivityService
from .favorite_service import FavoriteService

__all__ = [
    "haversine_distance",
    "EARTH_RADIUS_M",
    "normalize_category",
    "category_from_filename",
    "FALLBACK_CATEGORY",
    "feature_to_record",
    "osm_feature_to_record",
    "record_to_feature",
    "collection_to_records",
    "records_to_collection",
    "ActivityQuery",
    "GeoPoint",
    "query_activities",
    "UNBOUNDED_RESULT_LIMIT",
    "ActivityService",
    "FavoriteService",
]

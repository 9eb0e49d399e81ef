"""
Radius query over activity summaries.

Linear scan: every candidate is measured from the center, filtered and
sorted nearest-first. Query parameters are parsed permissively; anything
that does not parse as a number simply disables its filter.
"""
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from poi_catalog.schemas.activity import ActivitySummary
from poi_catalog.services.geo import haversine_distance

# Result cap for nearest-first searches without a radius
UNBOUNDED_RESULT_LIMIT = 100


def parse_float(value: Any) -> Optional[float]:
    """Finite float from a query parameter, or None when absent or malformed."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class ActivityQuery:
    """Filters of a map query; every field is optional."""
    category: Optional[str] = None
    center: Optional[GeoPoint] = None
    radius_m: Optional[float] = None

    @classmethod
    def from_params(
        cls,
        category: Optional[str] = None,
        lat: Any = None,
        lng: Any = None,
        radius: Any = None,
    ) -> "ActivityQuery":
        """
        Build a query from raw request parameters.

        A center needs both coordinates; a negative radius counts as
        malformed.
        """
        center_lat, center_lng = parse_float(lat), parse_float(lng)
        center = None
        if center_lat is not None and center_lng is not None:
            center = GeoPoint(center_lat, center_lng)

        radius_m = parse_float(radius)
        if radius_m is not None and radius_m < 0:
            radius_m = None

        category = category.strip() if isinstance(category, str) else None
        return cls(category=category or None, center=center, radius_m=radius_m)


def query_activities(
    candidates: Iterable[ActivitySummary],
    query: ActivityQuery,
    limit: int = UNBOUNDED_RESULT_LIMIT,
) -> List[ActivitySummary]:
    """
    Filter and order candidate activities.

    Args:
        candidates: Summaries in store order (newest first)
        query: Category, center and radius filters
        limit: Cap applied when a center is given without a radius

    Returns:
        Matching summaries; nearest-first when a center is given, store
        order otherwise.
    """
    results = list(candidates)

    if query.category:
        wanted = query.category.casefold()
        results = [a for a in results if a.category.casefold() == wanted]

    if query.center is None:
        return results

    center = query.center
    measured = [
        (haversine_distance(center.lat, center.lng, a.latitude, a.longitude), a)
        for a in results
    ]
    if query.radius_m is not None:
        measured = [(d, a) for d, a in measured if d <= query.radius_m]

    # sorted() is stable, equal distances keep store order
    measured = sorted(measured, key=lambda pair: pair[0])

    if query.radius_m is None:
        measured = measured[:limit]

    return [a for _, a in measured]

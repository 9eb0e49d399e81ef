"""
Activity API endpoints - CRUD, map queries and GeoJSON interchange
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from poi_catalog.core.dependencies import get_activity_service
from poi_catalog.core.metrics import record_latency
from poi_catalog.schemas.activity import ActivityCreate, ActivityPatch, ActivityRead, ActivitySummary
from poi_catalog.schemas.base import Envelope, ListEnvelope, Message
from poi_catalog.schemas.geojson import ImportReport
from poi_catalog.services.activity_query import ActivityQuery
from poi_catalog.services.activity_service import ActivityService, to_read

router = APIRouter(prefix="/api/activities", tags=["activities"])


@router.get("", response_model=ListEnvelope[List[ActivitySummary]])
def list_activities(
    category: Optional[str] = Query(None, alias="type"),
    lat: Optional[str] = Query(None),
    lng: Optional[str] = Query(None),
    radius: Optional[str] = Query(None),
    service: ActivityService = Depends(get_activity_service),
):
    """
    List activities for map display

    - **type**: Optional category filter (case-insensitive)
    - **lat**, **lng**: Optional center; results are then sorted nearest-first
    - **radius**: Optional radius in meters around the center; without it at
      most 100 results are returned

    Malformed numbers disable the corresponding filter.
    """
    query = ActivityQuery.from_params(category=category, lat=lat, lng=lng, radius=radius)
    with record_latency("activities.query"):
        activities = service.search(query)

    return ListEnvelope(status="ok", count=len(activities), data=activities)


@router.get("/export/geojson")
def export_geojson(service: ActivityService = Depends(get_activity_service)) -> Dict[str, Any]:
    """
    Export every activity as a GeoJSON FeatureCollection
    """
    with record_latency("activities.export"):
        return service.export_geojson()


@router.post(
    "/import/geojson",
    response_model=Envelope[ImportReport],
    status_code=status.HTTP_201_CREATED,
)
def import_geojson(
    document: Dict[str, Any] = Body(...),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Import a GeoJSON Feature or FeatureCollection of Points

    Properties other than the known fields are kept as extended attributes.
    """
    with record_latency("activities.import"):
        report = service.import_geojson(document)

    return Envelope(status="ok", data=report)


@router.get("/{activity_id}", response_model=Envelope[ActivityRead])
def get_activity(
    activity_id: int,
    service: ActivityService = Depends(get_activity_service),
):
    """
    Get full detail of an activity
    """
    return Envelope(status="ok", data=to_read(service.get(activity_id)))


@router.post("", response_model=Envelope[ActivityRead], status_code=status.HTTP_201_CREATED)
def create_activity(
    payload: ActivityCreate,
    service: ActivityService = Depends(get_activity_service),
):
    """
    Create an activity

    - **name**, **category**, **latitude**, **longitude**: required
    - **extended_attributes**: optional free-form properties
    """
    activity = service.create(payload)
    return Envelope(status="ok", data=to_read(activity))


@router.put("/{activity_id}", response_model=Envelope[ActivityRead])
def update_activity(
    activity_id: int,
    patch: ActivityPatch,
    service: ActivityService = Depends(get_activity_service),
):
    """
    Update an activity

    All fields optional - only provided fields will be updated
    """
    activity = service.update(activity_id, patch)
    return Envelope(status="ok", data=to_read(activity))


@router.delete("/{activity_id}", response_model=Envelope[Message])
def delete_activity(
    activity_id: int,
    service: ActivityService = Depends(get_activity_service),
):
    """
    Delete an activity together with every favorite pointing at it
    """
    service.delete(activity_id)
    return Envelope(status="ok", data=Message(message=f"Activity {activity_id} deleted"))

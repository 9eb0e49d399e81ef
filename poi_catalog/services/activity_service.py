"""
Activity Service - CRUD, radius search and GeoJSON import/export
"""
import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from poi_catalog.core.exceptions import FormatError, NotFoundError
from poi_catalog.models.activity import Activity
from poi_catalog.models.favorite import Favorite
from poi_catalog.schemas.activity import ActivityBase, ActivityPatch, ActivityRead, ActivitySummary
from poi_catalog.schemas.geojson import ImportReport, ImportSummary, StoreError
from poi_catalog.services.activity_query import ActivityQuery, UNBOUNDED_RESULT_LIMIT, query_activities
from poi_catalog.services.geojson_converter import (
    collection_to_records,
    decode_properties,
    encode_properties,
    feature_to_record,
    records_to_collection,
)

logger = logging.getLogger(__name__)

_NEWEST_FIRST = (Activity.created_at.desc(), Activity.id.desc())


def to_read(activity: Activity) -> ActivityRead:
    """Full detail of a stored activity with extended attributes decoded"""
    extended = decode_properties(activity.properties, activity_id=activity.id)
    return ActivityRead(
        id=activity.id,
        name=activity.name,
        category=activity.category,
        latitude=activity.latitude,
        longitude=activity.longitude,
        address=activity.address,
        phone_number=activity.phone_number,
        website=activity.website,
        description=activity.description,
        opening_hours=activity.opening_hours,
        extended_attributes=extended or None,
        created_at=activity.created_at,
        updated_at=activity.updated_at,
    )


class ActivityService:
    """Persistence of activities on top of a SQLAlchemy session"""

    def __init__(self, db: Session, result_limit: int = UNBOUNDED_RESULT_LIMIT):
        self.db = db
        self.result_limit = result_limit

    def list_summaries(self) -> List[ActivitySummary]:
        """
        Minimal projection of every activity, newest first

        Returns:
            Summaries carrying id, name, coordinates and category only
        """
        stmt = select(
            Activity.id,
            Activity.name,
            Activity.latitude,
            Activity.longitude,
            Activity.category,
        ).order_by(*_NEWEST_FIRST)
        rows = self.db.execute(stmt).all()
        return [ActivitySummary.model_validate(row) for row in rows]

    def search(self, query: ActivityQuery) -> List[ActivitySummary]:
        """
        Run a map query against the full candidate set

        Args:
            query: Category, center and radius filters

        Returns:
            Matching summaries, nearest-first when a center is given
        """
        candidates = self.list_summaries()
        results = query_activities(candidates, query, limit=self.result_limit)
        logger.debug(
            f"Activity query matched {len(results)}/{len(candidates)}",
            extra={
                "category": query.category,
                "has_center": query.center is not None,
                "radius_m": query.radius_m,
            },
        )
        return results

    def list_all(self) -> List[Activity]:
        stmt = select(Activity).order_by(*_NEWEST_FIRST)
        return list(self.db.execute(stmt).scalars().all())

    def get(self, activity_id: int) -> Activity:
        """
        Get an activity by ID

        Raises:
            NotFoundError: no activity with that ID
        """
        activity = self.db.get(Activity, activity_id)
        if activity is None:
            raise NotFoundError("Activity", activity_id)
        return activity

    def _new_activity(self, data: ActivityBase) -> Activity:
        return Activity(
            name=data.name,
            category=data.category,
            latitude=data.latitude,
            longitude=data.longitude,
            address=data.address,
            phone_number=data.phone_number,
            website=data.website,
            description=data.description,
            opening_hours=data.opening_hours,
            properties=encode_properties(data.extended_attributes),
        )

    def create(self, data: ActivityBase) -> Activity:
        """
        Create an activity

        Args:
            data: Validated creation payload or converted GeoJSON draft

        Returns:
            Created activity
        """
        activity = self._new_activity(data)
        self.db.add(activity)
        self.db.commit()
        self.db.refresh(activity)
        logger.info(
            f"Created activity {activity.id}",
            extra={"activity_id": activity.id, "category": activity.category},
        )
        return activity

    def update(self, activity_id: int, patch: ActivityPatch) -> Activity:
        """
        Apply a partial update

        Only fields present in the patch change; ``extended_attributes``
        replaces the whole stored map.
        """
        activity = self.get(activity_id)

        for field, value in patch.changes().items():
            if field == "extended_attributes":
                activity.properties = encode_properties(value)
            else:
                setattr(activity, field, value)

        self.db.commit()
        self.db.refresh(activity)
        return activity

    def delete(self, activity_id: int) -> None:
        """
        Delete an activity and, through the cascade, its favorites
        """
        activity = self.get(activity_id)
        self.db.delete(activity)
        self.db.commit()
        logger.info(f"Deleted activity {activity_id}", extra={"activity_id": activity_id})

    def clear(self) -> int:
        """
        Delete every favorite and activity

        Returns:
            Number of activities deleted
        """
        self.db.execute(delete(Favorite))
        deleted = self.db.execute(delete(Activity)).rowcount
        self.db.commit()
        return deleted

    def import_geojson(self, document: Mapping[str, Any]) -> ImportReport:
        """
        Import a Feature or a FeatureCollection

        A single Feature that fails conversion fails the request; inside a
        collection, conversion and store failures are reported per item.

        Raises:
            FormatError: document is neither a Feature nor a FeatureCollection
            ValidationError: single Feature misses required data
        """
        doc_type = document.get("type") if isinstance(document, Mapping) else None
        conversion_errors = None
        if doc_type == "FeatureCollection":
            result = collection_to_records(document)
            records = result.records
            conversion_errors = result.errors
        elif doc_type == "Feature":
            records = [feature_to_record(document)]
        else:
            raise FormatError(
                "Invalid GeoJSON: expected a Feature or a FeatureCollection",
                details={"type": doc_type},
            )

        created = []
        db_errors = []
        for record in records:
            activity = self._new_activity(record)
            self.db.add(activity)
            try:
                self.db.commit()
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.warning(f"Could not store activity {record.name!r}: {exc}")
                db_errors.append(StoreError(activity=record.name, error=str(exc.__cause__ or exc)))
                continue
            self.db.refresh(activity)
            created.append(activity)

        logger.info(
            f"GeoJSON import stored {len(created)}/{len(records)} activities",
            extra={
                "conversion_failures": len(conversion_errors or []),
                "store_failures": len(db_errors),
            },
        )

        return ImportReport(
            imported=[to_read(a) for a in created],
            summary=ImportSummary(total=len(records), success=len(created), failed=len(db_errors)),
            conversion_errors=conversion_errors,
            db_errors=db_errors or None,
        )

    def export_geojson(self) -> Dict[str, Any]:
        """All activities as a FeatureCollection, newest first"""
        return records_to_collection(self.list_all())

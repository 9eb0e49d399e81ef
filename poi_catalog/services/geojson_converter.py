"""
GeoJSON <-> activity conversion.

Import resolves each named field from a prioritized list of property aliases
and keeps every other property as an extended attribute. Export is the
inverse: named fields first, extended attributes spread last. GeoJSON orders
Point coordinates ``[longitude, latitude]``.
"""
import json
import logging
import math
from numbers import Real
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from poi_catalog.core.exceptions import FormatError, ValidationError
from poi_catalog.models.activity import Activity
from poi_catalog.schemas.activity import (
    ActivityRecord,
    KNOWN_FIELDS,
    OPTIONAL_TEXT_FIELDS,
    PROPERTY_ALIASES,
)
from poi_catalog.schemas.geojson import ConversionError, ConversionResult, ConversionSummary
from poi_catalog.services.categories import CATEGORY_TAGS, format_osm_address, normalize_category

logger = logging.getLogger(__name__)

# Property key written on export for each optional field
EXPORT_KEYS = {
    "address": "address",
    "phone_number": "phoneNumber",
    "website": "website",
    "description": "description",
    "opening_hours": "openingHours",
}

# OpenStreetMap exports: OSM keys first, generic aliases as fallback
OSM_PROPERTY_ALIASES = {
    "name": ("name", "name:fr", "name:en", "nom"),
    "address": ("address", "adresse"),
    "phone_number": ("phone", "contact:phone", "phoneNumber", "telephone", "tel"),
    "website": ("website", "contact:website", "url", "site"),
    "description": ("description", "desc"),
    "opening_hours": ("opening_hours", "openingHours", "horaires"),
}
OSM_ADDRESS_TAGS = ("addr:housenumber", "addr:street", "addr:postcode", "addr:city")
OSM_KNOWN_KEYS = (
    KNOWN_FIELDS
    | {alias for aliases in OSM_PROPERTY_ALIASES.values() for alias in aliases}
    | set(CATEGORY_TAGS)
    | set(OSM_ADDRESS_TAGS)
)
OSM_DEFAULT_NAME = "Sans nom"

Record = Union[ActivityRecord, Activity]


def _first_present(properties: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """Value of the first alias holding a truthy value, else None."""
    for alias in aliases:
        value = properties.get(alias)
        if value:
            return value
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _is_coordinate(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _require_feature(feature: Any) -> Mapping[str, Any]:
    if not isinstance(feature, Mapping) or feature.get("type") != "Feature" or not feature.get("geometry"):
        raise FormatError("Invalid GeoJSON: expected a Feature with a geometry")
    geometry = feature["geometry"]
    geometry_type = geometry.get("type") if isinstance(geometry, Mapping) else None
    if geometry_type != "Point":
        raise FormatError(
            "Only Point geometries are supported",
            details={"geometry_type": geometry_type},
        )
    properties = feature.get("properties") or {}
    if not isinstance(properties, Mapping):
        raise FormatError("Feature properties must be an object")
    return properties


def _point_coordinates(feature: Mapping[str, Any]) -> Tuple[float, float]:
    """(longitude, latitude) of a Point Feature."""
    coordinates = feature["geometry"].get("coordinates")
    if not isinstance(coordinates, (list, tuple)) or len(coordinates) < 2:
        raise ValidationError("Missing coordinates in geometry.coordinates", field="coordinates")
    longitude, latitude = coordinates[0], coordinates[1]
    if not (_is_coordinate(longitude) and _is_coordinate(latitude)):
        raise ValidationError("Invalid coordinates in geometry.coordinates", field="coordinates")
    return float(longitude), float(latitude)


def _build_record(**fields: Any) -> ActivityRecord:
    try:
        return ActivityRecord(**fields)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"]) or None
        raise ValidationError(f"Invalid value for {field}: {first['msg']}", field=field) from exc


def feature_to_record(feature: Mapping[str, Any]) -> ActivityRecord:
    """
    Convert a GeoJSON Point Feature into an activity draft.

    Raises:
        FormatError: not a Feature, or geometry is not a Point
        ValidationError: missing name/category or non-numeric coordinates
    """
    properties = _require_feature(feature)
    longitude, latitude = _point_coordinates(feature)

    name = _first_present(properties, PROPERTY_ALIASES["name"])
    if not name:
        raise ValidationError('Property "name" is required', field="name")
    category = _first_present(properties, PROPERTY_ALIASES["category"])
    if not category:
        raise ValidationError('Property "category" is required', field="category")

    optional = {
        field: _as_text(_first_present(properties, PROPERTY_ALIASES[field]))
        for field in OPTIONAL_TEXT_FIELDS
    }
    extended = {key: value for key, value in properties.items() if key not in KNOWN_FIELDS}

    identifier = properties.get("id")
    if isinstance(identifier, bool) or not isinstance(identifier, (int, str)):
        identifier = None

    return _build_record(
        id=identifier,
        name=_as_text(name),
        category=_as_text(category),
        latitude=latitude,
        longitude=longitude,
        extended_attributes=extended or None,
        **optional,
    )


def osm_feature_to_record(
    feature: Mapping[str, Any],
    category_override: Optional[str] = None,
) -> ActivityRecord:
    """
    Convert a Feature exported from OpenStreetMap.

    Unlike ``feature_to_record`` a name is never required and the category
    is derived from OSM tags, or taken from ``category_override`` when the
    whole batch shares one label.
    """
    properties = feature.get("properties") if isinstance(feature, Mapping) else None
    properties = properties if isinstance(properties, Mapping) else {}
    geometry = feature.get("geometry") if isinstance(feature, Mapping) else None
    coordinates = geometry.get("coordinates") if isinstance(geometry, Mapping) else None
    if not isinstance(coordinates, (list, tuple)) or len(coordinates) < 2:
        raise ValidationError("Missing coordinates", field="coordinates")
    longitude, latitude = coordinates[0], coordinates[1]
    if not (_is_coordinate(longitude) and _is_coordinate(latitude)):
        raise ValidationError("Invalid coordinates in geometry.coordinates", field="coordinates")

    name = _first_present(properties, OSM_PROPERTY_ALIASES["name"]) or OSM_DEFAULT_NAME
    address = format_osm_address(properties) or _first_present(properties, OSM_PROPERTY_ALIASES["address"])
    optional = {
        field: _as_text(_first_present(properties, OSM_PROPERTY_ALIASES[field]))
        for field in ("phone_number", "website", "description", "opening_hours")
    }
    extended = {key: value for key, value in properties.items() if key not in OSM_KNOWN_KEYS}

    return _build_record(
        name=_as_text(name),
        category=_as_text(normalize_category(properties, override=category_override)),
        latitude=float(latitude),
        longitude=float(longitude),
        address=_as_text(address),
        extended_attributes=extended or None,
        **optional,
    )


def decode_properties(raw: Any, activity_id: Any = None) -> Dict[str, Any]:
    """
    Decode a stored extended-attribute blob.

    Malformed data is logged and treated as empty so one bad row never
    breaks an export.
    """
    if not raw:
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError) as exc:
        logger.warning(
            f"Could not parse stored properties of activity {activity_id}: {exc}",
            extra={"activity_id": activity_id},
        )
        return {}
    if not isinstance(decoded, dict):
        logger.warning(
            f"Stored properties of activity {activity_id} are not an object",
            extra={"activity_id": activity_id},
        )
        return {}
    return decoded


def encode_properties(attributes: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Serialize extended attributes for storage; empty maps are stored as NULL."""
    if not attributes:
        return None
    return json.dumps(dict(attributes), ensure_ascii=False)


def record_to_feature(record: Record) -> Dict[str, Any]:
    """
    Convert an activity (draft or stored row) into a GeoJSON Point Feature.

    Optional fields are omitted when empty; extended attributes are spread
    last and win over a named field of the same key.
    """
    if isinstance(record, Activity):
        extended = decode_properties(record.properties, activity_id=record.id)
    else:
        extended = record.extended_attributes or {}

    properties: Dict[str, Any] = {
        "id": record.id,
        "name": record.name,
        "category": record.category,
    }
    for field, key in EXPORT_KEYS.items():
        value = getattr(record, field)
        if value:
            properties[key] = value
    properties.update(extended)

    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [record.longitude, record.latitude],
        },
        "properties": properties,
    }


def collection_to_records(collection: Mapping[str, Any]) -> ConversionResult:
    """
    Convert every Feature of a FeatureCollection independently.

    A failing Feature is reported by index and never aborts the batch.

    Raises:
        FormatError: not a FeatureCollection or ``features`` is not a list
    """
    if not isinstance(collection, Mapping) or collection.get("type") != "FeatureCollection":
        raise FormatError("Invalid GeoJSON: expected a FeatureCollection")
    features = collection.get("features")
    if not isinstance(features, list):
        raise FormatError('FeatureCollection must contain a "features" array')

    records = []
    errors = []
    for index, feature in enumerate(features):
        try:
            records.append(feature_to_record(feature))
        except (FormatError, ValidationError) as exc:
            errors.append(ConversionError(index=index, error=exc.message))

    if errors:
        logger.info(
            f"Converted {len(records)}/{len(features)} features, {len(errors)} failed",
            extra={"failed_indexes": [e.index for e in errors]},
        )

    return ConversionResult(
        records=records,
        errors=errors or None,
        summary=ConversionSummary(
            total=len(features),
            converted=len(records),
            failed=len(errors),
        ),
    )


def records_to_collection(records: Iterable[Record]) -> Dict[str, Any]:
    """Wrap activities into a FeatureCollection."""
    return {
        "type": "FeatureCollection",
        "features": [record_to_feature(record) for record in records],
    }

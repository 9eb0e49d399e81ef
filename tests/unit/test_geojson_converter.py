"""
Unit tests for GeoJSON <-> activity conversion
"""
import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from poi_catalog.core.exceptions import FormatError, ValidationError
from poi_catalog.models.activity import Activity
from poi_catalog.schemas.activity import ActivityRecord
from poi_catalog.services.geojson_converter import (
    OSM_DEFAULT_NAME,
    collection_to_records,
    decode_properties,
    encode_properties,
    feature_to_record,
    osm_feature_to_record,
    record_to_feature,
    records_to_collection,
)


def _feature(lon, lat, **properties):
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "properties": properties,
    }


def test_feature_to_record_swaps_coordinate_order():
    record = feature_to_record(_feature(2.35, 48.85, name="Louvre", category="musée"))
    assert record.longitude == 2.35
    assert record.latitude == 48.85


def test_feature_to_record_resolves_aliases():
    record = feature_to_record(_feature(
        2.35, 48.85,
        nom="Chez Paul",
        categorie="restaurant",
        telephone="+33 1 23 45 67 89",
        adresse="3 Rue X",
        horaires="Mo-Su 12:00-23:00",
        url="https://chezpaul.example",
    ))
    assert record.name == "Chez Paul"
    assert record.category == "restaurant"
    assert record.phone_number == "+33 1 23 45 67 89"
    assert record.address == "3 Rue X"
    assert record.opening_hours == "Mo-Su 12:00-23:00"
    assert record.website == "https://chezpaul.example"
    assert record.extended_attributes is None


def test_primary_alias_wins():
    record = feature_to_record(_feature(0, 0, name="Primary", nom="Secondary", type="bar"))
    assert record.name == "Primary"
    assert record.category == "bar"

    record = feature_to_record(_feature(0, 0, name="n", type="musée", category="other", categorie="autre"))
    assert record.category == "musée"


def test_category_used_when_type_absent():
    record = feature_to_record(_feature(0, 0, name="n", category="other", categorie="autre"))
    assert record.category == "other"


def test_unknown_properties_become_extended_attributes():
    record = feature_to_record(_feature(0, 0, name="Pool", category="piscine", wheelchair="yes", capacity=40))
    assert record.extended_attributes == {"wheelchair": "yes", "capacity": 40}


def test_feature_id_is_kept_but_not_extended():
    record = feature_to_record(_feature(0, 0, id=12, name="A", category="b"))
    assert record.id == 12
    assert record.extended_attributes is None


@pytest.mark.parametrize("feature", [
    {"type": "FeatureCollection", "features": []},
    {"type": "Feature", "geometry": None, "properties": {"name": "A", "category": "b"}},
    {"type": "Feature", "geometry": {"type": "LineString", "coordinates": [[0, 0], [1, 1]]},
     "properties": {"name": "A", "category": "b"}},
    "not a feature",
])
def test_feature_to_record_format_errors(feature):
    with pytest.raises(FormatError):
        feature_to_record(feature)


def test_missing_name_names_the_field():
    with pytest.raises(ValidationError) as exc_info:
        feature_to_record(_feature(0, 0, category="bar"))
    assert exc_info.value.field == "name"


def test_missing_category_names_the_field():
    with pytest.raises(ValidationError) as exc_info:
        feature_to_record(_feature(0, 0, name="Bar"))
    assert exc_info.value.field == "category"


@pytest.mark.parametrize("coordinates", [["2.3", "48.8"], [2.3], [True, 48.8], [2.3, float("nan")]])
def test_non_numeric_coordinates(coordinates):
    feature = {"type": "Feature", "geometry": {"type": "Point", "coordinates": coordinates},
               "properties": {"name": "A", "category": "b"}}
    with pytest.raises(ValidationError) as exc_info:
        feature_to_record(feature)
    assert exc_info.value.field == "coordinates"


def test_out_of_range_latitude():
    with pytest.raises(ValidationError) as exc_info:
        feature_to_record(_feature(0, 95, name="A", category="b"))
    assert exc_info.value.field == "latitude"


def test_record_rejects_extended_keys_shadowing_known_fields():
    with pytest.raises(PydanticValidationError):
        ActivityRecord(name="A", category="b", latitude=0, longitude=0, extended_attributes={"nom": "x"})


def test_record_normalizes_empty_extended_and_blank_text():
    record = ActivityRecord(name="A", category="b", latitude=0, longitude=0, address="  ", extended_attributes={})
    assert record.address is None
    assert record.extended_attributes is None


def test_record_to_feature_layout():
    record = ActivityRecord(
        id=3,
        name="Le Louvre",
        category="musée",
        latitude=48.8606,
        longitude=2.3376,
        website="https://www.louvre.fr",
        extended_attributes={"wheelchair": "yes"},
    )
    feature = record_to_feature(record)
    assert feature["type"] == "Feature"
    assert feature["geometry"] == {"type": "Point", "coordinates": [2.3376, 48.8606]}
    assert feature["properties"] == {
        "id": 3,
        "name": "Le Louvre",
        "category": "musée",
        "website": "https://www.louvre.fr",
        "wheelchair": "yes",
    }
    assert list(feature["properties"])[:3] == ["id", "name", "category"]


def test_record_to_feature_uses_camel_case_keys():
    record = ActivityRecord(name="A", category="b", latitude=0, longitude=0,
                            phone_number="0102", opening_hours="24/7")
    properties = record_to_feature(record)["properties"]
    assert properties["phoneNumber"] == "0102"
    assert properties["openingHours"] == "24/7"


@pytest.mark.parametrize("extended", [None, {"wheelchair": "yes", "stars": 4}])
def test_round_trip(extended):
    record = ActivityRecord(
        id=9,
        name="Bowling Star",
        category="bowling",
        latitude=45.75,
        longitude=4.85,
        address="1 Place Bellecour, 69002 Lyon",
        phone_number="+33 4 00 00 00 00",
        website="https://bowling.example",
        description="16 pistes",
        opening_hours="Tu-Su 14:00-01:00",
        extended_attributes=extended,
    )
    assert feature_to_record(record_to_feature(record)) == record


def test_collection_continues_past_failures():
    collection = {
        "type": "FeatureCollection",
        "features": [
            _feature(2.0, 48.0, name="A", category="bar"),
            _feature(2.1, 48.1, name="B", category="bar"),
            _feature(2.2, 48.2, category="bar"),
            _feature(2.3, 48.3, name="D", category="bar"),
        ],
    }
    result = collection_to_records(collection)
    assert [r.name for r in result.records] == ["A", "B", "D"]
    assert result.summary.total == 4
    assert result.summary.converted == 3
    assert result.summary.failed == 1
    assert len(result.errors) == 1
    assert result.errors[0].index == 2
    assert "name" in result.errors[0].error


def test_collection_without_failures_has_no_error_list():
    result = collection_to_records({"type": "FeatureCollection", "features": [_feature(0, 0, name="A", category="b")]})
    assert result.errors is None
    assert result.summary.failed == 0


@pytest.mark.parametrize("document", [
    {"type": "Feature"},
    {"type": "FeatureCollection"},
    {"type": "FeatureCollection", "features": {}},
    [],
])
def test_collection_rejects_bad_top_level(document):
    with pytest.raises(FormatError):
        collection_to_records(document)


def test_decode_properties_degrades_to_empty(caplog):
    with caplog.at_level(logging.WARNING):
        assert decode_properties("{not json", activity_id=4) == {}
    assert "activity 4" in caplog.text
    assert decode_properties("[1, 2]") == {}
    assert decode_properties(None) == {}
    assert decode_properties('{"a": 1}') == {"a": 1}


def test_encode_properties_stores_null_for_empty():
    assert encode_properties(None) is None
    assert encode_properties({}) is None
    assert encode_properties({"nom_court": "Café"}) == '{"nom_court": "Café"}'


def test_export_survives_malformed_stored_properties():
    good = Activity(id=1, name="A", category="bar", latitude=1.0, longitude=2.0, properties='{"stars": 3}')
    bad = Activity(id=2, name="B", category="bar", latitude=3.0, longitude=4.0, properties="{oops")
    collection = records_to_collection([good, bad])
    assert collection["type"] == "FeatureCollection"
    assert collection["features"][0]["properties"]["stars"] == 3
    assert collection["features"][1]["properties"] == {"id": 2, "name": "B", "category": "bar"}


def test_osm_feature_uses_tags_and_defaults():
    feature = _feature(
        2.29, 48.86,
        amenity="museum",
        phone="+33 1 00",
        **{
            "addr:housenumber": "5",
            "addr:street": "Avenue Anatole France",
            "addr:postcode": "75007",
            "addr:city": "Paris",
            "wheelchair": "yes",
        },
    )
    record = osm_feature_to_record(feature)
    assert record.name == OSM_DEFAULT_NAME
    assert record.category == "musée"
    assert record.address == "5, Avenue Anatole France, 75007 Paris"
    assert record.phone_number == "+33 1 00"
    assert record.extended_attributes == {"wheelchair": "yes"}


def test_osm_feature_override_wins_over_tags():
    feature = _feature(0, 0, name="Laser Quest", type="arcade", leisure="park")
    record = osm_feature_to_record(feature, category_override="laser game")
    assert record.category == "laser game"
    assert record.name == "Laser Quest"


def test_osm_feature_without_coordinates():
    with pytest.raises(ValidationError):
        osm_feature_to_record({"type": "Feature", "geometry": None, "properties": {"name": "A"}})

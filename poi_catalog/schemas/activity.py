"""
Activity schemas for API requests/responses and GeoJSON conversion.

``ActivityRecord`` is the draft produced by GeoJSON import and consumed by
export: a fixed set of named fields plus one open ``extended_attributes``
mapping. Construction rejects extended keys that shadow a known field, and
normalizes blank optional text and empty mappings to ``None``.
"""
from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# GeoJSON property aliases per named field, highest priority first
PROPERTY_ALIASES = {
    "name": ("name", "nom"),
    "category": ("type", "category", "categorie"),
    "address": ("address", "adresse"),
    "phone_number": ("phoneNumber", "phone", "telephone", "tel"),
    "website": ("website", "site", "url"),
    "description": ("description", "desc"),
    "opening_hours": ("openingHours", "opening_hours", "horaires"),
}

# Property keys that can never be extended attributes: every alias, the
# Python field names and the store identifier
KNOWN_FIELDS = frozenset(
    {alias for aliases in PROPERTY_ALIASES.values() for alias in aliases}
    | set(PROPERTY_ALIASES)
    | {"id"}
)

OPTIONAL_TEXT_FIELDS = ("address", "phone_number", "website", "description", "opening_hours")


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_extended_keys(attributes: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not attributes:
        return None
    clashes = sorted(KNOWN_FIELDS.intersection(attributes))
    if clashes:
        raise ValueError(f"extended_attributes must not contain known fields: {', '.join(clashes)}")
    return attributes


class ActivityBase(BaseModel):
    """Fields shared by creation payloads and conversion drafts"""
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=128)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None
    phone_number: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    opening_hours: Optional[str] = None
    extended_attributes: Optional[Dict[str, Any]] = None

    @field_validator("name", "category", mode="before")
    @classmethod
    def strip_required_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_optional_text(cls, v):
        return _blank_to_none(v)

    @field_validator("extended_attributes")
    @classmethod
    def validate_extended_attributes(cls, v):
        return _check_extended_keys(v)


class ActivityCreate(ActivityBase):
    """Schema for creating an activity through the API"""
    pass


class ActivityRecord(ActivityBase):
    """Store-independent draft of an activity, as exchanged with GeoJSON.

    ``id`` is carried through conversion but never used when persisting.
    """
    id: Optional[Union[int, str]] = None


class ActivityPatch(BaseModel):
    """
    Partial update: only the fields present in the payload are applied.

    Coordinates move together, so a patch carries both or neither.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, min_length=1, max_length=128)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = None
    phone_number: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    opening_hours: Optional[str] = None
    extended_attributes: Optional[Dict[str, Any]] = None

    @field_validator("name", "category", mode="before")
    @classmethod
    def strip_required_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_optional_text(cls, v):
        return _blank_to_none(v)

    @field_validator("extended_attributes")
    @classmethod
    def validate_extended_attributes(cls, v):
        return _check_extended_keys(v)

    @model_validator(mode="after")
    def check_required_and_coordinates(self):
        supplied = self.model_fields_set
        for field in ("name", "category", "latitude", "longitude"):
            if field in supplied and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        if ("latitude" in supplied) != ("longitude" in supplied):
            raise ValueError("latitude and longitude must be updated together")
        return self

    def changes(self) -> Dict[str, Any]:
        """Supplied fields only, keyed by attribute name"""
        return self.model_dump(exclude_unset=True)


class ActivitySummary(BaseModel):
    """Lightweight projection used for map display and radius queries"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    latitude: float
    longitude: float
    category: str


class ActivityRead(BaseModel):
    """Schema for full activity detail"""
    id: int
    name: str
    category: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    phone_number: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    opening_hours: Optional[str] = None
    extended_attributes: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

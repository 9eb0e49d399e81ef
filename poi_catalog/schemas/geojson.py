"""
Result schemas for GeoJSON conversion and import.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from poi_catalog.schemas.activity import ActivityRead, ActivityRecord


class ConversionError(BaseModel):
    """A Feature that could not be converted, by position in the collection"""
    index: int
    error: str


class ConversionSummary(BaseModel):
    total: int = 0
    converted: int = 0
    failed: int = 0


class ConversionResult(BaseModel):
    """Outcome of converting a FeatureCollection; errors is None when every Feature converted"""
    records: List[ActivityRecord] = Field(default_factory=list)
    errors: Optional[List[ConversionError]] = None
    summary: ConversionSummary = Field(default_factory=ConversionSummary)


class StoreError(BaseModel):
    """A converted record the store refused"""
    activity: str
    error: str


class ImportSummary(BaseModel):
    total: int = 0
    success: int = 0
    failed: int = 0


class ImportReport(BaseModel):
    """Response body of a GeoJSON import"""
    imported: List[ActivityRead] = Field(default_factory=list)
    summary: ImportSummary = Field(default_factory=ImportSummary)
    conversion_errors: Optional[List[ConversionError]] = None
    db_errors: Optional[List[StoreError]] = None

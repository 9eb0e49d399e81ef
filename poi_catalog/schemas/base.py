from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional, Generic, TypeVar, Dict
from datetime import datetime, timezone
import uuid

T = TypeVar('T')


class Envelope(BaseModel, Generic[T]):
    status: str
    data: Optional[T] = None
    error: Optional[str] = None


class ListEnvelope(Envelope[T], Generic[T]):
    count: int = 0


class Message(BaseModel):
    message: str


class StandardErrorResponse(BaseModel):
    """Standardized error response format"""
    status: str = "error"
    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('error_code')
    @classmethod
    def validate_error_code(cls, v):
        if not v or not v.isupper():
            raise ValueError("error_code must be a non-empty uppercase string")
        return v

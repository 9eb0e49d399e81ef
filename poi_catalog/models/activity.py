from sqlalchemy.orm import relationship
from sqlalchemy import Column, Integer, String, Float, Text, DateTime, func

from poi_catalog.core.db import Base


class Activity(Base):
    """
    A geolocated point of interest.

    ``properties`` holds the extended attributes as JSON text; services decode
    it at the store boundary.
    """
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(128), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(512), nullable=True)
    phone_number = Column(String(64), nullable=True)
    website = Column(String(512), nullable=True)
    description = Column(Text, nullable=True)
    opening_hours = Column(String(255), nullable=True)
    properties = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    favorites = relationship(
        "Favorite",
        back_populates="activity",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Activity id={self.id} name={self.name!r} category={self.category!r}>"

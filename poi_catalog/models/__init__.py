"""
SQLAlchemy models for the POI catalog.
"""

from .activity import Activity
from .favorite import Favorite

__all__ = [
    "Activity",
    "Favorite",
]

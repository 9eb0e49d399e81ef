# API endpoints and routers

from .activities_endpoints import router as activities_router
from .favorites_endpoints import router as favorites_router
from .health_endpoints import router as health_router

__all__ = [
    "activities_router",
    "favorites_router",
    "health_router",
]

"""POI catalog: geolocated activities, favorites and GeoJSON interchange."""

__version__ = "2.0.0"

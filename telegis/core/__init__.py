"""
Core domain models and pure geospatial logic for telegis.

This module contains the domain models, projection and boundary index
that are independent of I/O and UI concerns. Geofence validation lives
in ``telegis.core.geofence``.
"""

from .models import (
    BatchValidationResult, BoundingBox, GeofenceViolation, GeoPoint,
    Point2D, Region, SavedPolygon, ValidationResult, Vertex,
)
from .projection import CoordinateProjector
from .boundary import BoundaryIndex

__all__ = [
    "BatchValidationResult", "BoundingBox", "GeofenceViolation", "GeoPoint",
    "Point2D", "Region", "SavedPolygon", "ValidationResult", "Vertex",
    "CoordinateProjector", "BoundaryIndex",
]

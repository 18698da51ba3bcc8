"""
Adapters for telegis.

This module contains the concrete implementations of port interfaces
that feed external data into the geospatial core.
"""

from .geojson_regions import GeoJsonRegionSource, load_regions

__all__ = ["GeoJsonRegionSource", "load_regions"]

"""
telegis - geospatial measurement and geofencing core for the
telecom-GIS operations dashboard.
"""

__version__ = "0.1.0"

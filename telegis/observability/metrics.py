"""
Metrics definitions for telegis.

This module defines Prometheus metrics for monitoring
geofence validation and measurement tool usage.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
geofence_checks = Counter(
    "geofence_checks_total",
    "Number of geofence point validations",
    ["result", "violation_type"]
)

measurement_points = Counter(
    "measurement_points_total",
    "Distance measurement point placements",
    ["outcome"]
)

polygon_vertices = Counter(
    "polygon_vertices_total",
    "Polygon draft vertex placements",
    ["outcome"]
)

polygons_completed = Counter(
    "polygons_completed_total",
    "Polygon completion attempts",
    ["outcome"]
)

polygon_vertex_drags = Counter(
    "polygon_vertex_drags_total",
    "Saved polygon vertex drag updates",
    ["outcome"]
)

# 히스토그램 메트릭
validation_seconds = Histogram(
    "validation_duration_seconds",
    "Time spent validating a single point",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1]
)

# 게이지 메트릭
regions_loaded = Gauge(
    "regions_loaded",
    "Number of named regions in the boundary index"
)

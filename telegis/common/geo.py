"""
Geographic utilities for telegis.

This module provides geographic calculations including
great-circle distance, path length, planar-projected polygon
area and perimeter, point-in-ring testing and point-to-edge
distances.

Points are any objects exposing ``lat`` and ``lng`` attributes
(``telegis.core.models.GeoPoint``). Ring helpers work on raw
``(lng, lat)`` tuples, the GeoJSON coordinate order.
"""

import math
from typing import Iterable, List, Sequence, Tuple

# 지구 반지름 (킬로미터 / 마일)
EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_MILES = 3959.0

# 평면 근사 면적 계산용 위경도 1도당 미터
METERS_PER_DEG_LNG = 111320.0
METERS_PER_DEG_LAT = 110540.0

# 경계 거리 계산용 위경도 1도당 킬로미터 (면적 근사와 같은 상수)
KM_PER_DEG_LNG = METERS_PER_DEG_LNG / 1000.0
KM_PER_DEG_LAT = METERS_PER_DEG_LAT / 1000.0

# 꼭짓점/변 위 판정 허용 오차 (도)
ON_EDGE_EPSILON = 1e-12

_RADIUS_BY_UNIT = {
    "km": EARTH_RADIUS_KM,
    "miles": EARTH_RADIUS_MILES,
}


def radius_for_unit(unit: str) -> float:
    """
    거리 단위에 해당하는 지구 반지름을 반환합니다.

    Args:
        unit: "km" 또는 "miles"

    Returns:
        해당 단위의 지구 반지름
    """
    try:
        return _RADIUS_BY_UNIT[unit]
    except KeyError:
        raise ValueError(f"지원하지 않는 거리 단위: {unit}") from None


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float,
                       radius: float = EARTH_RADIUS_KM) -> float:
    """
    두 지점 간의 Haversine 거리를 계산합니다.

    Args:
        lat1: 첫 번째 지점의 위도
        lon1: 첫 번째 지점의 경도
        lat2: 두 번째 지점의 위도
        lon2: 두 번째 지점의 경도
        radius: 지구 반지름 (결과 단위를 결정)

    Returns:
        두 지점 간의 거리 (radius와 같은 단위)
    """
    # 도를 라디안으로 변환
    lat1_rad = math.radians(lat1)
    lon1_rad = math.radians(lon1)
    lat2_rad = math.radians(lat2)
    lon2_rad = math.radians(lon2)

    # 위도와 경도의 차이
    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    # Haversine 공식
    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    c = 2 * math.asin(min(1.0, math.sqrt(a)))

    return c * radius


def distance(a, b, radius: float = EARTH_RADIUS_KM) -> float:
    """두 GeoPoint 사이의 대권 거리를 계산합니다."""
    return haversine_distance(a.lat, a.lng, b.lat, b.lng, radius)


def segment_distances(points: Sequence, radius: float = EARTH_RADIUS_KM) -> List[float]:
    """연속한 두 점 사이의 구간 거리 목록을 반환합니다."""
    return [distance(points[i - 1], points[i], radius) for i in range(1, len(points))]


def path_length(points: Sequence, radius: float = EARTH_RADIUS_KM) -> float:
    """
    경로의 총 길이를 계산합니다.

    Args:
        points: 순서가 있는 GeoPoint 목록
        radius: 지구 반지름

    Returns:
        구간 거리의 합 (점이 2개 미만이면 0)
    """
    return sum(segment_distances(points, radius), 0.0)


def _to_planar_meters(point) -> Tuple[float, float]:
    x = point.lng * METERS_PER_DEG_LNG * math.cos(math.radians(point.lat))
    y = point.lat * METERS_PER_DEG_LAT
    return x, y


def polygon_area(vertices: Sequence) -> float:
    """
    폴리곤 면적을 Shoelace 공식으로 계산합니다 (km²).

    각 꼭짓점을 x = lng * 111320 * cos(lat), y = lat * 110540 의
    평면 미터 좌표로 근사한 뒤 계산합니다. 한 국가 규모에서 쓰는
    근사이며 화면 표시 값이 이 근사에 맞춰져 있습니다.

    Args:
        vertices: 닫히지 않은 GeoPoint 목록

    Returns:
        면적 (제곱킬로미터), 꼭짓점이 3개 미만이면 0
    """
    n = len(vertices)
    if n < 3:
        return 0.0

    planar = [_to_planar_meters(v) for v in vertices]
    area = 0.0
    for i in range(n):
        xi, yi = planar[i]
        xj, yj = planar[(i + 1) % n]
        area += xi * yj - xj * yi

    return abs(area) / (2 * 1_000_000)


def polygon_perimeter(vertices: Sequence, radius: float = EARTH_RADIUS_KM) -> float:
    """
    닫힌 링의 둘레를 계산합니다 (마지막 꼭짓점은 첫 꼭짓점과 연결).

    Args:
        vertices: GeoPoint 목록
        radius: 지구 반지름

    Returns:
        둘레, 꼭짓점이 2개 미만이면 0
    """
    n = len(vertices)
    if n < 2:
        return 0.0
    return sum(distance(vertices[i], vertices[(i + 1) % n], radius) for i in range(n))


def _on_segment(x: float, y: float, x1: float, y1: float, x2: float, y2: float) -> bool:
    cross = (x - x1) * (y2 - y1) - (y - y1) * (x2 - x1)
    scale = max(abs(x2 - x1), abs(y2 - y1), 1.0)
    if abs(cross) > ON_EDGE_EPSILON * scale:
        return False
    return (min(x1, x2) - ON_EDGE_EPSILON <= x <= max(x1, x2) + ON_EDGE_EPSILON
            and min(y1, y2) - ON_EDGE_EPSILON <= y <= max(y1, y2) + ON_EDGE_EPSILON)


def point_in_polygon(point: Tuple[float, float], polygon: Sequence[Tuple[float, float]]) -> bool:
    """
    점이 폴리곤 링 내부에 있는지 Ray casting 알고리즘으로 확인합니다.

    변이나 꼭짓점 위의 점은 내부로 취급합니다.

    Args:
        point: 확인할 점 (경도, 위도)
        polygon: 링의 꼭짓점들 [(경도, 위도), ...], 닫힘 여부 무관

    Returns:
        점이 링 내부 또는 경계 위에 있으면 True
    """
    if len(polygon) < 3:
        return False

    x, y = point
    n = len(polygon)
    inside = False

    j = n - 1
    for i in range(n):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if _on_segment(x, y, xi, yi, xj, yj):
            return True
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i

    return inside


def point_segment_distance_km(point: Tuple[float, float],
                              a: Tuple[float, float],
                              b: Tuple[float, float]) -> float:
    """
    점과 선분 사이의 최단 거리를 국소 평면 근사로 계산합니다 (km).

    Args:
        point: 점 (경도, 위도)
        a: 선분 시작 (경도, 위도)
        b: 선분 끝 (경도, 위도)

    Returns:
        최단 거리 (킬로미터)
    """
    lng0, lat0 = point
    kx = KM_PER_DEG_LNG * math.cos(math.radians(lat0))
    ky = KM_PER_DEG_LAT

    # 점을 원점으로 하는 국소 좌표
    ax, ay = (a[0] - lng0) * kx, (a[1] - lat0) * ky
    bx, by = (b[0] - lng0) * kx, (b[1] - lat0) * ky
    dx, dy = bx - ax, by - ay

    seg2 = dx * dx + dy * dy
    if seg2 == 0:
        return math.hypot(ax, ay)

    t = max(0.0, min(1.0, -(ax * dx + ay * dy) / seg2))
    return math.hypot(ax + t * dx, ay + t * dy)


def distance_to_ring_km(point: Tuple[float, float], ring: Sequence[Tuple[float, float]]) -> float:
    """점에서 링의 가장 가까운 변까지의 거리 (km)."""
    n = len(ring)
    if n == 0:
        return math.inf
    if n == 1:
        return point_segment_distance_km(point, ring[0], ring[0])
    return min(point_segment_distance_km(point, ring[i - 1], ring[i]) for i in range(n))


def calculate_bounding_box(polygon: Iterable[Tuple[float, float]]) -> Tuple[float, float, float, float]:
    """
    폴리곤의 경계 상자를 계산합니다.

    Args:
        polygon: 폴리곤의 꼭짓점들 [(경도, 위도), ...]

    Returns:
        (min_lon, min_lat, max_lon, max_lat)
    """
    polygon = list(polygon)
    if not polygon:
        return (0, 0, 0, 0)

    lons = [p[0] for p in polygon]
    lats = [p[1] for p in polygon]

    return (min(lons), min(lats), max(lons), max(lats))


def validate_coordinates(lat: float, lon: float) -> bool:
    """
    좌표가 유효한지 확인합니다.

    Args:
        lat: 위도
        lon: 경도

    Returns:
        좌표가 유효하면 True
    """
    return -90 <= lat <= 90 and -180 <= lon <= 180

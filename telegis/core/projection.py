"""
Pixel/geographic coordinate projection for telegis.

This module maps between viewport pixel space and latitude/longitude
with a fixed linear (equirectangular) mapping over a bounding box.
"""

from telegis.core.models import BoundingBox, GeoPoint, Point2D


class CoordinateProjector:
    """뷰포트 픽셀 좌표와 위경도 간 양방향 변환"""

    def __init__(self, bounds: BoundingBox):
        """
        초기화합니다.

        Args:
            bounds: 뷰포트 전체에 대응하는 위경도 경계 상자
        """
        if bounds.lat_max <= bounds.lat_min or bounds.lng_max <= bounds.lng_min:
            raise ValueError(f"경계 상자 범위가 올바르지 않습니다: {bounds}")
        self.bounds = bounds
        self._lat_span = bounds.lat_max - bounds.lat_min
        self._lng_span = bounds.lng_max - bounds.lng_min

    @staticmethod
    def _check_viewport(viewport_w: float, viewport_h: float) -> None:
        if viewport_w <= 0 or viewport_h <= 0:
            raise ValueError(f"뷰포트 크기는 양수여야 합니다: {viewport_w}x{viewport_h}")

    def to_geo(self, x: float, y: float, viewport_w: float, viewport_h: float) -> GeoPoint:
        """
        픽셀 좌표를 위경도로 변환합니다.

        뷰포트 밖 좌표도 그대로 변환합니다 (거부는 검증기의 역할).

        Args:
            x: 픽셀 x
            y: 픽셀 y
            viewport_w: 뷰포트 너비
            viewport_h: 뷰포트 높이

        Returns:
            변환된 GeoPoint
        """
        self._check_viewport(viewport_w, viewport_h)
        lat = self.bounds.lat_max - (y / viewport_h) * self._lat_span
        lng = self.bounds.lng_min + (x / viewport_w) * self._lng_span
        return GeoPoint(lat=lat, lng=lng)

    def to_pixel(self, lat: float, lng: float, viewport_w: float, viewport_h: float) -> Point2D:
        """
        위경도를 픽셀 좌표로 변환합니다 (to_geo의 역변환).

        Args:
            lat: 위도
            lng: 경도
            viewport_w: 뷰포트 너비
            viewport_h: 뷰포트 높이

        Returns:
            변환된 Point2D
        """
        self._check_viewport(viewport_w, viewport_h)
        x = (lng - self.bounds.lng_min) / self._lng_span * viewport_w
        y = (self.bounds.lat_max - lat) / self._lat_span * viewport_h
        return Point2D(x=x, y=y)

    def point_to_pixel(self, point: GeoPoint, viewport_w: float, viewport_h: float) -> Point2D:
        return self.to_pixel(point.lat, point.lng, viewport_w, viewport_h)

    def within_bounds(self, point: GeoPoint) -> bool:
        """점이 투영 경계 상자 안에 있는지 확인합니다."""
        return self.bounds.contains(point)

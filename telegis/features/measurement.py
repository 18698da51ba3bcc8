"""
Distance measurement tool for telegis.

This module keeps an ordered path of validated vertices and
recomputes the cumulative great-circle distance after every
insert, undo or clear.
"""

from typing import List, Optional, Sequence, Tuple

from telegis.common.geo import path_length, radius_for_unit, segment_distances
from telegis.core.geofence import GeofenceValidator, ViolationLog
from telegis.core.models import (
    DistanceUnit,
    GeoPoint,
    MeasurementSummary,
    Point2D,
    ValidationResult,
    Vertex,
)
from telegis.core.projection import CoordinateProjector
from telegis.features.base import GeofencedSession
from telegis.observability import metrics
from telegis.observability.logging_setup import get_logger
from telegis.ports.notify import NotificationPort

log = get_logger("telegis.measurement")


class MeasurementSession(GeofencedSession):
    """거리 측정 세션

    누적 거리는 현재 꼭짓점 순서 전체에 대해 매번 다시 계산합니다.
    """

    def __init__(self,
                 validator: GeofenceValidator,
                 projector: CoordinateProjector,
                 *,
                 unit: DistanceUnit = "km",
                 allowed_region_names: Optional[Sequence[str]] = None,
                 violations: Optional[ViolationLog] = None,
                 notifier: Optional[NotificationPort] = None):
        super().__init__(validator, projector,
                         allowed_region_names=allowed_region_names,
                         violations=violations,
                         notifier=notifier)
        self._radius = radius_for_unit(unit)
        self._unit: DistanceUnit = unit
        self._vertices: List[Vertex] = []
        self._cumulative = 0.0

    @property
    def unit(self) -> DistanceUnit:
        return self._unit

    @property
    def vertices(self) -> Tuple[Vertex, ...]:
        return tuple(self._vertices)

    @property
    def points(self) -> List[GeoPoint]:
        return [v.point for v in self._vertices]

    @property
    def cumulative_distance(self) -> float:
        """현재 경로의 총 거리 (세션 단위)"""
        return self._cumulative

    @property
    def is_empty(self) -> bool:
        return not self._vertices

    def __len__(self) -> int:
        return len(self._vertices)

    def _recompute(self) -> None:
        self._cumulative = path_length(self.points, self._radius)

    def add_point(self, point: GeoPoint, pixel: Optional[Point2D] = None) -> ValidationResult:
        """
        검증을 통과한 점을 경로 끝에 추가합니다.

        Args:
            point: 추가할 점
            pixel: 화면 좌표 (있으면 꼭짓점에 함께 보관)

        Returns:
            검증 결과 (유효하지 않으면 경로는 바뀌지 않음)
        """
        result = self._admit(point, "Location Restricted")
        if not result.is_valid:
            self._count(metrics.measurement_points, "rejected")
            return result

        self._vertices.append(Vertex(point=point, pixel=pixel))
        self._recompute()
        self._count(metrics.measurement_points, "accepted")

        log.debug("측정 지점 추가됨",
                  points=len(self._vertices),
                  cumulative=self._cumulative,
                  unit=self._unit)
        return result

    def place(self, x: float, y: float, viewport_w: float, viewport_h: float) -> ValidationResult:
        """화면 클릭 위치를 위경도로 변환한 뒤 add_point를 수행합니다."""
        point = self.projector.to_geo(x, y, viewport_w, viewport_h)
        return self.add_point(point, Point2D(x=x, y=y))

    def undo_last(self) -> Optional[Vertex]:
        """마지막 꼭짓점을 제거하고 제거된 꼭짓점을 반환합니다."""
        if not self._vertices:
            return None
        removed = self._vertices.pop()
        self._recompute()
        return removed

    def clear(self) -> None:
        self._vertices.clear()
        self._recompute()

    def set_unit(self, unit: DistanceUnit) -> None:
        """거리 단위를 바꿉니다 (저장된 꼭짓점은 그대로)."""
        self._radius = radius_for_unit(unit)
        self._unit = unit
        self._recompute()

    def segment_distances(self) -> List[float]:
        """각 구간 거리 목록"""
        return segment_distances(self.points, self._radius)

    def cumulative_at(self, index: int) -> float:
        """index번째 꼭짓점까지의 누적 거리"""
        if not 0 <= index < len(self._vertices):
            raise IndexError(index)
        return path_length(self.points[:index + 1], self._radius)

    def summary(self) -> MeasurementSummary:
        segments = self.segment_distances()
        cumulative = [0.0] if self._vertices else []
        for d in segments:
            cumulative.append(cumulative[-1] + d)
        return MeasurementSummary(
            unit=self._unit,
            point_count=len(self._vertices),
            segment_distances=segments,
            cumulative_distances=cumulative,
            cumulative_distance=self._cumulative,
        )

    def reproject(self, viewport_w: float, viewport_h: float) -> None:
        """뷰포트 변경 후 모든 꼭짓점의 화면 좌표를 다시 계산합니다."""
        self._vertices = self._reprojected(self._vertices, viewport_w, viewport_h)

"""
Polygon drawing tool for telegis.

This module manages the in-progress polygon draft and the collection
of saved polygons. Area and perimeter are recomputed from the vertices
on every mutation; a saved polygon is replaced as a whole when one of
its vertices is dragged, so its metrics never lag its geometry.
"""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID

from telegis.common.geo import polygon_area, polygon_perimeter
from telegis.core.constants import POLYGON_COLORS
from telegis.core.errors import UnknownPolygonError, UnknownVertexError
from telegis.core.geofence import GeofenceValidator, ViolationLog
from telegis.core.models import (
    GeoPoint,
    Point2D,
    PolygonStats,
    SavedPolygon,
    ValidationResult,
    Vertex,
)
from telegis.core.projection import CoordinateProjector
from telegis.features.base import GeofencedSession
from telegis.observability import metrics
from telegis.observability.logging_setup import get_logger
from telegis.ports.notify import NotificationPort

log = get_logger("telegis.polygon")

MIN_POLYGON_VERTICES = 3


class PolygonSession(GeofencedSession):
    """폴리곤 그리기 세션"""

    def __init__(self,
                 validator: GeofenceValidator,
                 projector: CoordinateProjector,
                 *,
                 palette: Optional[Mapping[str, str]] = None,
                 allowed_region_names: Optional[Sequence[str]] = None,
                 violations: Optional[ViolationLog] = None,
                 notifier: Optional[NotificationPort] = None):
        super().__init__(validator, projector,
                         allowed_region_names=allowed_region_names,
                         violations=violations,
                         notifier=notifier)
        self.palette: Dict[str, str] = dict(palette or POLYGON_COLORS)
        self._draft: List[Vertex] = []
        self._draft_stats = PolygonStats(vertex_count=0, area_km2=0.0, perimeter_km=0.0, is_valid=False)
        self._saved: Dict[UUID, SavedPolygon] = {}
        # 삭제 후에도 줄지 않는 저장 횟수 (기본 이름 번호)
        self._completed = 0
        # 폴리곤 id → (꼭짓점 id → 위치)
        self._slots: Dict[UUID, Dict[UUID, int]] = {}

    # ---- 작성 중 폴리곤 ----

    @property
    def draft(self) -> Tuple[Vertex, ...]:
        return tuple(self._draft)

    def draft_stats(self) -> PolygonStats:
        return self._draft_stats

    def _recompute_draft(self) -> None:
        points = [v.point for v in self._draft]
        area = polygon_area(points)
        self._draft_stats = PolygonStats(
            vertex_count=len(points),
            area_km2=area,
            perimeter_km=polygon_perimeter(points),
            is_valid=area > 0 and len(points) >= MIN_POLYGON_VERTICES,
        )

    def add_vertex(self, point: GeoPoint, pixel: Optional[Point2D] = None) -> ValidationResult:
        """
        검증을 통과한 점을 작성 중 폴리곤에 추가합니다.

        Args:
            point: 추가할 점
            pixel: 화면 좌표

        Returns:
            검증 결과 (유효하지 않으면 초안은 바뀌지 않음)
        """
        result = self._admit(point, "Location Restricted")
        if not result.is_valid:
            self._count(metrics.polygon_vertices, "rejected")
            return result

        self._draft.append(Vertex(point=point, pixel=pixel))
        self._recompute_draft()
        self._count(metrics.polygon_vertices, "accepted")
        return result

    def place(self, x: float, y: float, viewport_w: float, viewport_h: float) -> ValidationResult:
        """화면 클릭 위치를 위경도로 변환한 뒤 add_vertex를 수행합니다."""
        point = self.projector.to_geo(x, y, viewport_w, viewport_h)
        return self.add_vertex(point, Point2D(x=x, y=y))

    def remove_last_vertex(self) -> Optional[Vertex]:
        if not self._draft:
            return None
        removed = self._draft.pop()
        self._recompute_draft()
        return removed

    def clear_draft(self) -> None:
        self._draft.clear()
        self._recompute_draft()

    def complete(self, name: Optional[str] = None, color: Optional[str] = None) -> ValidationResult:
        """
        작성 중 폴리곤을 검증하여 저장합니다.

        꼭짓점이 3개 미만이거나 하나라도 지오펜스를 벗어나면 저장하지 않고
        초안을 그대로 둡니다.

        Args:
            name: 폴리곤 이름 (없으면 "Polygon N")
            color: 선 색상 (없으면 팔레트 첫 색상)

        Returns:
            검증 결과
        """
        if len(self._draft) < MIN_POLYGON_VERTICES:
            self._count(metrics.polygons_completed, "too_few_vertices")
            result = ValidationResult(
                is_valid=False,
                message=f"A polygon must have at least {MIN_POLYGON_VERTICES} vertices",
                suggested_action="Add more vertices before completing the polygon",
                violation_type="too_few_vertices",
            )
            self._notify("error", "Invalid Polygon", result.message)
            return result

        batch = self.validator.validate_many([v.point for v in self._draft], self.allowed_region_names)
        if not batch.is_valid:
            failure = batch.first_failure
            self._count(metrics.polygons_completed, "rejected")
            result = failure.result.model_copy(update={"message": batch.message})
            self.violations.record(self._draft[failure.index].point, result)
            self._notify("error", "Invalid Polygon", result.message)
            log.info(f"폴리곤 완성 거부됨 vertex_index:{failure.index} "
                     f"reason:{failure.result.violation_type}")
            return result

        polygon = SavedPolygon.build(
            name=(name or "").strip() or f"Polygon {self._completed + 1}",
            vertices=self._draft,
            color=color or next(iter(self.palette.values())),
        )
        self._saved[polygon.id] = polygon
        self._completed += 1
        self._slots[polygon.id] = {v.id: i for i, v in enumerate(polygon.vertices)}
        self._draft = []
        self._recompute_draft()
        self._count(metrics.polygons_completed, "saved")

        log.info(f"폴리곤 저장됨 name:{polygon.name} vertices:{len(polygon.vertices)} "
                 f"area_km2:{polygon.area_km2:.4f} perimeter_km:{polygon.perimeter_km:.2f}")
        return ValidationResult(is_valid=True, message=f"Polygon '{polygon.name}' saved")

    # ---- 저장된 폴리곤 ----

    @property
    def saved(self) -> Tuple[SavedPolygon, ...]:
        return tuple(self._saved.values())

    def get(self, polygon_id: UUID) -> SavedPolygon:
        try:
            return self._saved[polygon_id]
        except KeyError:
            raise UnknownPolygonError(polygon_id) from None

    def drag_vertex(self,
                    polygon_id: UUID,
                    vertex_id: UUID,
                    new_point: GeoPoint,
                    pixel: Optional[Point2D] = None) -> ValidationResult:
        """
        저장된 폴리곤의 꼭짓점을 옮기고 그 폴리곤의 지표를 다시 계산합니다.

        새 위치가 지오펜스를 벗어나면 아무것도 바꾸지 않습니다.
        같은 위치로 반복 호출해도 결과는 같습니다.

        Args:
            polygon_id: 저장 폴리곤 id
            vertex_id: 꼭짓점 id
            new_point: 새 위치
            pixel: 새 화면 좌표

        Returns:
            검증 결과

        Raises:
            UnknownPolygonError: 폴리곤 id가 없음
            UnknownVertexError: 꼭짓점 id가 폴리곤에 없음
        """
        polygon = self.get(polygon_id)
        slot = self._slots[polygon_id].get(vertex_id)
        if slot is None:
            raise UnknownVertexError(vertex_id)

        result = self._admit(new_point, "Location Restricted")
        if not result.is_valid:
            self._count(metrics.polygon_vertex_drags, "rejected")
            return result

        vertices = list(polygon.vertices)
        vertices[slot] = vertices[slot].moved_to(new_point, pixel)
        self._saved[polygon_id] = polygon.with_vertices(vertices)
        self._count(metrics.polygon_vertex_drags, "applied")
        return result

    def drag_vertex_to(self, polygon_id: UUID, vertex_id: UUID,
                       x: float, y: float, viewport_w: float, viewport_h: float) -> ValidationResult:
        """화면 좌표로 꼭짓점 드래그를 수행합니다."""
        point = self.projector.to_geo(x, y, viewport_w, viewport_h)
        return self.drag_vertex(polygon_id, vertex_id, point, Point2D(x=x, y=y))

    def delete(self, polygon_id: UUID) -> SavedPolygon:
        """저장된 폴리곤을 삭제하고 삭제된 폴리곤을 반환합니다."""
        polygon = self.get(polygon_id)
        del self._saved[polygon_id]
        del self._slots[polygon_id]
        log.debug("폴리곤 삭제됨", polygon=polygon.name)
        return polygon

    def reproject(self, viewport_w: float, viewport_h: float) -> None:
        """뷰포트 변경 후 초안과 저장 폴리곤의 화면 좌표를 다시 계산합니다."""
        self._draft = self._reprojected(self._draft, viewport_w, viewport_h)
        for pid, polygon in list(self._saved.items()):
            self._saved[pid] = polygon.with_vertices(
                self._reprojected(polygon.vertices, viewport_w, viewport_h))

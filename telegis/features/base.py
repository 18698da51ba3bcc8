"""
Shared plumbing for geofenced map tools.

Validates candidate points, records rejected attempts and forwards
rejection / advisory messages to the caller's notifier.
"""

from typing import List, Optional, Sequence

from telegis.core.geofence import GeofenceValidator, ViolationLog
from telegis.core.models import GeoPoint, ValidationResult, Vertex
from telegis.core.projection import CoordinateProjector
from telegis.ports.notify import NotificationPort


class GeofencedSession:
    """지오펜스 검증을 거쳐 꼭짓점을 받는 도구 세션의 공통 부분"""

    def __init__(self,
                 validator: GeofenceValidator,
                 projector: CoordinateProjector,
                 *,
                 allowed_region_names: Optional[Sequence[str]] = None,
                 violations: Optional[ViolationLog] = None,
                 notifier: Optional[NotificationPort] = None):
        """
        초기화합니다.

        Args:
            validator: 지오펜스 검증기
            projector: 픽셀-위경도 변환기
            allowed_region_names: 사용자 할당 영역 (비어 있으면 제한 없음)
            violations: 거부 기록 저장소 (없으면 세션 전용으로 생성)
            notifier: 알림 콜백
        """
        self.validator = validator
        self.projector = projector
        self.allowed_region_names: List[str] = list(allowed_region_names or [])
        self.violations = violations if violations is not None else ViolationLog()
        self.notifier = notifier

    def _count(self, counter, outcome: str) -> None:
        if self.validator.metrics_enabled:
            counter.labels(outcome=outcome).inc()

    def _notify(self, level: str, title: str, message: Optional[str]) -> None:
        if self.notifier is not None and message:
            self.notifier(level, title, message)

    def _reject(self, point: GeoPoint, result: ValidationResult, title: str) -> None:
        self.violations.record(point, result)
        self._notify("error", title, result.message)
        self._notify("info", "Suggestion", result.suggested_action)

    def _admit(self, point: GeoPoint, title: str) -> ValidationResult:
        """점을 검증하고, 거부 시 기록/알림을, 경계 근접 시 경고를 보냅니다."""
        result = self.validator.validate(point, self.allowed_region_names)
        if not result.is_valid:
            self._reject(point, result, title)
        elif result.violation_type == "near_border":
            self._notify("warning", "Border Location", result.message)
        return result

    def _reprojected(self, vertices: Sequence[Vertex], viewport_w: float, viewport_h: float) -> List[Vertex]:
        return [
            v.moved_to(v.point, self.projector.point_to_pixel(v.point, viewport_w, viewport_h))
            for v in vertices
        ]

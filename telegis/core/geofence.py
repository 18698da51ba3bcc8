"""
Geofence validation for telegis.

This module validates single points, batches of points and
caller-supplied region whitelists against the boundary index.
Validation never raises: every outcome is a structured result
that the caller turns into notifications or audit records.
"""

import math
import time
from typing import Iterable, List, Optional, Sequence

from telegis.common.geo import distance, validate_coordinates
from telegis.core.boundary import BoundaryIndex
from telegis.core.models import (
    BatchFailure,
    BatchValidationResult,
    BoundingBox,
    GeofenceViolation,
    GeoPoint,
    ValidationResult,
)
from telegis.observability import metrics
from telegis.observability.logging_setup import get_logger
from telegis.settings import GeofenceConfig

log = get_logger("telegis.geofence")


class GeofenceValidator:
    """국가 경계 및 할당 영역 기반 지오펜스 검증기"""

    def __init__(self, index: BoundaryIndex, config: Optional[GeofenceConfig] = None,
                 *, metrics_enabled: bool = True):
        """
        초기화합니다.

        Args:
            index: 공유 경계 인덱스
            config: 지오펜스 설정 (국가 영역 이름, 허용 거리 등)
            metrics_enabled: 검증 카운터/소요 시간 기록 여부 (세션도 이 값을 따름)

        Raises:
            ValueError: 국가 영역이 인덱스에 없는 경우
        """
        self.index = index
        self.config = config or GeofenceConfig()
        self.metrics_enabled = metrics_enabled
        if self.config.country_region not in index:
            raise ValueError(f"국가 경계 영역을 찾을 수 없습니다: {self.config.country_region}")
        self._country_bbox = index.bounding_box(self.config.country_region)

        log.info(f"GeofenceValidator 초기화됨 country:{self.config.country_region} "
                 f"border_tolerance_km:{self.config.border_tolerance_km}")

    @property
    def country_bounds(self) -> BoundingBox:
        return self._country_bbox

    def nearest_city(self, point: GeoPoint):
        """가장 가까운 기준 도시와 거리를 찾습니다."""
        best = None
        for city in self.config.reference_cities:
            d = distance(point, GeoPoint(lat=city.lat, lng=city.lng))
            if best is None or d < best[1]:
                best = (city, d)
        return best

    def _outside_country(self, point: GeoPoint, reason: str) -> ValidationResult:
        country = self.config.country_name
        nearest = self.nearest_city(point)
        if nearest is None:
            message = f"Location is outside {country} {reason}."
            action = f"Please select a location within {country}"
        else:
            city, dist = nearest
            message = (f"Location is outside {country} {reason}. Nearest city is "
                       f"{city.name}, {city.region} ({dist:.1f} km away)")
            action = f"Try selecting a location within {country}, such as near {city.name}"
        return ValidationResult(
            is_valid=False,
            message=message,
            suggested_action=action,
            violation_type="outside_country",
            violating_point=point,
        )

    def _check_country(self, point: GeoPoint) -> ValidationResult:
        if not validate_coordinates(point.lat, point.lng):
            return ValidationResult(
                is_valid=False,
                message="Invalid coordinates provided",
                suggested_action="Please provide valid latitude and longitude values",
                violation_type="invalid_coordinates",
                violating_point=point,
            )

        # 경계 상자 밖이면 정밀 판정 없이 거부
        if not self._country_bbox.contains(point):
            return self._outside_country(point, "boundaries")

        if not self.index.contains_point(self.config.country_region, point):
            return self._outside_country(point, "territory")

        if self.config.show_warnings and self.config.border_tolerance_km > 0:
            gap = self.index.distance_to_boundary_km(self.config.country_region, point)
            if gap <= self.config.border_tolerance_km:
                return ValidationResult(
                    is_valid=True,
                    message=(f"Location is near the {self.config.country_name} border "
                             f"({gap:.1f} km). Tools functionality verified."),
                    suggested_action="Consider placing points further inside the boundary",
                    violation_type="near_border",
                )

        return ValidationResult(
            is_valid=True,
            message=f"Location validated within {self.config.country_name} boundaries",
        )

    def _record(self, result: ValidationResult, started: float) -> ValidationResult:
        if not self.metrics_enabled:
            return result
        metrics.validation_seconds.observe(time.perf_counter() - started)
        metrics.geofence_checks.labels(
            result="valid" if result.is_valid else "invalid",
            violation_type=result.violation_type or "none",
        ).inc()
        return result

    def validate_point(self, point: GeoPoint) -> ValidationResult:
        """
        점이 국가 경계 안에 있는지 검증합니다.

        경계 근접 지점은 유효하지만 안내 메시지를 포함합니다.

        Args:
            point: 검증할 점

        Returns:
            검증 결과
        """
        started = time.perf_counter()
        result = self._check_country(point)
        log.debug("지점 검증 완료",
                  lat=point.lat, lng=point.lng,
                  is_valid=result.is_valid,
                  violation_type=result.violation_type)
        return self._record(result, started)

    def validate_against_whitelist(self, point: GeoPoint,
                                   allowed_region_names: Optional[Sequence[str]]) -> ValidationResult:
        """
        국가 경계 검증에 더해 할당 영역 포함 여부를 검증합니다.

        허용 목록이 비어 있으면 제한 없음(관리자)으로 처리합니다.

        Args:
            point: 검증할 점
            allowed_region_names: 허용 영역 이름 목록

        Returns:
            검증 결과
        """
        started = time.perf_counter()
        result = self._check_country(point)

        if result.is_valid and allowed_region_names:
            allowed = list(allowed_region_names)
            containing = self.index.region_names_containing(point, self.config.region_tolerance_km)
            matched = sorted(containing.intersection(allowed))
            if matched:
                result = result.model_copy(update={"region": matched[0]})
                if result.violation_type is None:
                    result = result.model_copy(
                        update={"message": "Location validated within assigned regions"})
            else:
                joined = ", ".join(allowed)
                result = ValidationResult(
                    is_valid=False,
                    message=f"Location is not within your assigned regions. You can only work in: {joined}",
                    suggested_action=f"Please select a location within your assigned regions: {joined}",
                    violation_type="outside_assigned_region",
                    allowed_regions=allowed,
                    violating_point=point,
                )

        log.debug("허용 영역 검증 완료",
                  lat=point.lat, lng=point.lng,
                  restricted=bool(allowed_region_names),
                  is_valid=result.is_valid,
                  violation_type=result.violation_type)
        return self._record(result, started)

    def validate(self, point: GeoPoint,
                 allowed_region_names: Optional[Sequence[str]] = None) -> ValidationResult:
        """허용 목록 유무에 따라 적절한 검증을 수행합니다."""
        if allowed_region_names:
            return self.validate_against_whitelist(point, allowed_region_names)
        return self.validate_point(point)

    def validate_many(self, points: Iterable[GeoPoint],
                      allowed_region_names: Optional[Sequence[str]] = None) -> BatchValidationResult:
        """
        여러 점을 순서대로 검증하고 첫 실패에서 멈춥니다.

        Args:
            points: 검증할 점 목록
            allowed_region_names: 허용 영역 이름 목록

        Returns:
            일괄 검증 결과 (실패 시 인덱스와 사유 포함)
        """
        for i, point in enumerate(points):
            result = self.validate(point, allowed_region_names)
            if not result.is_valid:
                return BatchValidationResult(
                    is_valid=False,
                    message=f"Point {i + 1} validation failed: {result.message}",
                    first_failure=BatchFailure(index=i, result=result),
                )

        return BatchValidationResult(
            is_valid=True,
            message="All coordinates validated successfully",
        )

    def validate_bounds(self, bounds: BoundingBox) -> ValidationResult:
        """선택한 사각 영역이 국가 경계 상자와 겹치는지 확인합니다."""
        if not all(math.isfinite(v) for v in (bounds.lat_min, bounds.lat_max,
                                                bounds.lng_min, bounds.lng_max)):
            return ValidationResult(
                is_valid=False,
                message="Invalid bounds provided",
                violation_type="invalid_coordinates",
            )
        if not self._country_bbox.intersects(bounds):
            return ValidationResult(
                is_valid=False,
                message=f"Selected area does not intersect with {self.config.country_name} boundaries",
                suggested_action=f"Please select an area within {self.config.country_name}",
                violation_type="outside_country",
            )
        return ValidationResult(is_valid=True)


class ViolationLog:
    """거부된 지점의 감사 기록 (추가/일괄 삭제만 가능)"""

    def __init__(self):
        self._items: List[GeofenceViolation] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(tuple(self._items))

    def record(self, point: GeoPoint, result: ValidationResult) -> GeofenceViolation:
        """거부 결과를 감사 기록으로 추가합니다."""
        violation = GeofenceViolation(
            point=point,
            reason_code=result.violation_type or "unknown_violation",
            message=result.message,
        )
        self._items.append(violation)
        log.debug("지오펜스 위반 기록됨", reason_code=violation.reason_code, total=len(self._items))
        return violation

    def recent(self, count: int = 10) -> List[GeofenceViolation]:
        """최근 위반 기록 count개를 반환합니다."""
        if count <= 0:
            return []
        return self._items[-count:]

    def clear(self) -> None:
        self._items.clear()

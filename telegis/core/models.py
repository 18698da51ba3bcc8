"""
Core domain models for telegis.

This module defines the geometry, vertex, region and validation
result models using Pydantic v2 for type safety and validation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional, Tuple
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from telegis.common.geo import (
    calculate_bounding_box,
    polygon_area,
    polygon_perimeter,
)

# 거리 단위 정의
DistanceUnit = Literal["km", "miles"]

# 위반 유형 정의
ViolationType = Literal[
    "outside_country",
    "outside_assigned_region",
    "near_border",
    "invalid_coordinates",
    "too_few_vertices",
]

WhitelistViolation = Literal["no_regions", "unknown_region", "duplicate_region"]


class Point2D(BaseModel):
    """픽셀 좌표 모델"""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class GeoPoint(BaseModel):
    """지리 좌표 모델 (위도, 경도)"""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    lat: float
    lng: float

    def as_lnglat(self) -> Tuple[float, float]:
        """GeoJSON 순서 (경도, 위도) 튜플을 반환합니다."""
        return (self.lng, self.lat)


class BoundingBox(BaseModel):
    """위경도 경계 상자 모델"""
    model_config = ConfigDict(frozen=True)

    lat_min: float
    lat_max: float
    lng_min: float
    lng_max: float

    @classmethod
    def around(cls, points) -> "BoundingBox":
        """점들을 감싸는 경계 상자를 만듭니다."""
        min_lng, min_lat, max_lng, max_lat = calculate_bounding_box(
            [(p.lng, p.lat) for p in points]
        )
        return cls(lat_min=min_lat, lat_max=max_lat, lng_min=min_lng, lng_max=max_lng)

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(
            lat=(self.lat_min + self.lat_max) / 2,
            lng=(self.lng_min + self.lng_max) / 2,
        )

    def contains(self, point: GeoPoint, margin_lat: float = 0.0, margin_lng: float = 0.0) -> bool:
        return (
            self.lat_min - margin_lat <= point.lat <= self.lat_max + margin_lat
            and self.lng_min - margin_lng <= point.lng <= self.lng_max + margin_lng
        )

    def intersects(self, other: "BoundingBox") -> bool:
        return not (
            other.lng_max < self.lng_min
            or other.lng_min > self.lng_max
            or other.lat_max < self.lat_min
            or other.lat_min > self.lat_max
        )


class Vertex(BaseModel):
    """사용자가 배치한 측정/폴리곤 꼭짓점"""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    point: GeoPoint
    pixel: Optional[Point2D] = None

    def moved_to(self, point: GeoPoint, pixel: Optional[Point2D] = None) -> "Vertex":
        """
        같은 id를 유지한 채 위치를 바꾼 꼭짓점을 반환합니다.

        pixel이 없으면 기존 화면 좌표를 유지합니다 (다음 reproject에서 갱신).
        """
        return self.model_copy(update={
            "point": point,
            "pixel": pixel if pixel is not None else self.pixel,
        })


Ring = Tuple[GeoPoint, ...]


class Region(BaseModel):
    """이름이 붙은 다각형 영역 (하나 이상의 닫힌 링)"""
    model_config = ConfigDict(frozen=True)

    name: str
    rings: Tuple[Ring, ...]


class ValidationResult(BaseModel):
    """지오펜스 검증 결과 모델"""
    is_valid: bool
    message: Optional[str] = None
    suggested_action: Optional[str] = None
    violation_type: Optional[ViolationType] = None
    allowed_regions: Optional[List[str]] = None
    violating_point: Optional[GeoPoint] = None
    region: Optional[str] = None


class BatchFailure(BaseModel):
    """일괄 검증에서 처음 실패한 지점"""
    index: int
    result: ValidationResult


class BatchValidationResult(BaseModel):
    """일괄 검증 결과 모델"""
    is_valid: bool
    message: str
    first_failure: Optional[BatchFailure] = None


class WhitelistCheck(BaseModel):
    """허용 영역 목록 검증 결과"""
    is_valid: bool
    message: str
    violation_type: Optional[WhitelistViolation] = None
    invalid_names: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class GeofenceViolation(BaseModel):
    """거부된 지점에 대한 감사 기록"""
    model_config = ConfigDict(frozen=True)

    point: GeoPoint
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    reason_code: str
    message: Optional[str] = None


class MeasurementSummary(BaseModel):
    """거리 측정 세션 요약"""
    unit: DistanceUnit
    point_count: int
    segment_distances: List[float]
    cumulative_distances: List[float]
    cumulative_distance: float


class PolygonStats(BaseModel):
    """작성 중인 폴리곤 통계"""
    vertex_count: int
    area_km2: float
    perimeter_km: float
    is_valid: bool


class SavedPolygon(BaseModel):
    """완성되어 저장된 폴리곤

    면적과 둘레는 항상 build()를 통해 꼭짓점에서 다시 계산됩니다.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    name: str
    vertices: Tuple[Vertex, ...] = Field(min_length=3)
    color: str
    is_complete: Literal[True] = True
    area_km2: float
    perimeter_km: float
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def build(cls, name: str, vertices, color: str, **extra) -> "SavedPolygon":
        """꼭짓점으로부터 면적/둘레를 계산하여 폴리곤을 생성합니다."""
        vertices = tuple(vertices)
        points = [v.point for v in vertices]
        return cls(
            name=name,
            vertices=vertices,
            color=color,
            area_km2=polygon_area(points),
            perimeter_km=polygon_perimeter(points),
            **extra,
        )

    def with_vertices(self, vertices) -> "SavedPolygon":
        """id/이름/색상/생성 시각을 유지한 채 꼭짓점을 교체하고 지표를 다시 계산합니다."""
        return SavedPolygon.build(
            self.name,
            vertices,
            self.color,
            id=self.id,
            created_at=self.created_at,
        )

# telegis/settings.py
from __future__ import annotations
from typing import List, Literal
from pydantic import BaseModel, Field

from telegis.core.constants import COUNTRY_BOUNDS, MAJOR_CITIES, ReferenceCity

class ProjectionConfig(BaseModel):
    lat_min: float = COUNTRY_BOUNDS["lat_min"]
    lat_max: float = COUNTRY_BOUNDS["lat_max"]
    lng_min: float = COUNTRY_BOUNDS["lng_min"]
    lng_max: float = COUNTRY_BOUNDS["lng_max"]

class GeofenceConfig(BaseModel):
    country_region: str = "India"             # BoundaryIndex 내 국가 경계 영역 이름
    country_name: str = "India"               # 메시지 표시용
    show_warnings: bool = True                # 경계 근접 안내 메시지
    border_tolerance_km: float = 10.0         # 경계 근접 안내 거리
    region_tolerance_km: float = 0.0          # 할당 영역 판정 시 경계 완충 거리
    reference_cities: List[ReferenceCity] = Field(default_factory=lambda: list(MAJOR_CITIES))

class MeasurementConfig(BaseModel):
    default_unit: Literal["km", "miles"] = "km"

class RegionData(BaseModel):
    country_path: str = "data/country-boundary.geojson"
    regions_path: str = "data/regions.geojson"
    name_property: str = "st_nm"              # 주/영역 이름 속성
    country_name_property: str | None = None  # None이면 country_region 이름 사용

class Observability(BaseModel):
    log_level: str = "INFO"
    log_json: bool = False
    metrics_enabled: bool = True              # False면 카운터/히스토그램 기록 생략

class Settings(BaseModel):
    # 하위 섹션 (기본값/팩토리로 누락 방지)
    projection: ProjectionConfig = Field(default_factory=ProjectionConfig)
    geofence: GeofenceConfig = Field(default_factory=GeofenceConfig)
    measurement: MeasurementConfig = Field(default_factory=MeasurementConfig)
    region_data: RegionData = Field(default_factory=RegionData)
    observability: Observability = Field(default_factory=Observability)

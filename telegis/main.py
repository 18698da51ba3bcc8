# telegis/main.py
import os
from dataclasses import dataclass
from typing import Optional, Sequence
from telegis.settings import Settings
from telegis.observability.logging_setup import setup_logging_dev, setup_logging_json, get_logger
from telegis.adapters.geojson_regions import GeoJsonRegionSource, load_regions
from telegis.core.boundary import BoundaryIndex
from telegis.core.geofence import GeofenceValidator, ViolationLog
from telegis.core.models import BoundingBox
from telegis.core.projection import CoordinateProjector
from telegis.features.measurement import MeasurementSession
from telegis.features.polygon import PolygonSession
from telegis.ports.notify import NotificationPort
from telegis.ports.regions import RegionSourcePort

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def build_settings() -> Settings:
    s = Settings()

    # 투영 경계
    s.projection.lat_min = float(os.getenv("PROJECTION_LAT_MIN", s.projection.lat_min))
    s.projection.lat_max = float(os.getenv("PROJECTION_LAT_MAX", s.projection.lat_max))
    s.projection.lng_min = float(os.getenv("PROJECTION_LNG_MIN", s.projection.lng_min))
    s.projection.lng_max = float(os.getenv("PROJECTION_LNG_MAX", s.projection.lng_max))

    # 지오펜스
    s.geofence.country_region = os.getenv("COUNTRY_REGION", s.geofence.country_region)
    s.geofence.country_name = os.getenv("COUNTRY_NAME", s.geofence.country_name)
    s.geofence.show_warnings = _b("GEOFENCE_SHOW_WARNINGS", s.geofence.show_warnings)
    s.geofence.border_tolerance_km = float(os.getenv("BORDER_TOLERANCE_KM", s.geofence.border_tolerance_km))
    s.geofence.region_tolerance_km = float(os.getenv("REGION_TOLERANCE_KM", s.geofence.region_tolerance_km))

    # 측정
    s.measurement.default_unit = os.getenv("DISTANCE_UNIT", s.measurement.default_unit)

    # 영역 데이터
    s.region_data.country_path = os.getenv("COUNTRY_GEOJSON", s.region_data.country_path)
    s.region_data.regions_path = os.getenv("REGIONS_GEOJSON", s.region_data.regions_path)
    s.region_data.name_property = os.getenv("REGION_NAME_PROPERTY", s.region_data.name_property)
    s.region_data.country_name_property = os.getenv("COUNTRY_NAME_PROPERTY", s.region_data.country_name_property)

    # 관측성
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)
    s.observability.log_json = _b("LOG_JSON", s.observability.log_json)
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)

    # 문자열 환경변수로 들어온 값 재검증
    return Settings.model_validate(s.model_dump())

def default_sources(settings: Settings) -> list:
    """설정된 경로에서 국가 경계와 주 경계 소스를 만듭니다."""
    rd = settings.region_data
    country = GeoJsonRegionSource(
        path=rd.country_path,
        name_property=rd.country_name_property or "name",
        region_name=None if rd.country_name_property else settings.geofence.country_region,
    )
    states = GeoJsonRegionSource(path=rd.regions_path, name_property=rd.name_property)
    return [country, states]

@dataclass(frozen=True)
class GeoToolkit:
    """시작 시 한 번 구성되는 공유 구성 요소 묶음"""
    settings: Settings
    projector: CoordinateProjector
    index: BoundaryIndex
    validator: GeofenceValidator

    def measurement_session(self,
                            allowed_region_names: Optional[Sequence[str]] = None,
                            violations: Optional[ViolationLog] = None,
                            notifier: Optional[NotificationPort] = None) -> MeasurementSession:
        return MeasurementSession(
            self.validator, self.projector,
            unit=self.settings.measurement.default_unit,
            allowed_region_names=allowed_region_names,
            violations=violations,
            notifier=notifier,
        )

    def polygon_session(self,
                        allowed_region_names: Optional[Sequence[str]] = None,
                        violations: Optional[ViolationLog] = None,
                        notifier: Optional[NotificationPort] = None) -> PolygonSession:
        return PolygonSession(
            self.validator, self.projector,
            allowed_region_names=allowed_region_names,
            violations=violations,
            notifier=notifier,
        )

def build_toolkit(settings: Settings, sources: Optional[Sequence[RegionSourcePort]] = None) -> GeoToolkit:
    """영역 데이터를 한 번 로드하여 투영기/인덱스/검증기를 구성합니다."""
    log = get_logger("telegis.main")
    if sources is None:
        sources = default_sources(settings)

    metrics_enabled = settings.observability.metrics_enabled
    index = BoundaryIndex(load_regions(sources), metrics_enabled=metrics_enabled)
    p = settings.projection
    projector = CoordinateProjector(BoundingBox(
        lat_min=p.lat_min, lat_max=p.lat_max, lng_min=p.lng_min, lng_max=p.lng_max))
    validator = GeofenceValidator(index, settings.geofence, metrics_enabled=metrics_enabled)

    log.info(f"툴킷 구성 완료 regions:{len(index)} country:{settings.geofence.country_region}")
    return GeoToolkit(settings=settings, projector=projector, index=index, validator=validator)

def main():
    s = build_settings()
    if s.observability.log_json:
        setup_logging_json(s.observability.log_level)
    else:
        setup_logging_dev(s.observability.log_level)
    log = get_logger()
    log.info("설정 로드 완료")

    toolkit = build_toolkit(s)
    for name in toolkit.index.names_index():
        log.info(f"영역: {name}")

if __name__ == "__main__":
    main()

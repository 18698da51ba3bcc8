"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.

테스트용 국가 경계는 위도 10~35, 경도 70~95 사각형에서 북쪽 가운데를
V자로 파낸 오목 다각형입니다 (꼭짓점 (25, 82)). 주 경계는 경도 82를
공유 경계로 하는 Alpha(서쪽)와 Beta(동쪽) 두 사각형입니다.
"""

import pytest
from types import SimpleNamespace
from unittest.mock import Mock

from telegis.core.boundary import BoundaryIndex
from telegis.core.geofence import GeofenceValidator, ViolationLog
from telegis.core.models import BoundingBox, GeoPoint, Region
from telegis.core.projection import CoordinateProjector
from telegis.features.measurement import MeasurementSession
from telegis.features.polygon import PolygonSession
from telegis.settings import GeofenceConfig, Settings


def ring(*latlng):
    """(위도, 경도) 쌍들로 링을 만듭니다."""
    return tuple(GeoPoint(lat=lat, lng=lng) for lat, lng in latlng)


COUNTRY_RING = ring(
    (10, 70), (10, 95), (35, 95), (35, 85), (25, 82), (35, 78), (35, 70),
)
ALPHA_RING = ring((10, 70), (10, 82), (35, 82), (35, 70))
BETA_RING = ring((10, 82), (10, 95), (35, 95), (35, 82))


@pytest.fixture
def regions():
    """테스트용 영역 목록"""
    return [
        Region(name="India", rings=(COUNTRY_RING,)),
        Region(name="Beta", rings=(BETA_RING,)),
        Region(name="Alpha", rings=(ALPHA_RING,)),
    ]


@pytest.fixture
def index(regions):
    """테스트용 경계 인덱스"""
    return BoundaryIndex(regions)


@pytest.fixture
def geofence_config():
    """테스트용 지오펜스 설정"""
    return GeofenceConfig(country_region="India", country_name="India", border_tolerance_km=10.0)


@pytest.fixture
def validator(index, geofence_config):
    """테스트용 지오펜스 검증기"""
    return GeofenceValidator(index, geofence_config)


@pytest.fixture
def projector():
    """기본 국가 경계 상자 투영기"""
    return CoordinateProjector(BoundingBox(lat_min=6.4, lat_max=37.6, lng_min=68.1, lng_max=97.25))


@pytest.fixture
def notifier():
    """알림 콜백 목"""
    return Mock()


@pytest.fixture
def violations():
    return ViolationLog()


@pytest.fixture
def measurement(validator, projector, violations, notifier):
    """테스트용 거리 측정 세션"""
    return MeasurementSession(validator, projector, violations=violations, notifier=notifier)


@pytest.fixture
def polygon_session(validator, projector, violations, notifier):
    """테스트용 폴리곤 세션"""
    return PolygonSession(validator, projector, violations=violations, notifier=notifier)


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.metrics_enabled = False
    settings.observability.log_level = "INFO"
    return settings


@pytest.fixture
def spots():
    """국가 경계 기준 지점들"""
    return SimpleNamespace(
        inside_west=GeoPoint(lat=20.0, lng=75.0),       # Alpha
        inside_east=GeoPoint(lat=20.0, lng=90.0),       # Beta
        inside_south=GeoPoint(lat=15.0, lng=80.0),      # Alpha
        in_notch=GeoPoint(lat=33.0, lng=82.0),          # 경계 상자 안, 다각형 밖
        outside_box=GeoPoint(lat=5.0, lng=80.0),        # 경계 상자 밖
        near_south_border=GeoPoint(lat=10.05, lng=80.0),
        on_state_border=GeoPoint(lat=20.0, lng=82.0),   # Alpha/Beta 공유 경계
    )

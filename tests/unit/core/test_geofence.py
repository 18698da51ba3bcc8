"""
지오펜스 검증기 단위 테스트

이 모듈은 국가 경계 검증, 허용 영역 검증, 일괄 검증과
위반 기록을 테스트합니다.
"""

import pytest
from prometheus_client import REGISTRY

from telegis.core.boundary import BoundaryIndex
from telegis.core.geofence import GeofenceValidator, ViolationLog
from telegis.core.models import BoundingBox, GeoPoint, ValidationResult
from telegis.settings import GeofenceConfig


def checks(result: str, violation_type: str) -> float:
    value = REGISTRY.get_sample_value(
        "geofence_checks_total",
        {"result": result, "violation_type": violation_type},
    )
    return value or 0.0


class TestValidatorConstruction:
    """검증기 생성 테스트"""

    def test_missing_country_region(self, index):
        """국가 영역이 없으면 생성 실패"""
        with pytest.raises(ValueError):
            GeofenceValidator(index, GeofenceConfig(country_region="Atlantis"))

    def test_country_bounds(self, validator):
        box = validator.country_bounds
        assert (box.lat_min, box.lat_max, box.lng_min, box.lng_max) == (10, 35, 70, 95)


class TestValidatePoint:
    """국가 경계 검증 테스트"""

    def test_inside(self, validator, spots):
        result = validator.validate_point(spots.inside_west)

        assert result.is_valid
        assert result.violation_type is None
        assert result.message == "Location validated within India boundaries"

    def test_outside_bounding_box(self, validator, spots):
        """경계 상자 밖은 빠르게 거부"""
        result = validator.validate_point(spots.outside_box)

        assert not result.is_valid
        assert result.violation_type == "outside_country"
        assert result.message.startswith("Location is outside India boundaries. Nearest city is ")
        assert result.violating_point == spots.outside_box
        assert result.suggested_action.startswith("Try selecting a location within India, such as near ")

    def test_inside_box_outside_polygon(self, validator, spots):
        """경계 상자 안이지만 다각형 밖"""
        result = validator.validate_point(spots.in_notch)

        assert not result.is_valid
        assert result.violation_type == "outside_country"
        assert "outside India territory" in result.message

    def test_nearest_city_named(self, validator):
        """거부 메시지에 가장 가까운 기준 도시 포함"""
        result = validator.validate_point(GeoPoint(lat=5.0, lng=80.3))
        assert "Nearest city is Chennai, Tamil Nadu" in result.message

    def test_no_reference_cities(self, index, spots):
        """기준 도시가 없으면 일반 안내"""
        v = GeofenceValidator(index, GeofenceConfig(reference_cities=[]))
        result = v.validate_point(spots.outside_box)

        assert result.message == "Location is outside India boundaries."
        assert result.suggested_action == "Please select a location within India"

    @pytest.mark.parametrize("lat,lng", [(95.0, 80.0), (-91.0, 80.0), (20.0, 181.0)])
    def test_invalid_coordinates(self, validator, lat, lng):
        """범위를 벗어난 좌표"""
        result = validator.validate_point(GeoPoint(lat=lat, lng=lng))

        assert not result.is_valid
        assert result.violation_type == "invalid_coordinates"
        assert result.message == "Invalid coordinates provided"

    def test_near_border_advisory(self, validator, spots):
        """경계 근접 지점은 유효하지만 안내 포함"""
        result = validator.validate_point(spots.near_south_border)

        assert result.is_valid
        assert result.violation_type == "near_border"
        assert "near the India border" in result.message

    def test_near_border_disabled(self, index, spots):
        """안내를 끄면 일반 성공 결과"""
        v = GeofenceValidator(index, GeofenceConfig(show_warnings=False))
        result = v.validate_point(spots.near_south_border)

        assert result.is_valid
        assert result.violation_type is None

    def test_vertex_on_boundary_is_inside(self, validator):
        """국가 경계 꼭짓점 위의 점은 포함"""
        result = validator.validate_point(GeoPoint(lat=25.0, lng=82.0))
        assert result.is_valid

    def test_metrics_recorded(self, validator, spots):
        """검증 결과별 카운터 증가"""
        before_ok = checks("valid", "none")
        before_bad = checks("invalid", "outside_country")

        validator.validate_point(spots.inside_west)
        validator.validate_point(spots.in_notch)

        assert checks("valid", "none") == before_ok + 1
        assert checks("invalid", "outside_country") == before_bad + 1

    def test_metrics_disabled(self, index, geofence_config, spots):
        """메트릭 비활성 시 카운터/히스토그램 변화 없음"""
        v = GeofenceValidator(index, geofence_config, metrics_enabled=False)
        before_ok = checks("valid", "none")
        before_count = REGISTRY.get_sample_value("validation_duration_seconds_count") or 0.0

        assert v.validate_point(spots.inside_west).is_valid
        assert v.validate_many([spots.inside_east]).is_valid

        assert checks("valid", "none") == before_ok
        assert (REGISTRY.get_sample_value("validation_duration_seconds_count") or 0.0) == before_count


class TestValidateAgainstWhitelist:
    """허용 영역 검증 테스트"""

    def test_empty_whitelist_is_unrestricted(self, validator, spots):
        """허용 목록이 비면 국가 검증만 수행"""
        result = validator.validate_against_whitelist(spots.inside_east, [])
        assert result.is_valid
        assert result.region is None

    def test_inside_assigned(self, validator, spots):
        result = validator.validate_against_whitelist(spots.inside_west, ["Alpha"])

        assert result.is_valid
        assert result.region == "Alpha"
        assert result.message == "Location validated within assigned regions"

    def test_outside_assigned(self, validator, spots):
        """국가 안이지만 할당 영역 밖"""
        result = validator.validate_against_whitelist(spots.inside_west, ["Beta"])

        assert not result.is_valid
        assert result.violation_type == "outside_assigned_region"
        assert result.allowed_regions == ["Beta"]
        assert result.message == "Location is not within your assigned regions. You can only work in: Beta"

    def test_country_failure_wins(self, validator, spots):
        """국가 경계 밖이면 국가 위반으로 보고"""
        result = validator.validate_against_whitelist(spots.in_notch, ["Alpha", "Beta"])
        assert result.violation_type == "outside_country"

    def test_unknown_names_match_nothing(self, validator, spots):
        result = validator.validate_against_whitelist(spots.inside_west, ["Gamma"])
        assert result.violation_type == "outside_assigned_region"

    def test_shared_border_accepted_by_either(self, validator, spots):
        assert validator.validate_against_whitelist(spots.on_state_border, ["Alpha"]).is_valid
        assert validator.validate_against_whitelist(spots.on_state_border, ["Beta"]).is_valid

    def test_region_tolerance(self, index):
        """할당 영역 경계 완충 거리"""
        p = GeoPoint(lat=20.0, lng=82.05)
        strict = GeofenceValidator(index, GeofenceConfig())
        loose = GeofenceValidator(index, GeofenceConfig(region_tolerance_km=10.0))

        assert not strict.validate_against_whitelist(p, ["Alpha"]).is_valid
        assert loose.validate_against_whitelist(p, ["Alpha"]).is_valid

    def test_near_border_keeps_advisory(self, validator, spots):
        """경계 근접 안내는 허용 영역 검증 후에도 유지"""
        result = validator.validate_against_whitelist(spots.near_south_border, ["Alpha"])

        assert result.is_valid
        assert result.violation_type == "near_border"
        assert result.region == "Alpha"

    def test_validate_dispatch(self, validator, spots):
        assert validator.validate(spots.inside_west).is_valid
        assert not validator.validate(spots.inside_west, ["Beta"]).is_valid


class TestValidateMany:
    """일괄 검증 테스트"""

    def test_all_valid(self, validator, spots):
        batch = validator.validate_many([spots.inside_west, spots.inside_east, spots.inside_south])

        assert batch.is_valid
        assert batch.first_failure is None
        assert batch.message == "All coordinates validated successfully"

    def test_empty(self, validator):
        assert validator.validate_many([]).is_valid

    def test_first_failure_reported(self, validator, spots):
        """첫 실패 지점의 인덱스와 사유 보고"""
        batch = validator.validate_many([spots.inside_west, spots.in_notch, spots.outside_box])

        assert not batch.is_valid
        assert batch.first_failure.index == 1
        assert batch.first_failure.result.violation_type == "outside_country"
        assert batch.message.startswith("Point 2 validation failed: Location is outside India territory")

    def test_whitelist_applied(self, validator, spots):
        batch = validator.validate_many([spots.inside_west, spots.inside_east], ["Alpha"])

        assert not batch.is_valid
        assert batch.first_failure.index == 1
        assert batch.first_failure.result.violation_type == "outside_assigned_region"


class TestValidateBounds:
    """사각 영역 교차 검증 테스트"""

    def test_intersecting(self, validator):
        assert validator.validate_bounds(BoundingBox(lat_min=30, lat_max=40, lng_min=90, lng_max=100)).is_valid

    def test_disjoint(self, validator):
        result = validator.validate_bounds(BoundingBox(lat_min=40, lat_max=50, lng_min=0, lng_max=10))

        assert not result.is_valid
        assert result.violation_type == "outside_country"
        assert result.message == "Selected area does not intersect with India boundaries"

    def test_non_finite(self, validator):
        result = validator.validate_bounds(
            BoundingBox(lat_min=float("nan"), lat_max=20, lng_min=70, lng_max=80))
        assert result.violation_type == "invalid_coordinates"


class TestViolationLog:
    """위반 기록 테스트"""

    def _rejected(self, i: int) -> ValidationResult:
        return ValidationResult(is_valid=False, message=f"m{i}", violation_type="outside_country")

    def test_record_and_recent(self):
        log = ViolationLog()
        for i in range(15):
            log.record(GeoPoint(lat=0, lng=i), self._rejected(i))

        assert len(log) == 15
        recent = log.recent()
        assert len(recent) == 10
        assert [v.message for v in recent] == [f"m{i}" for i in range(5, 15)]
        assert log.recent(3)[-1].point == GeoPoint(lat=0, lng=14)
        assert log.recent(0) == []

    def test_reason_code_and_timestamp(self):
        log = ViolationLog()
        v = log.record(GeoPoint(lat=1, lng=2), self._rejected(1))

        assert v.reason_code == "outside_country"
        assert v.timestamp.tzinfo is not None
        assert list(log) == [v]

    def test_clear(self):
        log = ViolationLog()
        log.record(GeoPoint(lat=1, lng=2), self._rejected(1))
        log.clear()
        assert len(log) == 0

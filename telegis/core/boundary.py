"""
Boundary index for telegis.

This module holds the named polygonal regions (country, states)
loaded once at startup and answers point-in-region queries with
an optional border tolerance. The index is immutable after
construction and is shared read-only by validators and sessions.
"""

import math
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Sequence, Tuple

from telegis.common.geo import (
    KM_PER_DEG_LAT,
    KM_PER_DEG_LNG,
    calculate_bounding_box,
    distance_to_ring_km,
    point_in_polygon,
)
from telegis.core.constants import REGION_GROUPS
from telegis.core.errors import UnknownRegionError
from telegis.core.models import BoundingBox, GeoPoint, Region, WhitelistCheck
from telegis.observability import metrics
from telegis.observability.logging_setup import get_logger

log = get_logger("telegis.boundary")


@dataclass(frozen=True)
class _IndexedRing:
    coords: Tuple[Tuple[float, float], ...]  # (경도, 위도)
    bbox: Tuple[float, float, float, float]  # (min_lon, min_lat, max_lon, max_lat)

    def may_contain(self, lng: float, lat: float, margin_lng: float, margin_lat: float) -> bool:
        min_lon, min_lat, max_lon, max_lat = self.bbox
        return (min_lon - margin_lng <= lng <= max_lon + margin_lng
                and min_lat - margin_lat <= lat <= max_lat + margin_lat)


def _degree_margins(lat: float, tolerance_km: float) -> Tuple[float, float]:
    """허용 거리(km)를 해당 위도에서의 경도/위도 여유(도)로 환산합니다."""
    if tolerance_km <= 0:
        return 0.0, 0.0
    cos_lat = max(math.cos(math.radians(lat)), 1e-6)
    return tolerance_km / (KM_PER_DEG_LNG * cos_lat), tolerance_km / KM_PER_DEG_LAT


class BoundaryIndex:
    """이름 있는 영역들의 점 포함 질의 인덱스"""

    def __init__(self, regions: Iterable[Region], *, metrics_enabled: bool = True):
        """
        영역 목록으로 인덱스를 구성합니다.

        같은 이름의 영역은 링을 합칩니다. 꼭짓점이 3개 미만인 링은 버립니다.

        Args:
            regions: 로드된 Region 목록
            metrics_enabled: regions_loaded 게이지 갱신 여부
        """
        rings_by_name: Dict[str, List[_IndexedRing]] = {}
        skipped = 0

        for region in regions:
            bucket = rings_by_name.setdefault(region.name, [])
            for ring in region.rings:
                coords = tuple(p.as_lnglat() for p in ring)
                if len(coords) < 3:
                    skipped += 1
                    continue
                bucket.append(_IndexedRing(coords=coords, bbox=calculate_bounding_box(coords)))

        self._rings: Dict[str, Tuple[_IndexedRing, ...]] = {
            name: tuple(rings) for name, rings in rings_by_name.items()
        }
        self._names: Tuple[str, ...] = tuple(sorted(self._rings))

        if metrics_enabled:
            metrics.regions_loaded.set(len(self._names))
        if skipped:
            log.warning(f"꼭짓점 3개 미만 링 무시됨 count:{skipped}")
        log.info(f"경계 인덱스 구성 완료 regions:{len(self._names)} "
                 f"rings:{sum(len(r) for r in self._rings.values())}")

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._rings

    def _lookup(self, name: str) -> Tuple[_IndexedRing, ...]:
        try:
            return self._rings[name]
        except KeyError:
            raise UnknownRegionError(name) from None

    def names_index(self) -> Tuple[str, ...]:
        """정렬된 전체 영역 이름 목록을 반환합니다."""
        return self._names

    def bounding_box(self, name: str) -> BoundingBox:
        """영역 전체를 감싸는 경계 상자를 반환합니다."""
        rings = self._lookup(name)
        min_lon = min(r.bbox[0] for r in rings)
        min_lat = min(r.bbox[1] for r in rings)
        max_lon = max(r.bbox[2] for r in rings)
        max_lat = max(r.bbox[3] for r in rings)
        return BoundingBox(lat_min=min_lat, lat_max=max_lat, lng_min=min_lon, lng_max=max_lon)

    def contains_point(self, region_name: str, point: GeoPoint, tolerance_km: float = 0.0) -> bool:
        """
        점이 영역에 포함되는지 확인합니다.

        어느 한 링 안에 있으면 포함입니다. 링의 변이나 꼭짓점 위의 점은
        포함으로 판정합니다. tolerance_km가 양수면 링의 변에서 그 거리
        이내인 점도 포함으로 판정합니다.

        Args:
            region_name: 영역 이름
            point: 확인할 점
            tolerance_km: 경계 허용 거리 (킬로미터)

        Returns:
            포함 여부

        Raises:
            UnknownRegionError: 등록되지 않은 영역 이름
        """
        rings = self._lookup(region_name)
        lnglat = point.as_lnglat()
        margin_lng, margin_lat = _degree_margins(point.lat, tolerance_km)

        for ring in rings:
            if not ring.may_contain(point.lng, point.lat, margin_lng, margin_lat):
                continue
            if point_in_polygon(lnglat, ring.coords):
                return True
            if tolerance_km > 0 and distance_to_ring_km(lnglat, ring.coords) <= tolerance_km:
                return True

        return False

    def region_names_containing(self, point: GeoPoint, tolerance_km: float = 0.0) -> FrozenSet[str]:
        """점을 포함하는 모든 영역 이름을 반환합니다."""
        return frozenset(
            name for name in self._names
            if self.contains_point(name, point, tolerance_km)
        )

    def distance_to_boundary_km(self, region_name: str, point: GeoPoint) -> float:
        """
        점에서 영역 경계(모든 링의 변)까지의 최단 거리를 계산합니다.

        Args:
            region_name: 영역 이름
            point: 기준 점

        Returns:
            최단 거리 (킬로미터)
        """
        lnglat = point.as_lnglat()
        return min(distance_to_ring_km(lnglat, ring.coords) for ring in self._lookup(region_name))

    def check_names(self, names: Sequence[str]) -> WhitelistCheck:
        """
        허용 영역 목록이 로드된 영역 이름과 맞는지 확인합니다.

        Args:
            names: 할당하려는 영역 이름 목록

        Returns:
            검증 결과 (알 수 없는 이름에는 유사 이름 제안 포함)
        """
        if not names:
            return WhitelistCheck(
                is_valid=False,
                message="At least one region must be assigned",
                violation_type="no_regions",
            )

        invalid = [n for n in names if n not in self._rings]
        if invalid:
            suggestions = []
            for bad in invalid:
                lowered = bad.lower()
                similar = next(
                    (valid for valid in self._names
                     if lowered in valid.lower() or valid.lower() in lowered),
                    None,
                )
                if similar:
                    suggestions.append(similar)
            return WhitelistCheck(
                is_valid=False,
                message=f"Invalid regions found: {', '.join(invalid)}",
                violation_type="unknown_region",
                invalid_names=invalid,
                suggestions=suggestions,
            )

        if len(set(names)) != len(names):
            return WhitelistCheck(
                is_valid=False,
                message="Duplicate regions found in assignment",
                violation_type="duplicate_region",
            )

        return WhitelistCheck(
            is_valid=True,
            message=f"Successfully validated {len(names)} region assignments",
        )

    def grouped(self, groups: Mapping[str, Sequence[str]] = REGION_GROUPS) -> Dict[str, List[str]]:
        """권역 그룹(기본: 국내 권역 구분)에서 로드되지 않은 영역을 걸러냅니다."""
        return {
            group: [name for name in members if name in self._rings]
            for group, members in groups.items()
        }

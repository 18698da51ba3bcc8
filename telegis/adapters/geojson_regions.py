import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from jsonschema import validate
from jsonschema.exceptions import ValidationError

from telegis.core.errors import RegionDataError
from telegis.core.models import GeoPoint, Region
from telegis.observability.logging_setup import get_logger

log = get_logger("telegis.regions")

SCHEMA = json.loads((Path(__file__).parent / "region_schema.json").read_text(encoding="utf-8"))


class GeoJsonRegionSource:
    """GeoJSON FeatureCollection → Region 목록 로더

    Polygon/MultiPolygon 의 외곽 링만 사용합니다 (구멍 링은 무시).
    """

    def __init__(self,
                 data: Union[str, bytes, Dict[str, Any], None] = None,
                 *,
                 path: Union[str, Path, None] = None,
                 name_property: str = "name",
                 region_name: Optional[str] = None):
        """
        초기화합니다.

        Args:
            data: 이미 메모리에 있는 GeoJSON (dict, str, bytes)
            path: GeoJSON 파일 경로 (data가 없을 때)
            name_property: 영역 이름을 담은 properties 키
            region_name: 지정 시 모든 피처를 이 이름의 한 영역으로 묶음
        """
        if data is None and path is None:
            raise ValueError("data 또는 path 중 하나는 필요합니다")
        self.data = data
        self.path = Path(path) if path is not None else None
        self.name_property = name_property
        self.region_name = region_name

    def _read(self) -> Dict[str, Any]:
        raw = self.data
        if raw is None:
            raw = self.path.read_bytes()
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        if isinstance(raw, str):
            try:
                return json.loads(raw)
            except json.JSONDecodeError as e:
                raise RegionDataError(f"GeoJSON 파싱 실패: {e}") from e
        if isinstance(raw, dict):
            return raw
        raise RegionDataError(f"Unsupported region data type: {type(raw)}")

    def _feature_name(self, index: int, feature: Dict[str, Any]) -> str:
        if self.region_name:
            return self.region_name
        props = feature.get("properties") or {}
        name = props.get(self.name_property)
        if not name:
            raise RegionDataError(
                f"피처 {index}에 이름 속성이 없습니다: {self.name_property}")
        return str(name)

    @staticmethod
    def _ring(coords: Sequence[Sequence[float]]) -> tuple:
        points = [GeoPoint(lat=c[1], lng=c[0]) for c in coords]
        # GeoJSON 링은 첫 점을 마지막에 반복함
        if len(points) > 1 and points[0] == points[-1]:
            points.pop()
        return tuple(points)

    def _outer_rings(self, geometry: Dict[str, Any]) -> List[tuple]:
        if geometry["type"] == "Polygon":
            polygons = [geometry["coordinates"]]
        else:
            polygons = geometry["coordinates"]
        return [self._ring(polygon[0]) for polygon in polygons if polygon]

    def load(self) -> List[Region]:
        """
        GeoJSON을 읽어 이름별 Region 목록을 만듭니다.

        Returns:
            이름 순서가 입력 순서인 Region 목록

        Raises:
            RegionDataError: 스키마 불일치 또는 이름 누락
        """
        obj = self._read()
        try:
            validate(instance=obj, schema=SCHEMA)
        except ValidationError as e:
            log.error(f"영역 GeoJSON 스키마 검증 실패: {e.message}")
            raise RegionDataError(f"Region GeoJSON schema validation failed: {e.message}") from e

        rings_by_name: Dict[str, List[tuple]] = {}
        for i, feature in enumerate(obj["features"]):
            name = self._feature_name(i, feature)
            rings_by_name.setdefault(name, []).extend(self._outer_rings(feature["geometry"]))

        regions = [Region(name=name, rings=tuple(rings)) for name, rings in rings_by_name.items()]
        log.info(f"영역 데이터 로드됨 source:{self.path or 'memory'} "
                 f"features:{len(obj['features'])} regions:{len(regions)}")
        return regions


def load_regions(sources: Iterable) -> List[Region]:
    """여러 영역 소스를 순서대로 로드하여 합칩니다."""
    regions: List[Region] = []
    for source in sources:
        regions.extend(source.load())
    return regions

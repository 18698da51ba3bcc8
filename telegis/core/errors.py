"""
Error types for telegis.

Domain violations are reported as result models, not exceptions.
These exceptions mark caller bugs and malformed input data.
"""


class UnknownRegionError(KeyError):
    """등록되지 않은 영역 이름"""


class UnknownPolygonError(KeyError):
    """존재하지 않는 저장 폴리곤 id"""


class UnknownVertexError(KeyError):
    """폴리곤에 없는 꼭짓점 id"""


class RegionDataError(ValueError):
    """영역 지오메트리 데이터 형식 오류"""

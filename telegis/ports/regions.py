"""
Region source port interface.

This module defines the protocol for one-shot loading of
named region geometry before the boundary index is built.
"""

from typing import Protocol, Sequence
from telegis.core.models import Region

class RegionSourcePort(Protocol):
    """영역 지오메트리 공급 포트 인터페이스"""

    def load(self) -> Sequence[Region]:
        """
        이름 있는 영역 목록을 한 번에 로드합니다.

        Returns:
            불변 Region 목록
        """
        ...

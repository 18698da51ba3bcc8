"""
Notification port interface.

This module defines the protocol through which sessions hand
rejection and advisory messages back to the UI layer.
"""

from typing import Literal, Protocol

NotifyLevel = Literal["error", "warning", "info"]

class NotificationPort(Protocol):
    """사용자 알림 포트 인터페이스"""

    def __call__(self, level: NotifyLevel, title: str, message: str) -> None:
        """
        알림을 전달합니다.

        Args:
            level: 알림 수준
            title: 제목
            message: 본문
        """
        ...

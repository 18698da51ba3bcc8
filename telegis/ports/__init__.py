"""
Port interfaces for telegis.

This module defines the port interfaces (Protocols) that define
the contracts between the geospatial core and external collaborators.
"""

from .regions import RegionSourcePort
from .notify import NotificationPort, NotifyLevel

__all__ = ["RegionSourcePort", "NotificationPort", "NotifyLevel"]

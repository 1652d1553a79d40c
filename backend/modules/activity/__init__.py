"""
Activity module.

Tracks when users were last seen (requests and client heartbeats).

Public API:
- IActivityMonitor: Interface for activity tracking
- UserActivity: Snapshot of a user's activity signals
"""

from .interfaces import IActivityMonitor
from .models import UserActivity

__all__ = [
    "IActivityMonitor",
    "UserActivity",
]

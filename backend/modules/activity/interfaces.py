"""
Activity monitor interface.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from .models import UserActivity


@runtime_checkable
class IActivityMonitor(Protocol):
    """Interface for per-user activity tracking."""

    def record_activity(self, handle: str, at: Optional[datetime] = None) -> None:
        """Record a request made by a user."""
        ...

    def record_heartbeat(self, handle: str, at: Optional[datetime] = None) -> None:
        """Record a client heartbeat for a user."""
        ...

    def last_activity_for(self, handle: str) -> Optional[UserActivity]:
        """Get a snapshot of a user's activity signals, or None if none were recorded."""
        ...

    def reset_stats(self, handle: str) -> None:
        """Forget everything recorded for a user."""
        ...

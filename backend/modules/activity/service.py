"""
In-process activity monitor.

Signals live only for the lifetime of the process; a user with no recorded
activity falls back to their account creation time wherever last activity
matters.
"""

from datetime import datetime, timezone
from typing import Optional

from .interfaces import IActivityMonitor
from .models import UserActivity


class ActivityMonitor(IActivityMonitor):
    """Tracks last activity and heartbeat per handle."""

    def __init__(self):
        self._stats: dict[str, UserActivity] = {}

    def _entry(self, handle: str) -> UserActivity:
        if handle not in self._stats:
            self._stats[handle] = UserActivity(handle=handle)
        return self._stats[handle]

    def record_activity(self, handle: str, at: Optional[datetime] = None) -> None:
        entry = self._entry(handle)
        entry.last_activity = at or datetime.now(timezone.utc)
        entry.total_messages += 1

    def record_heartbeat(self, handle: str, at: Optional[datetime] = None) -> None:
        self._entry(handle).last_heartbeat = at or datetime.now(timezone.utc)

    def last_activity_for(self, handle: str) -> Optional[UserActivity]:
        entry = self._stats.get(handle)
        return entry.model_copy() if entry else None

    def reset_stats(self, handle: str) -> None:
        self._stats.pop(handle, None)

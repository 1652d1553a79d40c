"""
Activity endpoints.

Clients ping the heartbeat while a session is open; the inactive-user scan
prefers heartbeats over other activity signals.
"""

from fastapi import APIRouter, Depends

from modules.activity.interfaces import IActivityMonitor
from shared.models import AuthenticatedUser
from ..dependencies import get_activity_monitor
from ..middleware.auth import get_current_user

router = APIRouter()


@router.post("/heartbeat", status_code=204)
async def heartbeat(
    user: AuthenticatedUser = Depends(get_current_user),
    monitor: IActivityMonitor = Depends(get_activity_monitor),
) -> None:
    """Record a heartbeat for the caller."""
    monitor.record_heartbeat(user.handle)

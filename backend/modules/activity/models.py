"""
Activity module data models.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserActivity(BaseModel):
    """Live activity signals of one user, kept in process memory."""

    handle: str = Field(..., description="User handle")
    last_activity: Optional[datetime] = Field(None, description="Last recorded request")
    last_heartbeat: Optional[datetime] = Field(None, description="Last client heartbeat")
    total_messages: int = Field(default=0, description="Messages recorded since start")

    @property
    def last_seen(self) -> Optional[datetime]:
        """The most trustworthy signal: heartbeat first, then activity."""
        return self.last_heartbeat or self.last_activity

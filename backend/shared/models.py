"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated caller.

    This model is populated from JWT claims and made available
    to route handlers via dependency injection. The handle is the
    account store identity of the caller.
    """

    handle: str = Field(..., description="Normalized user handle")
    issued_at: Optional[datetime] = Field(None, description="Token issue time")
    admin: bool = Field(default=False, description="Whether the caller is an admin")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }

"""
Account module data models.

User records are owned by the account store; other modules read them and
write them back whole (flag flips, final removal).
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class UserRecord(BaseModel):
    """
    A user account as persisted in the account store.

    The handle is the immutable identity of the account and the root of the
    user's on-disk namespace.
    """

    handle: str = Field(..., description="Unique normalized handle")
    name: str = Field(default="Anonymous", description="Display name")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Account creation time",
    )
    password_hash: str = Field(default="", description="scrypt hash, empty when no password")
    salt: str = Field(default="", description="Password salt")
    admin: bool = Field(default=False, description="Whether the user is an admin")
    enabled: bool = Field(default=True, description="Whether the user may log in")
    expires_at: Optional[datetime] = Field(
        None,
        description="Subscription expiry; None means a permanent account",
    )
    email: Optional[str] = Field(None, description="Bound email address")

    model_config = {"extra": "ignore"}

    @field_validator("created_at", "expires_at")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    @property
    def has_bound_email(self) -> bool:
        return bool(self.email and self.email.strip())

    def has_active_subscription(self, now: datetime) -> bool:
        """True when the account carries an expiry that has not passed yet."""
        return self.expires_at is not None and self.expires_at > now

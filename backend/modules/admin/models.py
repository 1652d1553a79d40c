"""
Admin module data models.

Covers the inactive-user cleanup workflow (criteria, candidates, reports)
and the request/response shapes of the single-user admin operations.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

BYTES_PER_MB = 1024 * 1024


class ScanCriteria(BaseModel):
    """
    Caller-supplied thresholds for an inactive-user scan.

    Immutable; part of the confirmation token of every scan it drives.
    """

    inactive_days: int = Field(default=60, ge=1, le=3650, description="Minimum days without activity")
    require_unused: bool = Field(
        default=False,
        description="Only include users whose content matches the default template",
    )
    max_storage_mb: Optional[float] = Field(
        None,
        ge=0,
        allow_inf_nan=False,
        description="Exclude users storing more than this many megabytes",
    )
    exclude_active_subscriptions: bool = Field(
        default=True,
        description="Skip users whose subscription has not expired",
    )

    model_config = {"frozen": True}

    @field_validator("max_storage_mb", mode="before")
    @classmethod
    def blank_means_no_cap(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def max_storage_bytes(self) -> Optional[int]:
        if self.max_storage_mb is None:
            return None
        return int(self.max_storage_mb * BYTES_PER_MB)

    def fingerprint(self) -> dict[str, Any]:
        """Canonical form hashed into confirmation tokens."""
        return {
            "inactive_days": self.inactive_days,
            "require_unused": self.require_unused,
            "max_storage_bytes": self.max_storage_bytes,
            "exclude_active_subscriptions": self.exclude_active_subscriptions,
        }


class DeletionCandidate(BaseModel):
    """A user selected by a scan, pending confirmation. Never persisted."""

    handle: str
    name: str
    last_activity: datetime
    days_since_last_activity: int
    storage_size: int = Field(..., description="Bytes on disk")
    has_email: bool
    expires_at: Optional[datetime] = None
    has_active_subscription: bool = False
    is_unused: Optional[bool] = Field(
        None,
        description="Audit verdict; None when the scan did not require it",
    )


class ScanReport(BaseModel):
    """Preview of an inactive-user deletion."""

    criteria: ScanCriteria
    confirmation_token: str
    candidates: list[DeletionCandidate] = Field(default_factory=list)
    total_users: int = 0
    total_size: int = 0


class ConfirmDeletionRequest(BaseModel):
    """Request to execute a previewed inactive-user deletion."""

    criteria: ScanCriteria = Field(default_factory=ScanCriteria)
    confirmation_token: Optional[str] = Field(None, description="Token from the preview scan")
    confirm_count: Optional[int] = Field(None, description="Number of users the caller expects to delete")
    candidate_handles: Optional[list[str]] = Field(
        None,
        description="Handles shown in the preview; checked against a fresh scan when given",
    )


class DeletionOutcome(BaseModel):
    """Per-candidate result of a deletion pass."""

    handle: str
    name: str
    success: bool
    deleted_size: int = 0
    email_notified: bool = False
    email_error: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


class DeletionReport(BaseModel):
    """Aggregate result of a deletion pass."""

    criteria: ScanCriteria
    confirmation_token: str
    deleted_users: list[DeletionOutcome] = Field(default_factory=list)
    failed_users: list[DeletionOutcome] = Field(default_factory=list)
    total_deleted: int = 0
    total_failed: int = 0
    total_deleted_size: int = 0


class ActivitySummary(BaseModel):
    """Activity signals shown in the admin user list."""

    last_activity: Optional[datetime] = None
    last_heartbeat: Optional[datetime] = None
    total_messages: int = 0


class AdminUserView(BaseModel):
    """A user as listed to administrators."""

    handle: str
    name: str
    avatar: Optional[str] = None
    admin: bool
    enabled: bool
    created_at: datetime
    has_password: bool
    email: Optional[str] = None
    expires_at: Optional[datetime] = None
    storage_size: Optional[int] = None
    activity: Optional[ActivitySummary] = None


class CreateUserRequest(BaseModel):
    """Request to create a user account."""

    handle: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    password: Optional[str] = None
    admin: bool = False


class CreateUserResponse(BaseModel):
    handle: str


class StorageSizeRequest(BaseModel):
    handles: list[str] = Field(..., min_length=1)


class StorageSizeResult(BaseModel):
    """Storage size of one requested handle, or why it could not be computed."""

    storage_size: Optional[int] = None
    error: Optional[str] = None


class SlugifyRequest(BaseModel):
    text: str = Field(..., min_length=1)


class SlugifyResponse(BaseModel):
    handle: Optional[str] = None


class BackupCleanupResult(BaseModel):
    """Backups removed for one user."""

    handle: str
    deleted_size: int = 0
    deleted_files: int = 0
    error: Optional[str] = None


class BackupCleanupSummary(BaseModel):
    """Backups removed across all users."""

    total_deleted_size: int = 0
    total_deleted_files: int = 0
    results: list[BackupCleanupResult] = Field(default_factory=list)

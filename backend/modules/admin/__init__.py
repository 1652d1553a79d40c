"""
Admin module.

User administration and the inactive-user cleanup workflow.

Public API:
- IUserAdminService: Interface for admin operations
- ScanCriteria / ScanReport / DeletionReport: Cleanup workflow models
- compute_confirmation_token: Token derivation for preview/confirm
- Admin exceptions: StaleConfirmationTokenError, ProtectedUserError, etc.
"""

from .interfaces import IUserAdminService
from .models import (
    ScanCriteria,
    DeletionCandidate,
    ScanReport,
    ConfirmDeletionRequest,
    DeletionOutcome,
    DeletionReport,
    AdminUserView,
)
from .cleanup import compute_confirmation_token
from .exceptions import (
    MissingConfirmationTokenError,
    InvalidConfirmCountError,
    StaleConfirmationTokenError,
    ConfirmCountMismatchError,
    ProtectedUserError,
)

__all__ = [
    # Interface
    "IUserAdminService",
    # Models
    "ScanCriteria",
    "DeletionCandidate",
    "ScanReport",
    "ConfirmDeletionRequest",
    "DeletionOutcome",
    "DeletionReport",
    "AdminUserView",
    # Token
    "compute_confirmation_token",
    # Exceptions
    "MissingConfirmationTokenError",
    "InvalidConfirmCountError",
    "StaleConfirmationTokenError",
    "ConfirmCountMismatchError",
    "ProtectedUserError",
]

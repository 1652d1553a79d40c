"""
Admin module interface.

The API layer and the maintenance CLI depend on IUserAdminService for all
user administration.
"""

from typing import Optional, Protocol, runtime_checkable

from modules.accounts.models import UserRecord
from modules.storage.models import AuditResult

from .models import (
    AdminUserView,
    BackupCleanupResult,
    BackupCleanupSummary,
    DeletionReport,
    ScanCriteria,
    ScanReport,
    StorageSizeResult,
)


@runtime_checkable
class IUserAdminService(Protocol):
    """
    Interface for user administration.

    All handles are normalized before use. Operations on a single user raise
    module exceptions; batch operations report failures per user.
    """

    async def list_users(self, include_storage_size: bool = False) -> list[AdminUserView]:
        """
        List all users, oldest account first.

        Args:
            include_storage_size: Also compute each user's on-disk size,
                which walks every user's tree

        Returns:
            Admin views of every user
        """
        ...

    async def compute_storage_size(self, handle: str) -> int:
        """Get the on-disk size of a user's root directory in bytes."""
        ...

    async def get_storage_sizes(self, handles: list[str]) -> dict[str, StorageSizeResult]:
        """
        Get storage sizes of several users concurrently.

        Returns:
            Mapping of normalized handle (or the raw input, when it could not
            be normalized) to its size or error
        """
        ...

    async def audit_user_usage(self, handle: str) -> AuditResult:
        """
        Audit a user's content against the active default template.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...

    async def disable_user(self, handle: str, acting_handle: str) -> None:
        """
        Disable a user's login.

        Raises:
            ProtectedUserError: If the caller targets themselves
            UserNotFoundError: If the user does not exist
        """
        ...

    async def enable_user(self, handle: str) -> None:
        ...

    async def promote_user(self, handle: str) -> None:
        ...

    async def demote_user(self, handle: str, acting_handle: str) -> None:
        ...

    async def create_user(
        self,
        handle: str,
        name: str,
        password: Optional[str] = None,
        admin: bool = False,
    ) -> UserRecord:
        """
        Create a user, their directories, and apply the default template.

        Raises:
            InvalidHandleError: If the handle normalizes to nothing
            UserAlreadyExistsError: If the handle is taken
        """
        ...

    async def delete_user(self, handle: str, acting_handle: str, purge: bool = False) -> None:
        """
        Delete a user's account, optionally with all their data.

        Raises:
            ProtectedUserError: If the target is the caller or the default user
        """
        ...

    def slugify(self, text: str) -> Optional[str]:
        """Normalize free text the way handles are normalized."""
        ...

    async def clear_backups(self, handle: str) -> BackupCleanupResult:
        """Empty one user's backups directory."""
        ...

    async def clear_all_backups(self) -> BackupCleanupSummary:
        """Empty every user's backups directory."""
        ...

    async def scan_inactive_users(
        self,
        criteria: ScanCriteria,
        acting_handle: Optional[str],
    ) -> ScanReport:
        """
        Preview which users an inactive-user deletion would remove.

        Has no side effects and may be repeated freely.
        """
        ...

    async def confirm_delete_inactive_users(
        self,
        criteria: ScanCriteria,
        acting_handle: Optional[str],
        confirmation_token: Optional[str],
        confirm_count: Optional[int],
        candidate_handles: Optional[list[str]] = None,
    ) -> DeletionReport:
        """
        Delete the users of a previewed scan.

        Raises:
            MissingConfirmationTokenError: No plausible token supplied
            InvalidConfirmCountError: No non-negative count supplied
            StaleConfirmationTokenError: Candidates changed since preview
            ConfirmCountMismatchError: Count differs from the fresh scan
        """
        ...

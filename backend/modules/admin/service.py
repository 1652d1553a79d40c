"""
User administration service.

Implements the admin operations over the account store and the users'
directory trees, and fronts the inactive-user cleanup workflow.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

import aiofiles.os

from modules.accounts.exceptions import InvalidHandleError, UserAlreadyExistsError, UserNotFoundError
from modules.accounts.interfaces import IAccountStore
from modules.accounts.keys import is_user_key, normalize_handle, to_avatar_key, to_key
from modules.accounts.models import UserRecord
from modules.accounts.passwords import hash_password, new_salt
from modules.activity.interfaces import IActivityMonitor
from modules.storage.audit import check_user_is_unused
from modules.storage.directories import UserDirectoryResolver, remove_tree
from modules.storage.models import AuditResult
from modules.storage.sizing import directory_size
from modules.storage.templates import DefaultTemplateProvider
from shared.exceptions import TavernError

from .cleanup import BulkDeletionExecutor, InactivityScanner
from .exceptions import ProtectedUserError
from .interfaces import IUserAdminService
from .models import (
    ActivitySummary,
    AdminUserView,
    BackupCleanupResult,
    BackupCleanupSummary,
    DeletionReport,
    ScanCriteria,
    ScanReport,
    StorageSizeResult,
)

logger = logging.getLogger(__name__)


class UserAdminService(IUserAdminService):
    """
    Admin operations backed by an account store and the data root.

    Single-user operations raise module exceptions; batch operations report
    per-user failures in their results instead.
    """

    def __init__(
        self,
        store: IAccountStore,
        resolver: UserDirectoryResolver,
        templates: DefaultTemplateProvider,
        monitor: IActivityMonitor,
        scanner: InactivityScanner,
        executor: BulkDeletionExecutor,
        default_user_handle: str,
        concurrency: int = 8,
    ):
        self._store = store
        self._resolver = resolver
        self._templates = templates
        self._monitor = monitor
        self._scanner = scanner
        self._executor = executor
        self._default_user_handle = default_user_handle
        self._concurrency = max(1, concurrency)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _normalize(self, handle: str) -> str:
        normalized = normalize_handle(handle)
        if not normalized:
            raise InvalidHandleError(handle)
        return normalized

    async def _get_user(self, handle: str) -> UserRecord:
        raw = await self._store.get(to_key(handle))
        if raw is None:
            raise UserNotFoundError(handle)
        return UserRecord.model_validate(raw)

    async def _save_user(self, user: UserRecord) -> None:
        await self._store.set(to_key(user.handle), user.model_dump(mode="json"))

    async def _update_flags(self, handle: str, **flags: bool) -> UserRecord:
        user = await self._get_user(handle)
        updated = user.model_copy(update=flags)
        await self._save_user(updated)
        return updated

    # -------------------------------------------------------------------------
    # Listing and inspection
    # -------------------------------------------------------------------------

    async def list_users(self, include_storage_size: bool = False) -> list[AdminUserView]:
        users = await self._scanner.load_users()
        semaphore = asyncio.Semaphore(self._concurrency)

        async def view(user: UserRecord) -> AdminUserView:
            avatar = await self._store.get(to_avatar_key(user.handle))
            activity = self._monitor.last_activity_for(user.handle)

            storage_size = None
            if include_storage_size:
                async with semaphore:
                    storage_size = await self.compute_storage_size(user.handle)

            return AdminUserView(
                handle=user.handle,
                name=user.name,
                avatar=avatar if isinstance(avatar, str) else None,
                admin=user.admin,
                enabled=user.enabled,
                created_at=user.created_at,
                has_password=user.has_password,
                email=user.email or None,
                expires_at=user.expires_at,
                storage_size=storage_size,
                activity=ActivitySummary(
                    last_activity=activity.last_activity,
                    last_heartbeat=activity.last_heartbeat,
                    total_messages=activity.total_messages,
                ) if activity else None,
            )

        views = await asyncio.gather(*(view(user) for user in users))
        return sorted(views, key=lambda v: v.created_at)

    async def compute_storage_size(self, handle: str) -> int:
        directories = self._resolver.directories_for(self._normalize(handle))
        return await directory_size(directories.root)

    async def get_storage_sizes(self, handles: list[str]) -> dict[str, StorageSizeResult]:
        results: dict[str, StorageSizeResult] = {}
        semaphore = asyncio.Semaphore(self._concurrency)

        async def measure(handle: str) -> None:
            normalized = normalize_handle(handle)
            if not normalized:
                results[handle] = StorageSizeResult(error="Invalid handle format")
                return
            try:
                async with semaphore:
                    size = await self.compute_storage_size(normalized)
                results[normalized] = StorageSizeResult(storage_size=size)
            except InvalidHandleError as e:
                results[handle] = StorageSizeResult(error=e.message)

        await asyncio.gather(*(measure(handle) for handle in handles))
        return results

    async def audit_user_usage(self, handle: str) -> AuditResult:
        normalized = self._normalize(handle)
        await self._get_user(normalized)
        baseline = await self._templates.baseline_directories()
        return await check_user_is_unused(self._resolver.directories_for(normalized), baseline)

    # -------------------------------------------------------------------------
    # Single-user operations
    # -------------------------------------------------------------------------

    async def disable_user(self, handle: str, acting_handle: str) -> None:
        normalized = self._normalize(handle)
        if normalized == acting_handle:
            raise ProtectedUserError(normalized, "Cannot disable yourself")
        await self._update_flags(normalized, enabled=False)
        logger.info(f"Disabled user {normalized}")

    async def enable_user(self, handle: str) -> None:
        normalized = self._normalize(handle)
        await self._update_flags(normalized, enabled=True)
        logger.info(f"Enabled user {normalized}")

    async def promote_user(self, handle: str) -> None:
        normalized = self._normalize(handle)
        await self._update_flags(normalized, admin=True)
        logger.info(f"Promoted user {normalized}")

    async def demote_user(self, handle: str, acting_handle: str) -> None:
        normalized = self._normalize(handle)
        if normalized == acting_handle:
            raise ProtectedUserError(normalized, "Cannot demote yourself")
        await self._update_flags(normalized, admin=False)
        logger.info(f"Demoted user {normalized}")

    async def create_user(
        self,
        handle: str,
        name: str,
        password: Optional[str] = None,
        admin: bool = False,
    ) -> UserRecord:
        normalized = self._normalize(handle)
        if await self._store.get(to_key(normalized)) is not None:
            raise UserAlreadyExistsError(normalized)

        salt = new_salt()
        user = UserRecord(
            handle=normalized,
            name=name or "Anonymous",
            created_at=datetime.now(timezone.utc),
            password_hash=hash_password(password, salt) if password else "",
            salt=salt,
            admin=admin,
            enabled=True,
            expires_at=None,  # Accounts created by admins never expire
        )
        await self._save_user(user)

        logger.info(f"Creating data directories for {normalized}")
        directories = self._resolver.directories_for(normalized)
        await self._resolver.ensure_exists(directories)
        await self._templates.apply_to(directories)
        return user

    async def delete_user(self, handle: str, acting_handle: str, purge: bool = False) -> None:
        normalized = self._normalize(handle)
        if normalized == acting_handle:
            raise ProtectedUserError(normalized, "Cannot delete yourself")
        if normalized == self._default_user_handle:
            raise ProtectedUserError(
                normalized,
                "The default user cannot be deleted; it is required as a fallback",
            )

        await self._store.remove(to_key(normalized))
        await self._store.remove(to_avatar_key(normalized))
        self._monitor.reset_stats(normalized)

        if purge:
            directories = self._resolver.directories_for(normalized)
            logger.info(f"Deleting data directories for {normalized}")
            await remove_tree(directories.root)

        logger.info(f"Deleted user {normalized} (purge: {purge})")

    def slugify(self, text: str) -> Optional[str]:
        return normalize_handle(text)

    # -------------------------------------------------------------------------
    # Backups
    # -------------------------------------------------------------------------

    async def clear_backups(self, handle: str) -> BackupCleanupResult:
        normalized = self._normalize(handle)
        backups = self._resolver.directories_for(normalized).categories["backups"]

        result = BackupCleanupResult(handle=normalized)
        if not await aiofiles.os.path.isdir(backups):
            return result

        result.deleted_size = await directory_size(backups)
        result.deleted_files = len(await aiofiles.os.listdir(backups))
        await remove_tree(backups)
        await aiofiles.os.makedirs(backups, exist_ok=True)

        logger.info(
            f"Cleared backups for user {normalized}: "
            f"{result.deleted_files} files, {result.deleted_size} bytes"
        )
        return result

    async def clear_all_backups(self) -> BackupCleanupSummary:
        summary = BackupCleanupSummary()

        for raw in await self._store.get_all(is_user_key):
            handle = raw.get("handle", "") if isinstance(raw, dict) else ""
            try:
                result = await self.clear_backups(handle)
            except (TavernError, OSError) as e:
                logger.error(f"Error clearing backups for user {handle}: {e}")
                result = BackupCleanupResult(handle=handle, error=str(e))
            summary.results.append(result)
            summary.total_deleted_size += result.deleted_size
            summary.total_deleted_files += result.deleted_files

        logger.info(
            f"Cleared all backups: {summary.total_deleted_files} files, "
            f"{summary.total_deleted_size} bytes"
        )
        return summary

    # -------------------------------------------------------------------------
    # Inactive users
    # -------------------------------------------------------------------------

    async def scan_inactive_users(
        self,
        criteria: ScanCriteria,
        acting_handle: Optional[str],
    ) -> ScanReport:
        return await self._scanner.scan(criteria, acting_handle)

    async def confirm_delete_inactive_users(
        self,
        criteria: ScanCriteria,
        acting_handle: Optional[str],
        confirmation_token: Optional[str],
        confirm_count: Optional[int],
        candidate_handles: Optional[list[str]] = None,
    ) -> DeletionReport:
        return await self._executor.execute(
            criteria,
            acting_handle,
            confirmation_token,
            confirm_count,
            candidate_handles,
        )

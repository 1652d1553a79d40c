"""
Inactive-user cleanup.

A two-phase workflow replaces a transaction over the account store:

1. InactivityScanner.scan() is a pure read that selects candidates and
   derives a confirmation token from the criteria and candidate handles.
2. BulkDeletionExecutor.execute() re-runs the scan, refuses to proceed
   unless the supplied token and count match the fresh result, and then
   deletes candidates one by one, re-validating each against live state.

No token is stored server-side; re-deriving it is the verification.
"""

import asyncio
import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from modules.accounts.exceptions import InvalidHandleError
from modules.accounts.interfaces import IAccountStore
from modules.accounts.keys import is_user_key, to_avatar_key, to_key
from modules.accounts.models import UserRecord
from modules.activity.interfaces import IActivityMonitor
from modules.notifications.interfaces import IEmailNotifier
from modules.storage.audit import check_user_is_unused
from modules.storage.directories import UserDirectoryResolver, remove_tree
from modules.storage.models import BaselineDirectories
from modules.storage.sizing import directory_size
from modules.storage.templates import DefaultTemplateProvider

from .exceptions import (
    ConfirmCountMismatchError,
    InvalidConfirmCountError,
    MissingConfirmationTokenError,
    StaleConfirmationTokenError,
)
from .models import (
    DeletionCandidate,
    DeletionOutcome,
    DeletionReport,
    ScanCriteria,
    ScanReport,
)

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

# Per-candidate failure codes
USER_NOT_FOUND = "USER_NOT_FOUND"
PROTECTED_USER = "PROTECTED_USER"
ACTIVE_SUBSCRIPTION = "ACTIVE_SUBSCRIPTION"
DELETION_FAILED = "DELETION_FAILED"
DIRECTORY_REMOVAL_FAILED = "DIRECTORY_REMOVAL_FAILED"


def compute_confirmation_token(criteria: ScanCriteria, handles: Iterable[str]) -> str:
    """
    Derive the confirmation token of a scan.

    The handles are sorted, so the token depends on the candidate set and
    not on the order the scan visited users in.
    """
    payload = json.dumps(
        {"criteria": criteria.fingerprint(), "handles": sorted(handles)},
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class InactivityScanner:
    """
    Selects users eligible for deletion under caller-supplied criteria.

    Filters run cheapest first: absolute protections, subscription,
    inactivity, then storage size and the baseline audit, which fan out
    concurrently over the remaining users.
    """

    def __init__(
        self,
        store: IAccountStore,
        resolver: UserDirectoryResolver,
        templates: DefaultTemplateProvider,
        monitor: IActivityMonitor,
        default_user_handle: str,
        concurrency: int = 8,
    ):
        self._store = store
        self._resolver = resolver
        self._templates = templates
        self._monitor = monitor
        self._default_user_handle = default_user_handle
        self._concurrency = max(1, concurrency)

    def is_protected(self, handle: str, user: UserRecord, acting_handle: Optional[str]) -> bool:
        """The caller, the default account and admins can never be deleted."""
        return (
            handle == acting_handle
            or handle == self._default_user_handle
            or user.admin
        )

    def last_activity_of(self, user: UserRecord) -> datetime:
        """Heartbeat if known, else recorded activity, else account creation."""
        activity = self._monitor.last_activity_for(user.handle)
        if activity is not None and activity.last_seen is not None:
            return activity.last_seen
        return user.created_at

    async def load_users(self) -> list[UserRecord]:
        """Read every user record from the account store."""
        users = []
        for raw in await self._store.get_all(is_user_key):
            try:
                users.append(UserRecord.model_validate(raw))
            except ValueError as e:
                logger.warning(f"Skipping malformed user record: {e}")
        return users

    async def _evaluate(
        self,
        user: UserRecord,
        criteria: ScanCriteria,
        baseline: Optional[BaselineDirectories],
        last_activity: datetime,
        now: datetime,
        semaphore: asyncio.Semaphore,
    ) -> Optional[DeletionCandidate]:
        async with semaphore:
            try:
                directories = self._resolver.directories_for(user.handle)
            except InvalidHandleError:
                logger.warning(f"Skipping user with invalid handle: {user.handle!r}")
                return None

            storage_size = await directory_size(directories.root)
            max_bytes = criteria.max_storage_bytes
            if max_bytes is not None and storage_size > max_bytes:
                return None

            is_unused = None
            if criteria.require_unused:
                audit = await check_user_is_unused(directories, baseline)
                if not audit.is_unused:
                    return None
                is_unused = True

        elapsed = now - last_activity
        return DeletionCandidate(
            handle=user.handle,
            name=user.name,
            last_activity=last_activity,
            days_since_last_activity=int(elapsed.total_seconds() // SECONDS_PER_DAY),
            storage_size=storage_size,
            has_email=user.has_bound_email,
            expires_at=user.expires_at,
            has_active_subscription=user.has_active_subscription(now),
            is_unused=is_unused,
        )

    async def scan(
        self,
        criteria: ScanCriteria,
        acting_handle: Optional[str],
        now: Optional[datetime] = None,
    ) -> ScanReport:
        """
        Find deletion candidates. Performs no mutation.

        Args:
            criteria: Scan thresholds
            acting_handle: Handle of the administrator running the scan
            now: Reference time (defaults to the current time)

        Returns:
            ScanReport with candidates in account store order and the
            confirmation token for a later deletion pass
        """
        now = now or datetime.now(timezone.utc)
        threshold_seconds = criteria.inactive_days * SECONDS_PER_DAY

        baseline = None
        if criteria.require_unused:
            baseline = await self._templates.baseline_directories()

        semaphore = asyncio.Semaphore(self._concurrency)
        pending = []

        for user in await self.load_users():
            if self.is_protected(user.handle, user, acting_handle):
                continue

            if criteria.exclude_active_subscriptions and user.has_active_subscription(now):
                continue

            last_activity = self.last_activity_of(user)
            if not (now - last_activity).total_seconds() > threshold_seconds:
                continue

            pending.append(
                self._evaluate(user, criteria, baseline, last_activity, now, semaphore)
            )

        candidates = [c for c in await asyncio.gather(*pending) if c is not None]

        return ScanReport(
            criteria=criteria,
            confirmation_token=compute_confirmation_token(
                criteria, (c.handle for c in candidates)
            ),
            candidates=candidates,
            total_users=len(candidates),
            total_size=sum(c.storage_size for c in candidates),
        )


class BulkDeletionExecutor:
    """
    Deletes the candidates of a confirmed scan.

    Every candidate has an independent outcome. Only the upfront
    confirmation checks abort the whole pass.
    """

    def __init__(
        self,
        scanner: InactivityScanner,
        store: IAccountStore,
        resolver: UserDirectoryResolver,
        monitor: IActivityMonitor,
        notifier: Optional[IEmailNotifier] = None,
        min_token_length: int = 8,
    ):
        self._scanner = scanner
        self._store = store
        self._resolver = resolver
        self._monitor = monitor
        self._notifier = notifier
        self._min_token_length = min_token_length

    def _validate_confirmation(
        self,
        confirmation_token: Optional[str],
        confirm_count: Optional[int],
    ) -> None:
        if not isinstance(confirmation_token, str) or len(confirmation_token) < self._min_token_length:
            raise MissingConfirmationTokenError()
        if (
            confirm_count is None
            or isinstance(confirm_count, bool)
            or not isinstance(confirm_count, int)
            or confirm_count < 0
        ):
            raise InvalidConfirmCountError()

    async def execute(
        self,
        criteria: ScanCriteria,
        acting_handle: Optional[str],
        confirmation_token: Optional[str],
        confirm_count: Optional[int],
        candidate_handles: Optional[list[str]] = None,
    ) -> DeletionReport:
        """
        Execute a previewed deletion.

        Raises:
            MissingConfirmationTokenError: Token missing or implausibly short
            InvalidConfirmCountError: Count missing or negative
            StaleConfirmationTokenError: Candidate set changed since preview
            ConfirmCountMismatchError: Count differs from the fresh scan
        """
        self._validate_confirmation(confirmation_token, confirm_count)

        preview = await self._scanner.scan(criteria, acting_handle)
        if confirmation_token != preview.confirmation_token:
            raise StaleConfirmationTokenError()
        if candidate_handles is not None and sorted(set(candidate_handles)) != sorted(
            c.handle for c in preview.candidates
        ):
            raise StaleConfirmationTokenError()
        if confirm_count != len(preview.candidates):
            raise ConfirmCountMismatchError(len(preview.candidates), confirm_count)

        outcomes = []
        for candidate in preview.candidates:
            outcomes.append(await self._delete_candidate(candidate, criteria, acting_handle))

        deleted = [o for o in outcomes if o.success]
        failed = [o for o in outcomes if not o.success]
        total_deleted_size = sum(o.deleted_size for o in deleted)

        logger.info(
            f"Inactive user deletion finished: {len(deleted)} deleted, "
            f"{len(failed)} failed, {total_deleted_size} bytes freed"
        )

        return DeletionReport(
            criteria=criteria,
            confirmation_token=preview.confirmation_token,
            deleted_users=deleted,
            failed_users=failed,
            total_deleted=len(deleted),
            total_failed=len(failed),
            total_deleted_size=total_deleted_size,
        )

    async def _notify(self, user: UserRecord, days_inactive: int) -> tuple[bool, Optional[str]]:
        if self._notifier is None or not self._notifier.is_available():
            return False, "Email service not available"
        try:
            sent = await self._notifier.send_inactive_deletion_notice(
                user.email.strip(), user.name, days_inactive
            )
        except Exception as e:
            logger.warning(f"Notification for {user.handle} failed, deleting anyway: {e}")
            return False, str(e)
        return sent, None if sent else "Failed to send notification email"

    async def _delete_candidate(
        self,
        candidate: DeletionCandidate,
        criteria: ScanCriteria,
        acting_handle: Optional[str],
    ) -> DeletionOutcome:
        handle = candidate.handle
        email_notified = False
        email_error = None

        def failure(code: str, error: str) -> DeletionOutcome:
            return DeletionOutcome(
                handle=handle,
                name=candidate.name,
                success=False,
                email_notified=email_notified,
                email_error=email_error,
                error=error,
                error_code=code,
            )

        try:
            raw = await self._store.get(to_key(handle))
            if raw is None:
                return failure(USER_NOT_FOUND, "User not found")
            user = UserRecord.model_validate(raw)

            # State may have changed since the scan
            if self._scanner.is_protected(handle, user, acting_handle):
                return failure(PROTECTED_USER, "Protected user cannot be deleted")

            if criteria.exclude_active_subscriptions and user.has_active_subscription(
                datetime.now(timezone.utc)
            ):
                return failure(ACTIVE_SUBSCRIPTION, "User has active subscription")

            if user.has_bound_email:
                email_notified, email_error = await self._notify(
                    user, candidate.days_since_last_activity
                )

            directories = self._resolver.directories_for(handle)

            await self._store.remove(to_key(handle))
            await self._store.remove(to_avatar_key(handle))
            self._monitor.reset_stats(handle)
        except Exception as e:
            logger.exception(f"Error deleting user {handle}")
            return failure(DELETION_FAILED, str(e))

        # The account record is gone; a leftover directory is recoverable by hand
        try:
            await remove_tree(directories.root)
        except OSError as e:
            logger.error(f"Deleted account {handle} but failed to remove {directories.root}: {e}")
            return failure(DIRECTORY_REMOVAL_FAILED, str(e))

        logger.info(
            f"Deleted inactive user {handle}: {candidate.storage_size / 1024 / 1024:.2f} MB"
        )
        return DeletionOutcome(
            handle=handle,
            name=candidate.name,
            success=True,
            deleted_size=candidate.storage_size,
            email_notified=email_notified,
            email_error=email_error,
        )

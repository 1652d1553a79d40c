"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.
"""

from typing import TYPE_CHECKING

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.accounts.interfaces import IAccountStore
    from modules.activity.interfaces import IActivityMonitor
    from modules.admin.cleanup import BulkDeletionExecutor, InactivityScanner
    from modules.admin.interfaces import IUserAdminService
    from modules.notifications.interfaces import IEmailNotifier
    from modules.storage.directories import UserDirectoryResolver
    from modules.storage.templates import DefaultTemplateProvider


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self.reset()

    @property
    def settings(self) -> Settings:
        return self._settings if self._settings is not None else get_settings()

    @property
    def account_store(self) -> "IAccountStore":
        """Get the account store selected by settings."""
        if self._account_store is None:
            backend = self.settings.account_store_backend
            if backend == "supabase":
                from modules.accounts.store import SupabaseAccountStore
                from shared.database import get_supabase_client
                self._account_store = SupabaseAccountStore(
                    get_supabase_client(),
                    self.settings.account_store_table,
                )
            elif backend == "memory":
                from modules.accounts.store import InMemoryAccountStore
                self._account_store = InMemoryAccountStore()
            else:
                from modules.accounts.store import FileAccountStore
                self._account_store = FileAccountStore(self.settings.data_root / "_storage")
        return self._account_store

    @property
    def directory_resolver(self) -> "UserDirectoryResolver":
        if self._directory_resolver is None:
            from modules.storage.directories import UserDirectoryResolver
            self._directory_resolver = UserDirectoryResolver(self.settings.data_root)
        return self._directory_resolver

    @property
    def template_provider(self) -> "DefaultTemplateProvider":
        if self._template_provider is None:
            from modules.storage.templates import DefaultTemplateProvider
            self._template_provider = DefaultTemplateProvider(
                self.directory_resolver,
                self.settings.template_user_handle,
            )
        return self._template_provider

    @property
    def activity_monitor(self) -> "IActivityMonitor":
        if self._activity_monitor is None:
            from modules.activity.service import ActivityMonitor
            self._activity_monitor = ActivityMonitor()
        return self._activity_monitor

    @property
    def email_notifier(self) -> "IEmailNotifier":
        if self._email_notifier is None:
            from modules.notifications.service import SmtpEmailNotifier
            self._email_notifier = SmtpEmailNotifier(self.settings)
        return self._email_notifier

    @property
    def inactivity_scanner(self) -> "InactivityScanner":
        if self._inactivity_scanner is None:
            from modules.admin.cleanup import InactivityScanner
            self._inactivity_scanner = InactivityScanner(
                store=self.account_store,
                resolver=self.directory_resolver,
                templates=self.template_provider,
                monitor=self.activity_monitor,
                default_user_handle=self.settings.default_user_handle,
                concurrency=self.settings.scan_concurrency,
            )
        return self._inactivity_scanner

    @property
    def bulk_deletion_executor(self) -> "BulkDeletionExecutor":
        if self._bulk_deletion_executor is None:
            from modules.admin.cleanup import BulkDeletionExecutor
            self._bulk_deletion_executor = BulkDeletionExecutor(
                scanner=self.inactivity_scanner,
                store=self.account_store,
                resolver=self.directory_resolver,
                monitor=self.activity_monitor,
                notifier=self.email_notifier,
                min_token_length=self.settings.min_confirmation_token_length,
            )
        return self._bulk_deletion_executor

    @property
    def user_admin(self) -> "IUserAdminService":
        """Get the user admin service instance."""
        if self._user_admin_service is None:
            from modules.admin.service import UserAdminService
            self._user_admin_service = UserAdminService(
                store=self.account_store,
                resolver=self.directory_resolver,
                templates=self.template_provider,
                monitor=self.activity_monitor,
                scanner=self.inactivity_scanner,
                executor=self.bulk_deletion_executor,
                default_user_handle=self.settings.default_user_handle,
                concurrency=self.settings.scan_concurrency,
            )
        return self._user_admin_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._account_store: "IAccountStore | None" = None
        self._directory_resolver: "UserDirectoryResolver | None" = None
        self._template_provider: "DefaultTemplateProvider | None" = None
        self._activity_monitor: "IActivityMonitor | None" = None
        self._email_notifier: "IEmailNotifier | None" = None
        self._inactivity_scanner: "InactivityScanner | None" = None
        self._bulk_deletion_executor: "BulkDeletionExecutor | None" = None
        self._user_admin_service: "IUserAdminService | None" = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_account_store() -> "IAccountStore":
    """FastAPI dependency for the account store."""
    return get_container().account_store


def get_activity_monitor() -> "IActivityMonitor":
    """FastAPI dependency for the activity monitor."""
    return get_container().activity_monitor


def get_user_admin_service() -> "IUserAdminService":
    """FastAPI dependency for the user admin service."""
    return get_container().user_admin

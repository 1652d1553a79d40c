"""Fixtures for admin module tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.accounts.store import InMemoryAccountStore
from modules.activity.service import ActivityMonitor
from modules.admin.cleanup import BulkDeletionExecutor, InactivityScanner
from modules.admin.service import UserAdminService
from modules.storage.directories import UserDirectoryResolver
from modules.storage.templates import DefaultTemplateProvider

DEFAULT_USER = "default-user"
TEMPLATE_USER = "default-template"


@pytest.fixture
def store():
    return InMemoryAccountStore()


@pytest.fixture
def resolver(data_root):
    return UserDirectoryResolver(data_root)


@pytest.fixture
def templates(resolver):
    return DefaultTemplateProvider(resolver, TEMPLATE_USER)


@pytest.fixture
def monitor():
    return ActivityMonitor()


@pytest.fixture
def notifier():
    mock = MagicMock()
    mock.is_available.return_value = True
    mock.send_inactive_deletion_notice = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def scanner(store, resolver, templates, monitor):
    return InactivityScanner(
        store=store,
        resolver=resolver,
        templates=templates,
        monitor=monitor,
        default_user_handle=DEFAULT_USER,
        concurrency=4,
    )


@pytest.fixture
def executor(scanner, store, resolver, monitor, notifier):
    return BulkDeletionExecutor(
        scanner=scanner,
        store=store,
        resolver=resolver,
        monitor=monitor,
        notifier=notifier,
    )


@pytest.fixture
def admin_service(store, resolver, templates, monitor, scanner, executor):
    return UserAdminService(
        store=store,
        resolver=resolver,
        templates=templates,
        monitor=monitor,
        scanner=scanner,
        executor=executor,
        default_user_handle=DEFAULT_USER,
        concurrency=4,
    )


@pytest.fixture
def add_user(store, user_factory):
    """Store a user record and return it."""
    async def add(handle: str, created_days_ago: int = 0, **fields) -> dict:
        record = user_factory(handle, created_days_ago, **fields)
        await store.set(f"user:{handle}", record)
        return record
    return add

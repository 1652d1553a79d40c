"""
Admin API endpoints.

User administration and the two-phase inactive-user deletion. Every route
requires an enabled admin account.
"""

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_user_admin_service
from api.middleware.auth import require_admin
from api.models.errors import ErrorResponse
from modules.storage.models import AuditResult
from shared.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    TavernError,
    ValidationError,
)
from shared.models import AuthenticatedUser

from .interfaces import IUserAdminService
from .models import (
    AdminUserView,
    BackupCleanupResult,
    BackupCleanupSummary,
    ConfirmDeletionRequest,
    CreateUserRequest,
    CreateUserResponse,
    DeletionReport,
    ScanCriteria,
    ScanReport,
    SlugifyRequest,
    SlugifyResponse,
    StorageSizeRequest,
    StorageSizeResult,
)

router = APIRouter()


def raise_http_error(error: TavernError) -> NoReturn:
    """Translate a module exception into an HTTP error response."""
    if isinstance(error, NotFoundError):
        status_code = 404
    elif isinstance(error, ConflictError):
        status_code = 409
    elif isinstance(error, AuthorizationError):
        status_code = 403
    elif isinstance(error, ValidationError):
        status_code = 400
    else:
        status_code = 500
    detail = ErrorResponse.from_error(error).model_dump()
    raise HTTPException(status_code=status_code, detail=detail) from error


@router.get("", response_model=list[AdminUserView])
async def list_users(
    include_storage_size: bool = Query(default=False, description="Walk every tree for its size"),
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> list[AdminUserView]:
    """List all users, oldest account first."""
    return await service.list_users(include_storage_size)


@router.post("", response_model=CreateUserResponse, status_code=201)
async def create_user(
    request: CreateUserRequest,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> CreateUserResponse:
    """
    Create a user account.

    The user's directories are created and seeded from the default template.
    """
    try:
        user = await service.create_user(
            request.handle, request.name, request.password, request.admin
        )
    except TavernError as e:
        raise_http_error(e)
    return CreateUserResponse(handle=user.handle)


@router.post("/storage-size", response_model=dict[str, StorageSizeResult])
async def get_storage_sizes(
    request: StorageSizeRequest,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> dict[str, StorageSizeResult]:
    return await service.get_storage_sizes(request.handles)


@router.post("/slugify", response_model=SlugifyResponse)
async def slugify(
    request: SlugifyRequest,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> SlugifyResponse:
    return SlugifyResponse(handle=service.slugify(request.text))


@router.post("/clear-backups", response_model=BackupCleanupSummary)
async def clear_all_backups(
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> BackupCleanupSummary:
    """Empty the backups directory of every user."""
    return await service.clear_all_backups()


@router.post("/inactive/scan", response_model=ScanReport)
async def scan_inactive_users(
    criteria: ScanCriteria,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> ScanReport:
    """
    Preview an inactive-user deletion.

    Nothing is modified. The returned token and candidate count must be
    passed back to /inactive/delete.
    """
    return await service.scan_inactive_users(criteria, admin.handle)


@router.post("/inactive/delete", response_model=DeletionReport)
async def delete_inactive_users(
    request: ConfirmDeletionRequest,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> DeletionReport:
    """
    Execute a previewed inactive-user deletion.

    Responds 400 for a missing token or count and for a count mismatch, and
    409 when the candidate set changed since the preview. Individual
    deletion failures are reported in the response body.
    """
    try:
        return await service.confirm_delete_inactive_users(
            request.criteria,
            admin.handle,
            request.confirmation_token,
            request.confirm_count,
            request.candidate_handles,
        )
    except TavernError as e:
        raise_http_error(e)


@router.get("/{handle}/storage-size", response_model=StorageSizeResult)
async def get_storage_size(
    handle: str,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> StorageSizeResult:
    try:
        return StorageSizeResult(storage_size=await service.compute_storage_size(handle))
    except TavernError as e:
        raise_http_error(e)


@router.get("/{handle}/audit", response_model=AuditResult)
async def audit_user(
    handle: str,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> AuditResult:
    """Check whether a user's content only differs from the default template by noise."""
    try:
        return await service.audit_user_usage(handle)
    except TavernError as e:
        raise_http_error(e)


@router.post("/{handle}/disable", status_code=204)
async def disable_user(
    handle: str,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> None:
    try:
        await service.disable_user(handle, admin.handle)
    except TavernError as e:
        raise_http_error(e)


@router.post("/{handle}/enable", status_code=204)
async def enable_user(
    handle: str,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> None:
    try:
        await service.enable_user(handle)
    except TavernError as e:
        raise_http_error(e)


@router.post("/{handle}/promote", status_code=204)
async def promote_user(
    handle: str,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> None:
    try:
        await service.promote_user(handle)
    except TavernError as e:
        raise_http_error(e)


@router.post("/{handle}/demote", status_code=204)
async def demote_user(
    handle: str,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> None:
    try:
        await service.demote_user(handle, admin.handle)
    except TavernError as e:
        raise_http_error(e)


@router.post("/{handle}/clear-backups", response_model=BackupCleanupResult)
async def clear_backups(
    handle: str,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> BackupCleanupResult:
    try:
        return await service.clear_backups(handle)
    except TavernError as e:
        raise_http_error(e)


@router.delete("/{handle}", status_code=204)
async def delete_user(
    handle: str,
    purge: bool = Query(default=False, description="Also remove the user's data directories"),
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserAdminService = Depends(get_user_admin_service),
) -> None:
    """Delete a user account, and optionally all of its data."""
    try:
        await service.delete_user(handle, admin.handle, purge)
    except TavernError as e:
        raise_http_error(e)

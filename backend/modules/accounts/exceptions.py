"""
Account module exceptions.
"""

from shared.exceptions import (
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class UserNotFoundError(NotFoundError):
    """Raised when no account exists for a handle."""

    def __init__(self, handle: str):
        super().__init__(
            f"User not found: {handle}",
            code="USER_NOT_FOUND",
            details={"handle": handle},
        )


class UserAlreadyExistsError(ConflictError):
    """Raised when creating an account whose handle is taken."""

    def __init__(self, handle: str):
        super().__init__(
            f"User already exists: {handle}",
            code="USER_ALREADY_EXISTS",
            details={"handle": handle},
        )


class InvalidHandleError(ValidationError):
    """Raised when a handle cannot be normalized or escapes the data root."""

    def __init__(self, handle: str):
        super().__init__(
            f"Invalid handle format: {handle}",
            code="INVALID_HANDLE",
            details={"handle": handle},
        )


class AccountStoreError(ExternalServiceError):
    """Raised when the account store backend fails."""

    def __init__(self, message: str, key: str):
        super().__init__(
            message,
            service="account_store",
            code="ACCOUNT_STORE_ERROR",
            details={"key": key},
        )

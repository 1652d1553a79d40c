"""
Admin module exceptions.

Confirmation failures abort a deletion pass before anything is deleted.
Protection violations reject single-user operations on protected targets.
"""

from shared.exceptions import (
    AuthorizationError,
    ConflictError,
    ValidationError,
)


class MissingConfirmationTokenError(ValidationError):
    """Raised when a deletion pass is requested without a plausible token."""

    def __init__(self):
        super().__init__(
            "Missing confirmation token; run a preview scan first",
            code="MISSING_CONFIRMATION_TOKEN",
        )


class InvalidConfirmCountError(ValidationError):
    """Raised when the expected deletion count is missing or negative."""

    def __init__(self):
        super().__init__(
            "Missing confirm count; enter the number of users to delete",
            code="INVALID_CONFIRM_COUNT",
        )


class StaleConfirmationTokenError(ConflictError):
    """Raised when the candidate set changed since the preview scan."""

    def __init__(self):
        super().__init__(
            "Preview result has changed; scan again before deleting",
            code="STALE_CONFIRMATION_TOKEN",
        )


class ConfirmCountMismatchError(ValidationError):
    """Raised when the expected deletion count differs from the fresh scan."""

    def __init__(self, expected: int, supplied: int):
        super().__init__(
            f"Confirm count mismatch: {expected} users would be deleted",
            code="CONFIRM_COUNT_MISMATCH",
            details={"expected": expected, "supplied": supplied},
        )


class ProtectedUserError(AuthorizationError):
    """Raised when an operation targets a user it may not touch."""

    def __init__(self, handle: str, reason: str):
        super().__init__(
            reason,
            code="PROTECTED_USER",
            details={"handle": handle},
        )

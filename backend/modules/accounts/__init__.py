"""
Accounts module.

Holds the account store contract used by every other module, the user
record model, handle normalization and password hashing.

Public API:
- IAccountStore: Interface for the key-value account store
- UserRecord: A persisted user account
- normalize_handle / to_key / to_avatar_key: Key derivation helpers
- Account exceptions: UserNotFoundError, UserAlreadyExistsError, etc.
"""

from .interfaces import IAccountStore
from .models import UserRecord
from .keys import (
    KEY_PREFIX,
    AVATAR_PREFIX,
    normalize_handle,
    to_key,
    to_avatar_key,
    is_user_key,
)
from .exceptions import (
    UserNotFoundError,
    UserAlreadyExistsError,
    InvalidHandleError,
    AccountStoreError,
)

__all__ = [
    # Interface
    "IAccountStore",
    # Models
    "UserRecord",
    # Keys
    "KEY_PREFIX",
    "AVATAR_PREFIX",
    "normalize_handle",
    "to_key",
    "to_avatar_key",
    "is_user_key",
    # Exceptions
    "UserNotFoundError",
    "UserAlreadyExistsError",
    "InvalidHandleError",
    "AccountStoreError",
]

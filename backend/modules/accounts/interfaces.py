"""
Account store interface.

The account store is a key-value store holding user records and avatars.
It serializes individual key reads and writes but offers no cross-key
transactions.
"""

from typing import Any, Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class IAccountStore(Protocol):
    """
    Interface for account store operations.

    Values are JSON-compatible documents (user records are stored as dicts,
    avatars as strings).
    """

    async def get_all(self, predicate: Callable[[str], bool]) -> list[Any]:
        """
        Get every value whose key satisfies the predicate.

        Args:
            predicate: Called with each key

        Returns:
            Matching values in key order
        """
        ...

    async def get(self, key: str) -> Optional[Any]:
        """Get the value stored under a key, or None if absent."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store a value under a key, replacing any previous value."""
        ...

    async def remove(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        ...

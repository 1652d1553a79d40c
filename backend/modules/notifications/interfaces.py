"""
Email notifier interface.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class IEmailNotifier(Protocol):
    """Interface for outgoing account notices."""

    def is_available(self) -> bool:
        """Whether the notifier is configured to send mail."""
        ...

    async def send_inactive_deletion_notice(
        self,
        email: str,
        name: str,
        days_inactive: int,
    ) -> bool:
        """
        Tell a user their inactive account has been deleted.

        Returns:
            True if the message was accepted for delivery. Never raises.
        """
        ...

"""
Notifications module.

Public API:
- IEmailNotifier: Interface for outgoing account notices
"""

from .interfaces import IEmailNotifier

__all__ = [
    "IEmailNotifier",
]

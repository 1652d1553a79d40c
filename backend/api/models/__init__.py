"""API models package."""

from .user import TokenPayload
from .errors import ErrorResponse

__all__ = [
    "TokenPayload",
    "ErrorResponse",
]

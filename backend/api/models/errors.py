"""
Error response models.

Standardized error responses for the API.
"""

from pydantic import BaseModel
from typing import Any, Optional

from shared.exceptions import TavernError


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    message: str
    details: Optional[dict[str, Any]] = None

    @classmethod
    def from_error(cls, error: TavernError) -> "ErrorResponse":
        return cls(**error.to_dict())

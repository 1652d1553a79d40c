"""
Token models for authentication.
"""

from pydantic import BaseModel, ConfigDict


class TokenPayload(BaseModel):
    """JWT token payload structure."""
    model_config = ConfigDict(extra="ignore")  # Ignore extra claims

    sub: str  # User handle
    aud: str  # Audience
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp

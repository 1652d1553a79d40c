"""
User-related endpoints.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shared.models import AuthenticatedUser
from ..middleware.auth import get_current_user

router = APIRouter()


class UserProfileResponse(BaseModel):
    """Caller identity response model."""

    handle: str
    admin: bool


@router.get("/me", response_model=UserProfileResponse)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
) -> UserProfileResponse:
    """
    Get the caller's handle.

    Requires authentication.
    """
    return UserProfileResponse(handle=user.handle, admin=user.admin)

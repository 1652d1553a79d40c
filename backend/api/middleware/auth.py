"""
JWT Authentication middleware.

Validates JWT tokens issued by the chat frontend and resolves the caller's
handle. Admin routes additionally require an enabled admin account.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from datetime import datetime, timezone

from shared.config import get_settings
from shared.models import AuthenticatedUser
from modules.accounts.interfaces import IAccountStore
from modules.accounts.keys import to_key
from modules.accounts.models import UserRecord
from modules.activity.interfaces import IActivityMonitor

from ..dependencies import get_account_store, get_activity_monitor
from ..models.user import TokenPayload

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(HTTPException):
    """Authorization error for authenticated callers without admin rights."""
    def __init__(self, detail: str = "Admin privileges required"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate a JWT token.

    Args:
        token: The JWT token string

    Returns:
        TokenPayload with decoded claims

    Raises:
        AuthError: If token is invalid or expired
    """
    settings = get_settings()

    if not settings.jwt_secret:
        raise AuthError("Server authentication not configured")

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except JWTError as e:
        raise AuthError(f"Invalid token: {str(e)}")


def get_user_from_payload(payload: TokenPayload) -> AuthenticatedUser:
    """
    Convert JWT payload to AuthenticatedUser model.

    Args:
        payload: Decoded JWT payload

    Returns:
        AuthenticatedUser instance
    """
    return AuthenticatedUser(
        handle=payload.sub,
        issued_at=datetime.fromtimestamp(payload.iat, tz=timezone.utc),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    monitor: IActivityMonitor = Depends(get_activity_monitor),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Every authenticated request counts as activity of the caller.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"handle": user.handle}
    """
    if credentials is None:
        raise AuthError("Missing authorization header")

    payload = decode_token(credentials.credentials)
    user = get_user_from_payload(payload)
    monitor.record_activity(user.handle)
    return user


async def require_admin(
    user: AuthenticatedUser = Depends(get_current_user),
    store: IAccountStore = Depends(get_account_store),
) -> AuthenticatedUser:
    """
    Dependency that requires an enabled admin account.

    The account store is consulted on every request, so demoting or
    disabling an admin takes effect immediately.
    """
    raw = await store.get(to_key(user.handle))
    if raw is None:
        raise ForbiddenError()

    account = UserRecord.model_validate(raw)
    if not account.enabled or not account.admin:
        raise ForbiddenError()

    return user.model_copy(update={"admin": True})


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_user)
RequireAdmin = Depends(require_admin)

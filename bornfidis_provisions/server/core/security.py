"""
Request authentication and authorization.

Bearer JWTs (HS256 by default) carry the caller's identity:

- ``sub``: user id
- ``email``: user email, used to match invites
- ``role``: account role; ``ADMIN``, ``STAFF`` and ``COORDINATOR`` are admins

Dependencies:
- ``get_current_user`` -> 401 when the token is missing or invalid
- ``require_admin``    -> additionally 403 for non-admin roles
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from bornfidis_provisions.core.errors import AuthenticationError, PermissionDeniedError
from bornfidis_provisions.core.logging_config import get_logger

from .config import settings
from .constant import ADMIN_ROLES

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: Optional[str]
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role.upper() in ADMIN_ROLES


def create_access_token(
    user_id: str,
    *,
    email: Optional[str] = None,
    role: str = "USER",
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed JWT access token.

    Args:
        user_id: Subject of the token
        email: User email claim
        role: Account role claim
        expires_delta: Token lifetime (defaults to JWT_EXPIRE_MINUTES)

    Returns:
        Encoded JWT string
    """
    auth = settings.auth
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=auth.jwt_expire_minutes))
    claims = {"sub": user_id, "email": email, "role": role, "exp": expire}
    return jwt.encode(claims, auth.jwt_secret, algorithm=auth.jwt_algorithm)


def decode_access_token(token: str) -> CurrentUser:
    """
    Validate a JWT and extract the caller.

    Raises:
        AuthenticationError: If the token is malformed, expired or has no subject
    """
    auth = settings.auth
    try:
        payload = jwt.decode(token, auth.jwt_secret, algorithms=[auth.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"Rejected access token: {e}")
        raise AuthenticationError() from e

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError()
    email = payload.get("email")
    return CurrentUser(id=str(user_id), email=email.lower() if email else None, role=str(payload.get("role") or "USER"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return decode_access_token(credentials.credentials)


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        logger.info(f"Admin access denied for user {user.id} with role {user.role}")
        raise PermissionDeniedError()
    return user


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
AdminUserDep = Annotated[CurrentUser, Depends(require_admin)]

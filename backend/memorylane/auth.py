"""Caller identity for Memory Lane backend.

Authentication itself is handled by an external provider; this module only
turns the bearer token it issues into a stable user id. Reads tolerate a
missing or unusable token (the caller is simply absent), writes do not.
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .config import Settings, get_settings
from .errors import Unauthenticated
from .logging_config import get_logger

logger = get_logger("memorylane.auth")

# Bearer is optional so reads can run without a caller
security = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token for a user."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)

    to_encode = {
        "sub": user_id,
        "exp": expire,
        "iat": datetime.now(timezone.utc),
        "type": "access",
    }
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> dict:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        raise Unauthenticated("Invalid or expired token")


def caller_from_token(token: str | None, settings: Settings) -> str | None:
    """Resolve a bearer token to a user id, or None when there is no usable identity."""
    if not token:
        return None
    try:
        payload = decode_token(token, settings)
    except Unauthenticated:
        logger.warning("Rejected bearer token (invalid or expired)")
        return None
    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Bearer token without subject claim")
        return None
    return str(user_id)


async def get_optional_caller(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> str | None:
    """Identity provider: ``currentCaller() -> identity | absent``."""
    token = credentials.credentials if credentials else None
    return caller_from_token(token, settings)


async def get_current_caller(
    caller_id: Annotated[str | None, Depends(get_optional_caller)],
) -> str:
    """Same as ``get_optional_caller`` but an absent caller is an error."""
    if caller_id is None:
        raise Unauthenticated()
    return caller_id


# Type aliases for dependency injection
OptionalCaller = Annotated[str | None, Depends(get_optional_caller)]
CurrentCaller = Annotated[str, Depends(get_current_caller)]

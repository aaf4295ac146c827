"""Rate limiting for Memory Lane backend.

Limits are keyed on the authenticated user where a valid bearer token is
present, falling back to the client address.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .auth import caller_from_token
from .config import get_settings


def get_rate_limit_key(request) -> str:
    """Per-user key, or per-IP for anonymous callers."""
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        caller_id = caller_from_token(token.strip(), get_settings())
        if caller_id:
            return f"user:{caller_id}"
    return f"ip:{get_remote_address(request)}"


def upload_rate_limit() -> str:
    return get_settings().upload_rate_limit


limiter = Limiter(key_func=get_rate_limit_key)

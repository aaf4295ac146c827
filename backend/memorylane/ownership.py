"""Ownership guard.

Every record has exactly one owner. A record is only visible to, and only
changeable by, the caller whose id equals its ``owner_id``. Anything else
looks exactly like a missing record.
"""

from typing import Any

from supabase import Client

from .database import OWNER_COLUMN, get_record, query_by_index
from .errors import NotFoundOrUnauthorized, Unauthenticated


def require_caller(caller_id: str | None) -> str:
    """Writes need an identity."""
    if not caller_id:
        raise Unauthenticated()
    return caller_id


def owned(record: dict | None, caller_id: str | None) -> dict | None:
    """Return ``record`` if ``caller_id`` owns it, else None."""
    if record is None or not caller_id:
        return None
    if record.get(OWNER_COLUMN) != caller_id:
        return None
    return record


async def fetch_owned(db: Client, table: str, record_id: str, caller_id: str | None) -> dict | None:
    """Read path: the caller's record, or None (absent caller included)."""
    if not caller_id:
        return None
    return owned(await get_record(db, table, record_id), caller_id)


async def fetch_owned_for_write(
    db: Client,
    table: str,
    record_id: str,
    caller_id: str | None,
    kind: str = "Record",
) -> dict:
    """Write path: the caller's record, or a distinguishable failure."""
    caller_id = require_caller(caller_id)
    record = owned(await get_record(db, table, record_id), caller_id)
    if record is None:
        raise NotFoundOrUnauthorized(kind)
    return record


async def query_owned(
    db: Client,
    table: str,
    caller_id: str | None,
    key: dict[str, Any] | None = None,
    **kwargs: Any,
) -> list[dict]:
    """List query filtered on the owner index in the store, not after the fact."""
    if not caller_id:
        return []
    return await query_by_index(db, table, {OWNER_COLUMN: caller_id, **(key or {})}, **kwargs)

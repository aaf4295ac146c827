"""Record store: Supabase tables holding memories, reminders and suggestions.

Only primitives live here (insert / get / patch / delete / owner-index
query). Ownership rules are applied one layer up, in ``ownership``.
"""

import uuid
from typing import Annotated, Any

from fastapi import Depends

from supabase import Client, create_client

from .config import Settings, get_settings

_supabase_client: Client | None = None


def get_supabase_client(settings: Settings | None = None) -> Client:
    """Get cached Supabase client."""
    global _supabase_client
    if _supabase_client is None:
        if settings is None:
            settings = get_settings()
        # Prefer new secret key, fall back to legacy service_role_key
        api_key = settings.supabase_secret_key or settings.supabase_service_role_key
        if not api_key:
            raise ValueError("Either SUPABASE_SECRET_KEY or SUPABASE_SERVICE_ROLE_KEY must be set")
        _supabase_client = create_client(settings.supabase_url, api_key)
    return _supabase_client


def get_db(settings: Annotated[Settings, Depends(get_settings)]) -> Client:
    """FastAPI dependency for Supabase client."""
    return get_supabase_client(settings)


# Type alias for dependency injection
Database = Annotated[Client, Depends(get_db)]


# =============================================================================
# Table Names
# =============================================================================

MEMORIES_TABLE = "memories"
REMINDERS_TABLE = "reminders"
SUGGESTIONS_TABLE = "ai_suggestions"

OWNER_COLUMN = "owner_id"

# Enumeration order when a query names no explicit sort: store-assigned
# creation time, oldest first.
CREATION_ORDER = ("created_at", False)


def is_record_id(value: Any) -> bool:
    """Record ids are store-assigned UUIDs; anything else cannot exist."""
    try:
        uuid.UUID(str(value))
    except (TypeError, ValueError):
        return False
    return True


# =============================================================================
# Record Operations
# =============================================================================

async def insert_record(db: Client, table: str, fields: dict[str, Any]) -> dict:
    """Insert a row and return it with its store-assigned id."""
    result = db.table(table).insert(fields).execute()
    if not result.data:
        raise RuntimeError(f"Insert into {table} returned no row")
    return result.data[0]


async def get_record(db: Client, table: str, record_id: str) -> dict | None:
    """Get a row by id, or None."""
    if not is_record_id(record_id):
        return None
    result = db.table(table).select("*").eq("id", record_id).limit(1).execute()
    return result.data[0] if result.data else None


async def patch_record(db: Client, table: str, record_id: str, fields: dict[str, Any]) -> dict | None:
    """Update the given columns of a row; returns the updated row or None."""
    result = db.table(table).update(fields).eq("id", record_id).execute()
    return result.data[0] if result.data else None


async def delete_record(db: Client, table: str, record_id: str) -> bool:
    """Hard-delete a row."""
    result = db.table(table).delete().eq("id", record_id).execute()
    return len(result.data) > 0


async def query_by_index(
    db: Client,
    table: str,
    key: dict[str, Any],
    order: tuple[str, bool] | None = None,
    limit: int | None = None,
    ranges: dict[str, tuple[Any, Any]] | None = None,
) -> list[dict]:
    """Equality query on an index key tuple.

    Args:
        db: Supabase client
        table: Table name
        key: Column -> value equality filters (the index prefix)
        order: (column, descending); creation order when omitted
        limit: Max rows to return
        ranges: Column -> (low, high) inclusive bounds on the index tail
    """
    query = db.table(table).select("*")
    for column, value in key.items():
        query = query.eq(column, value)
    for column, (low, high) in (ranges or {}).items():
        if low is not None:
            query = query.gte(column, low)
        if high is not None:
            query = query.lte(column, high)
    column, descending = order or CREATION_ORDER
    query = query.order(column, desc=descending)
    if limit is not None:
        query = query.limit(limit)
    return query.execute().data


async def check_connection(db: Client) -> None:
    """Round-trip a trivial query; raises on failure."""
    db.table(MEMORIES_TABLE).select("id").limit(1).execute()

"""Memory CRUD contract.

Async operations over the record store, each scoped to the calling user.
Reads return media-resolved ``MemoryView`` objects and degrade to an empty
result for an absent caller; writes raise ``Unauthenticated``,
``NotFoundOrUnauthorized`` or ``InvalidArgument``.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

from supabase import Client

from .config import get_settings
from .database import MEMORIES_TABLE, delete_record, insert_record, patch_record
from .errors import InvalidArgument, MemoryLaneError
from .layout import build_memory_map
from .logging_config import get_logger, log_memory_operation
from .media import resolve_all, resolve_media
from .models import (
    MEMORY_TYPES,
    MOODS,
    SUPERSET_FIELDS,
    LenientMemoryFields,
    MemoryFields,
    MemoryMap,
    MemoryView,
    validation_errors,
)
from .ownership import fetch_owned, fetch_owned_for_write, query_owned, require_caller
from .storage import BlobStore, UploadTarget
from .timeline import order_timeline

logger = get_logger("memorylane.memories")

_strict_fields = TypeAdapter(MemoryFields)

NEWEST_FIRST = ("date", True)


def now_ms() -> int:
    """Server clock in ms since epoch."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def validate_memory_fields(fields: dict[str, Any], strict: bool | None = None) -> dict[str, Any]:
    """Validate caller-supplied memory fields and return a full storage row.

    The row always carries every type-specific column, ``None`` where the
    caller gave nothing, so an update replaces all of them.
    """
    if strict is None:
        strict = get_settings().strict_variant_fields
    try:
        if strict:
            model = _strict_fields.validate_python(fields)
        else:
            model = LenientMemoryFields.model_validate(fields)
    except ValidationError as e:
        raise InvalidArgument("Invalid memory fields", validation_errors(e.errors()))

    row = dict.fromkeys(SUPERSET_FIELDS)
    row.update(model.model_dump(mode="json"))
    return row


# =============================================================================
# Reads
# =============================================================================

async def get_memory(db: Client, blobs: BlobStore, caller_id: str | None, memory_id: str) -> MemoryView | None:
    """The caller's memory, or None when it does not exist or is not theirs."""
    record = await fetch_owned(db, MEMORIES_TABLE, memory_id, caller_id)
    if record is None:
        return None
    return resolve_media(record, blobs)


async def list_memories(db: Client, blobs: BlobStore, caller_id: str | None) -> list[MemoryView]:
    """All of the caller's memories, newest first."""
    records = await query_owned(db, MEMORIES_TABLE, caller_id, order=NEWEST_FIRST)
    return resolve_all(records, blobs)


async def list_memories_by_type(
    db: Client, blobs: BlobStore, caller_id: str | None, memory_type: str
) -> list[MemoryView]:
    """The caller's memories of one type, newest first."""
    if memory_type not in MEMORY_TYPES:
        raise InvalidArgument(f"Unknown memory type: {memory_type}")
    records = await query_owned(db, MEMORIES_TABLE, caller_id, {"type": memory_type}, order=NEWEST_FIRST)
    return resolve_all(records, blobs)


async def list_memories_by_mood(db: Client, blobs: BlobStore, caller_id: str | None, mood: str) -> list[MemoryView]:
    """The caller's memories with a given mood, newest first."""
    if mood not in MOODS:
        raise InvalidArgument(f"Unknown mood: {mood}")
    records = await query_owned(db, MEMORIES_TABLE, caller_id, {"mood": mood}, order=NEWEST_FIRST)
    return resolve_all(records, blobs)


async def list_memories_by_calendar_range(
    db: Client,
    blobs: BlobStore,
    caller_id: str | None,
    start: int | None = None,
    end: int | None = None,
) -> list[MemoryView]:
    """Calendar memories whose ``calendar_date`` is within [start, end], soonest first."""
    if start is not None and end is not None and start > end:
        raise InvalidArgument("Calendar range start is after its end")
    records = await query_owned(
        db,
        MEMORIES_TABLE,
        caller_id,
        {"type": "calendar"},
        order=("calendar_date", False),
        ranges={"calendar_date": (start, end)},
    )
    return resolve_all(records, blobs)


async def get_timeline(db: Client, blobs: BlobStore, caller_id: str | None) -> list[MemoryView]:
    """The caller's memories in timeline order."""
    records = await query_owned(db, MEMORIES_TABLE, caller_id)
    return order_timeline(resolve_all(records, blobs))


async def get_memory_map(db: Client, blobs: BlobStore, caller_id: str | None) -> MemoryMap:
    """Map projection over the caller's memories in store (creation) order."""
    records = await query_owned(db, MEMORIES_TABLE, caller_id)
    return build_memory_map(resolve_all(records, blobs))


# =============================================================================
# Writes
# =============================================================================

async def create_memory(db: Client, caller_id: str | None, fields: dict[str, Any]) -> str:
    """Create a memory owned by the caller. Returns the new id."""
    caller_id = require_caller(caller_id)
    try:
        row = validate_memory_fields(fields)
    except InvalidArgument as e:
        log_memory_operation(caller_id, "create", MEMORIES_TABLE, None, False, e.detail)
        raise

    row.update({
        "owner_id": caller_id,
        "date": now_ms(),
        "connections": [],
    })
    record = await insert_record(db, MEMORIES_TABLE, row)
    memory_id = str(record["id"])
    log_memory_operation(caller_id, "create", MEMORIES_TABLE, memory_id, True)
    return memory_id


async def update_memory(db: Client, caller_id: str | None, memory_id: str, fields: dict[str, Any]) -> str:
    """Replace every editable field of the caller's memory.

    ``id``, ``owner_id``, ``date`` and ``connections`` are never touched.
    """
    try:
        await fetch_owned_for_write(db, MEMORIES_TABLE, memory_id, caller_id, kind="Memory")
        row = validate_memory_fields(fields)
    except MemoryLaneError as e:
        log_memory_operation(caller_id, "update", MEMORIES_TABLE, memory_id, False, e.detail)
        raise

    await patch_record(db, MEMORIES_TABLE, memory_id, row)
    log_memory_operation(caller_id, "update", MEMORIES_TABLE, memory_id, True)
    return memory_id


async def delete_memory(db: Client, caller_id: str | None, memory_id: str) -> str:
    """Hard-delete the caller's memory.

    Media blobs and references held by other records (connections, reminder
    and suggestion back-references) are left as they are and may dangle.
    """
    try:
        await fetch_owned_for_write(db, MEMORIES_TABLE, memory_id, caller_id, kind="Memory")
    except MemoryLaneError as e:
        log_memory_operation(caller_id, "delete", MEMORIES_TABLE, memory_id, False, e.detail)
        raise

    await delete_record(db, MEMORIES_TABLE, memory_id)
    log_memory_operation(caller_id, "delete", MEMORIES_TABLE, memory_id, True)
    return memory_id


async def request_upload_target(blobs: BlobStore, caller_id: str | None) -> UploadTarget:
    """Signed, time-bounded upload target for a media file."""
    caller_id = require_caller(caller_id)
    target = blobs.create_upload_target(caller_id)
    logger.info(f"UPLOAD TARGET | {caller_id} | {target.key}")
    return target
